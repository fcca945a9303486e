from __future__ import annotations

"""Environment adapter for the documentation generator.

Provides consistent helpers to parse environment variables with sane defaults
and shared truthy semantics. ``DocGenSettings.from_env`` is the only intended
caller so that direct os.getenv usage stays out of the pipeline modules.
"""
import os
from collections.abc import Callable, Mapping

_TRUTHY = {"1", "true", "yes", "on", "y"}


def _source(env: Mapping[str, str] | None) -> Mapping[str, str]:
    return env if env is not None else os.environ


def get_str(name: str, default: str = "", env: Mapping[str, str] | None = None) -> str:
    v = _source(env).get(name)
    if v is None:
        return default
    return v


def get_bool(name: str, default: bool = False, env: Mapping[str, str] | None = None) -> bool:
    v = _source(env).get(name)
    if v is None:
        return default
    return v.strip().lower() in _TRUTHY


def get_csv(
    name: str,
    default: list[str] | None = None,
    *,
    sep: str = ",",
    transform: Callable[[str], str] | None = None,
    env: Mapping[str, str] | None = None,
) -> list[str]:
    v = _source(env).get(name)
    if v is None:
        return list(default or [])
    parts = [p.strip() for p in v.split(sep) if p.strip()]
    if transform:
        parts = [transform(p) for p in parts]
    return parts


__all__ = [
    "get_str",
    "get_bool",
    "get_csv",
]
