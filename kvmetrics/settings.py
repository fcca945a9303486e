"""Documentation generator settings.

Single-pass environment hydration object so pipeline modules receive plain
data instead of reading os.environ themselves. CLI flags override individual
fields via ``dataclasses.replace`` after hydration.

Behavior: PURE DATA CONTAINER (no side-effects) except an optional one-time
debug log of the resolved values.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .env_adapter import get_bool, get_csv, get_str

__all__ = ["DocGenSettings", "DEFAULT_OUTPUT", "DEFAULT_METRIC_FILTER", "DEFAULT_COLLECTORS"]

DEFAULT_OUTPUT = "newmetrics.md"
DEFAULT_METRIC_FILTER = "kubevirt_"
DEFAULT_COLLECTORS = ("domainstats", "vms", "migrations")

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DocGenSettings:
    output: str = DEFAULT_OUTPUT
    metric_filter: str = DEFAULT_METRIC_FILTER
    # Abort the parse on a short HELP/TYPE line instead of skipping it
    strict: bool = False
    collectors: tuple[str, ...] = DEFAULT_COLLECTORS
    # prometheus_client process/platform/gc collectors (filtered out of the catalog)
    runtime_collectors: bool = False
    rules_namespace: str = ""
    extra_rules: str | None = None
    log_level: str = "INFO"

    # Raw env snapshot (debug / diagnostics)
    _env_snapshot: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> DocGenSettings:
        collectors = get_csv("KV_DOCGEN_COLLECTORS", list(DEFAULT_COLLECTORS), transform=str.lower, env=env)
        settings = cls(
            output=get_str("KV_DOCGEN_OUTPUT", DEFAULT_OUTPUT, env=env) or DEFAULT_OUTPUT,
            metric_filter=get_str("KV_DOCGEN_METRIC_FILTER", DEFAULT_METRIC_FILTER, env=env),
            strict=get_bool("KV_DOCGEN_STRICT", False, env=env),
            collectors=tuple(collectors),
            runtime_collectors=get_bool("KV_DOCGEN_RUNTIME_COLLECTORS", False, env=env),
            rules_namespace=get_str("KV_DOCGEN_RULES_NAMESPACE", "", env=env),
            extra_rules=get_str("KV_DOCGEN_EXTRA_RULES", "", env=env) or None,
            log_level=get_str("KV_LOG_LEVEL", "INFO", env=env).upper() or "INFO",
            _env_snapshot={k: v for k, v in (env if env is not None else os.environ).items() if k.startswith("KV_")},
        )
        logger.debug(
            "docgen.settings output=%s filter=%s strict=%s collectors=%s runtime=%s rules_ns=%r extra_rules=%s",
            settings.output, settings.metric_filter, int(settings.strict), ",".join(settings.collectors),
            int(settings.runtime_collectors), settings.rules_namespace, settings.extra_rules or "-",
        )
        return settings

