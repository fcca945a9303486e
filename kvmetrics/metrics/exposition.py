"""Prometheus text exposition parser (HELP/TYPE metadata only).

The text format carries metric metadata as loosely paired comment lines::

    # HELP kubevirt_vmi_phase_count Sum of VMIs per phase and node.
    # TYPE kubevirt_vmi_phase_count gauge
    kubevirt_vmi_phase_count{node="n1",phase="running"} 3

Only HELP lines whose metric name contains the namespace filter are extracted.
For each, the TYPE is located by scanning FORWARD through the same line
iterator; lines consumed by that scan are not revisited, so a HELP line that
appears before the matching TYPE line of the previous metric is skipped.
Well-formed exposition output always emits HELP and TYPE back to back, which
keeps this single pass exact.

Malformed lines (a HELP line without a name, a TYPE line without a type) are
skipped with a warning by default; ``strict=True`` turns them into ``MalformedLineError``.
A HELP line whose TYPE never shows up yields an empty type, which is not an
error.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from ..errors import ExpositionReadError, MalformedLineError
from .descriptors import MetricDescriptor, title_first

logger = logging.getLogger(__name__)

__all__ = [
    "HELP_PREFIX",
    "TYPE_PREFIX",
    "parse_help_line",
    "parse_type_line",
    "parse_exposition",
]

HELP_PREFIX = "# HELP "
TYPE_PREFIX = "# TYPE "

_MIN_TOKENS = 4  # '#', keyword, name, payload


def parse_help_line(line: str, lineno: int = 0) -> tuple[str, str]:
    """Return ``(name, description)`` for a HELP line.

    The description is every token after the name rejoined with single spaces,
    first letter upper-cased. An empty docstring is exposed as
    ``# HELP <name> `` and yields an empty description; only a missing name is
    malformed.
    """
    tokens = line.split()
    if len(tokens) < _MIN_TOKENS - 1:
        raise MalformedLineError(lineno, line, "HELP line needs a metric name")
    words = tokens[3:]
    if words:
        words[0] = title_first(words[0])
    return tokens[2], " ".join(words)


def parse_type_line(line: str, lineno: int = 0) -> tuple[str, str]:
    """Return ``(name, type)`` for a TYPE line, type first-letter upper-cased."""
    tokens = line.split()
    if len(tokens) < _MIN_TOKENS:
        raise MalformedLineError(lineno, line, "TYPE line needs a metric name and a type")
    return tokens[2], title_first(tokens[3])


def _numbered(lines: Iterable[str]) -> Iterator[tuple[int, str]]:
    it = iter(lines)
    lineno = 0
    while True:
        try:
            line = next(it)
        except StopIteration:
            return
        except (OSError, UnicodeDecodeError) as e:
            raise ExpositionReadError(f"failed to parse metrics from prometheus endpoint, {e}") from e
        lineno += 1
        yield lineno, line.rstrip("\r\n")


def _declared_name(line: str) -> str | None:
    tokens = line.split(maxsplit=3)
    return tokens[2] if len(tokens) >= 3 else None


def _on_malformed(err: MalformedLineError, strict: bool) -> None:
    if strict:
        raise err
    logger.warning(
        "Skipping malformed exposition line %d (%s): %r", err.lineno, err.reason, err.line,
        extra={"event": "docgen.parse.malformed", "line_number": err.lineno},
    )


def _scan_type(numbered: Iterator[tuple[int, str]], name: str, strict: bool) -> str:
    for lineno, line in numbered:
        if not line.startswith(TYPE_PREFIX):
            continue
        declared = _declared_name(line)
        if declared is not None and declared != name:
            continue
        try:
            _, mtype = parse_type_line(line, lineno)
        except MalformedLineError as e:
            _on_malformed(e, strict)
            continue
        return mtype
    return ""


def parse_exposition(
    lines: Iterable[str] | str,
    *,
    metric_filter: str = "kubevirt_",
    strict: bool = False,
) -> list[MetricDescriptor]:
    """Extract one ``MetricDescriptor`` per qualifying HELP line, in stream order.

    ``lines`` may be any iterable of text lines (open file, ``io.StringIO``,
    list) or a whole exposition body as a single string.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()
    numbered = _numbered(lines)
    out: list[MetricDescriptor] = []
    missing_type = 0
    for lineno, line in numbered:
        if not line.startswith(HELP_PREFIX):
            continue
        declared = _declared_name(line)
        if declared is not None and metric_filter not in declared:
            continue
        try:
            name, description = parse_help_line(line, lineno)
        except MalformedLineError as e:
            _on_malformed(e, strict)
            continue
        mtype = _scan_type(numbered, name, strict)
        if not mtype:
            missing_type += 1
            logger.debug("No TYPE line found for %s", name)
        out.append(MetricDescriptor(name=name, description=description, mtype=mtype))
    logger.debug(
        "Parsed %d metric descriptors (%d without type)", len(out), missing_type,
        extra={"event": "docgen.parse", "metric_count": len(out), "missing_type": missing_type},
    )
    return out
