"""Markdown rendering of the metric catalog.

Layout: generation banner, title, background, the fixed metrics-list preamble,
one ``### <name>`` block per descriptor in catalog order, footer. The renderer
never reorders; ordering belongs to ``merge_catalog``.
"""
from __future__ import annotations

import io
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from ..errors import DocumentWriteError
from ..metrics.descriptors import MetricDescriptor

logger = logging.getLogger(__name__)

__all__ = [
    "OPENING",
    "FOOTER",
    "render_document",
    "render_to_string",
    "write_document",
]

GEN_FILE_COMMENT = (
    "<!--\n"
    "\tThis is an auto-generated file.\n"
    "\tPLEASE DO NOT EDIT THIS FILE.\n"
    "\tSee \"Developing new metrics\" below how to generate this file\n"
    "-->"
)
TITLE = "# KubeVirt metrics\n"
BACKGROUND = (
    "This document aims to help users that are not familiar with all metrics exposed by different KubeVirt components.\n"
    "All metrics documented here are auto-generated by the utility tool `scripts/gen_metrics_doc.py` "
    "and reflects exactly what is being exposed.\n\n"
)
KV_SPECIFIC_METRICS = (
    "## KubeVirt Metrics List\n"
    "### kubevirt_info\n"
    "Version information.\n\n"
)
OPENING = GEN_FILE_COMMENT + "\n\n" + TITLE + BACKGROUND + KV_SPECIFIC_METRICS

FOOTER_HEADING = "## Developing new metrics\n"
FOOTER_CONTENT = (
    "After developing new metrics or changing old ones, please run `python scripts/gen_metrics_doc.py` to regenerate this document.\n\n"
    "If you feel that the new metric doesn't follow these rules, please change `scripts/gen_metrics_doc.py` with your needs.\n"
)
FOOTER = FOOTER_HEADING + FOOTER_CONTENT


def _render_metric(m: MetricDescriptor, fh: TextIO) -> None:
    fh.write(f"### {m.name}\n")
    fh.write(f"{m.description} Type: {m.mtype}.\n")
    fh.write("\n")


def render_document(catalog: Iterable[MetricDescriptor], fh: TextIO) -> int:
    """Write the whole document to ``fh``; returns the number of metric blocks."""
    fh.write(OPENING)
    count = 0
    for m in catalog:
        _render_metric(m, fh)
        count += 1
    fh.write(FOOTER)
    return count


def render_to_string(catalog: Iterable[MetricDescriptor]) -> str:
    buf = io.StringIO()
    render_document(catalog, buf)
    return buf.getvalue()


def write_document(path: str | Path, catalog: Iterable[MetricDescriptor]) -> Path:
    """Render into a temp file beside ``path`` and atomically move it into place.

    A failed run leaves the previous document (or nothing) behind, never a
    truncated one.
    """
    dest = Path(path)
    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", newline="\n", dir=dest.parent,
            prefix=f".{dest.name}.", suffix=".tmp", delete=False,
        ) as fh:
            tmp_name = fh.name
            count = render_document(catalog, fh)
        # mkstemp creates 0600 files
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, dest)
    except OSError as e:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
        raise DocumentWriteError(f"failed to write metrics document {dest}: {e}") from e
    logger.info(
        "Wrote %s (%d metrics)", dest, count,
        extra={"event": "docgen.write", "output": str(dest), "metric_count": count},
    )
    return dest
