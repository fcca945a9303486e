"""Metrics document assembly: catalog merge, rendering and the generator driver."""

from .catalog import MetricCatalog, merge_catalog, sort_catalog
from .render import render_document, render_to_string, write_document

__all__ = [
    "MetricCatalog",
    "merge_catalog",
    "sort_catalog",
    "render_document",
    "render_to_string",
    "write_document",
]
