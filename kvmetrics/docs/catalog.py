"""Catalog merge and ordering.

The three descriptor producers are independent; merging is plain
concatenation followed by one sort on ``name``. Entries are never
deduplicated: a metric documented both by the scrape and by the not-exposed
registry is rendered twice, which makes the overlap visible in review.
"""
from __future__ import annotations

from collections.abc import Iterable

from ..metrics.descriptors import MetricDescriptor

__all__ = ["MetricCatalog", "merge_catalog", "sort_catalog"]

MetricCatalog = list[MetricDescriptor]


def sort_catalog(descriptors: Iterable[MetricDescriptor]) -> MetricCatalog:
    return sorted(descriptors, key=lambda d: d.name)


def merge_catalog(
    parsed: Iterable[MetricDescriptor],
    static: Iterable[MetricDescriptor],
    rules: Iterable[MetricDescriptor],
) -> MetricCatalog:
    """Concatenate the three sources and return a new list sorted by name."""
    return sort_catalog([*parsed, *static, *rules])
