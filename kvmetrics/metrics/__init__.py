"""Metric descriptor model, exposition parsing and the not-exposed registry."""

from .descriptors import MetricDescriptor, title_first
from .exposition import parse_exposition, parse_help_line, parse_type_line
from .not_exposed import not_exposed_metrics

__all__ = [
    "MetricDescriptor",
    "title_first",
    "parse_exposition",
    "parse_help_line",
    "parse_type_line",
    "not_exposed_metrics",
]
