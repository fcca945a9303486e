"""Exposition sources: fake collectors, the in-process handler and recording rules."""

from .collectors import COLLECTORS, build_registry
from .handler import ScrapeResult, metrics_handler, scrape
from .rules import RecordingRule, get_recording_rules, load_recording_rules, rules_to_descriptors

__all__ = [
    "COLLECTORS",
    "build_registry",
    "ScrapeResult",
    "metrics_handler",
    "scrape",
    "RecordingRule",
    "get_recording_rules",
    "load_recording_rules",
    "rules_to_descriptors",
]
