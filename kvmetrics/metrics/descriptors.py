"""Metric descriptor used as the documentation unit.

A descriptor is the (name, description, type) triple rendered as one block of
the metrics document. Producers (exposition parser, not-exposed registry,
recording rule adapter) all emit this shape so the catalog merger never needs
to know where an entry came from.
"""
from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "MetricDescriptor",
    "MetricType",
    "title_first",
]

MetricType = str  # open vocabulary ("Gauge", "Counter", "Histogram", ...); never validated


@dataclass(frozen=True)
class MetricDescriptor:
    name: str
    description: str
    mtype: MetricType = ""


def title_first(word: str) -> str:
    """Upper-case the first character of ``word`` and keep the rest verbatim.

    ``"gauge" -> "Gauge"``, ``"vCPU" -> "VCPU"``. Acronyms further in the token are
    left alone, unlike ``str.title`` which would lower-case them. Hyphenated or
    dotted tokens are not split: ``"vm-count" -> "Vm-count"``.
    """
    if not word:
        return word
    return word[0].upper() + word[1:]
