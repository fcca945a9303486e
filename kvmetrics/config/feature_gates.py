"""Deprecated feature-gate table.

Feature gates that graduated (GA), are being phased out (Deprecated) or were
removed (Discontinued). GA gates are implicitly enabled and Discontinued gates
implicitly disabled regardless of the cluster configuration; the table is
built once by ``build_deprecated_feature_gates`` which fills the default
warning message for entries that do not carry their own.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum

__all__ = [
    "State",
    "DeprecatedFeatureGate",
    "DEPRECATION_DOC_URL",
    "default_message",
    "build_deprecated_feature_gates",
    "DEPRECATED_FEATURE_GATES",
    "deprecated_feature_gate_info",
    "is_feature_gate_enabled",
]

DEPRECATION_DOC_URL = "https://github.com/kubevirt/kubevirt/blob/main/docs/deprecation.md"

LIVE_MIGRATION_GATE = "LiveMigration"
SRIOV_LIVE_MIGRATION_GATE = "SRIOVLiveMigration"
NON_ROOT_GATE = "NonRoot"
PSA_GATE = "PSA"
CPU_NODE_DISCOVERY_GATE = "CPUNodeDiscovery"
PASST_GATE = "Passt"


class State(str, Enum):
    GA = "General Availability"
    DEPRECATED = "Deprecated"
    DISCONTINUED = "Discontinued"


@dataclass(frozen=True)
class DeprecatedFeatureGate:
    name: str
    state: State
    message: str = ""


def default_message(name: str) -> str:
    return (
        f"feature gate {name} is deprecated, therefore it can be safely removed and is redundant. "
        f"For more info, please look at: {DEPRECATION_DOC_URL}"
    )


def build_deprecated_feature_gates(entries: Iterable[DeprecatedFeatureGate]) -> tuple[DeprecatedFeatureGate, ...]:
    """Return the table with empty messages replaced by ``default_message``.

    Entries are frozen; new instances are created rather than updated in place.
    """
    return tuple(e if e.message else replace(e, message=default_message(e.name)) for e in entries)


DEPRECATED_FEATURE_GATES = build_deprecated_feature_gates([
    DeprecatedFeatureGate(LIVE_MIGRATION_GATE, State.GA),
    DeprecatedFeatureGate(SRIOV_LIVE_MIGRATION_GATE, State.GA),
    DeprecatedFeatureGate(NON_ROOT_GATE, State.GA),
    DeprecatedFeatureGate(PSA_GATE, State.GA),
    DeprecatedFeatureGate(CPU_NODE_DISCOVERY_GATE, State.GA),
    DeprecatedFeatureGate(
        PASST_GATE, State.DEPRECATED,
        "Passt network binding will be deprecated next release. Please refer to Kubevirt user guide for alternatives.",
    ),
])

_BY_NAME = {g.name: g for g in DEPRECATED_FEATURE_GATES}


def deprecated_feature_gate_info(name: str) -> DeprecatedFeatureGate | None:
    return _BY_NAME.get(name)


def is_feature_gate_enabled(name: str, enabled_gates: Iterable[str]) -> bool:
    gate = deprecated_feature_gate_info(name)
    if gate is not None:
        if gate.state is State.GA:
            return True
        if gate.state is State.DISCONTINUED:
            return False
    return name in set(enabled_gates)
