"""Metrics that exist in code but are absent from the default exposition.

Some families are only registered on a non-default code path (an active
migration, a phase transition being observed, an operator leader election),
so a scrape of the default collectors never shows them. They are documented
from this hand-maintained list instead; add an entry here whenever such a
metric is introduced.
"""
from __future__ import annotations

from ..monitoring.collectors import (
    MIGRATE_VMI_DATA_PROCESSED,
    MIGRATE_VMI_DATA_REMAINING,
    MIGRATE_VMI_DIRTY_MEMORY_RATE,
    MIGRATE_VMI_DISK_TRANSFER_RATE,
    MIGRATE_VMI_MEMORY_TRANSFER_RATE,
)
from .descriptors import MetricDescriptor

__all__ = ["not_exposed_metrics"]

_GAUGE = "Gauge"
_HISTOGRAM = "Histogram"


def not_exposed_metrics() -> list[MetricDescriptor]:
    """Return a fresh list; callers may extend it without affecting other runs."""
    return [
        MetricDescriptor(MIGRATE_VMI_DATA_PROCESSED,
                         "The total Guest OS data processed and migrated to the new VM.", _GAUGE),
        MetricDescriptor(MIGRATE_VMI_DATA_REMAINING,
                         "The remaining guest OS data to be migrated to the new VM.", _GAUGE),
        MetricDescriptor(MIGRATE_VMI_DIRTY_MEMORY_RATE,
                         "The rate of memory being dirty in the Guest OS.", _GAUGE),
        MetricDescriptor(MIGRATE_VMI_MEMORY_TRANSFER_RATE,
                         "The rate at which the memory is being transferred.", _GAUGE),
        MetricDescriptor(MIGRATE_VMI_DISK_TRANSFER_RATE,
                         "The rate at which the disk is being transferred.", _GAUGE),
        MetricDescriptor("kubevirt_vmi_phase_count",
                         "Sum of VMIs per phase and node. `phase` can be one of the following: "
                         "[`Pending`, `Scheduling`, `Scheduled`, `Running`, `Succeeded`, `Failed`, `Unknown`].", _GAUGE),
        MetricDescriptor("kubevirt_vmi_non_evictable",
                         "Indication for a VirtualMachine that its eviction strategy is set to Live Migration but is not migratable.", _GAUGE),
        MetricDescriptor("kubevirt_vmi_migration_phase_transition_time_from_creation_seconds",
                         "Histogram of VM migration phase transitions duration from creation time in seconds.", _HISTOGRAM),
        MetricDescriptor("kubevirt_vmi_phase_transition_time_seconds",
                         "Histogram of VM phase transitions duration between different phases in seconds.", _HISTOGRAM),
        MetricDescriptor("kubevirt_vmi_phase_transition_time_from_creation_seconds",
                         "Histogram of VM phase transitions duration from creation time in seconds.", _HISTOGRAM),
        MetricDescriptor("kubevirt_vmi_phase_transition_time_from_deletion_seconds",
                         "Histogram of VM phase transitions duration from deletion time in seconds.", _HISTOGRAM),
        MetricDescriptor("kubevirt_virt_operator_leading_status",
                         "Indication for an operating virt-operator.", _GAUGE),
        MetricDescriptor("kubevirt_virt_operator_ready_status",
                         "Indication for a virt-operator that is ready to take the lead.", _GAUGE),
    ]
