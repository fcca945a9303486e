"""Fake KubeVirt collectors used to populate the documented exposition.

Each collector yields every metric family its component exposes with a single
synthetic sample, so the exposition carries the HELP and TYPE lines for the
whole family set without needing a live cluster. Counter families are exposed
with the ``_total`` suffix prometheus_client appends in the text format.

Registration is explicit: ``build_registry`` creates a fresh
``CollectorRegistry`` and registers exactly the collectors it is asked for.
Nothing is registered at import time, so which families end up documented is
decided by the caller (settings / CLI) and not by import order.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence

from prometheus_client import CollectorRegistry
from prometheus_client.core import (
    CounterMetricFamily,
    GaugeMetricFamily,
    HistogramMetricFamily,
    Metric,
)
from prometheus_client.gc_collector import GCCollector
from prometheus_client.platform_collector import PlatformCollector
from prometheus_client.process_collector import ProcessCollector
from prometheus_client.registry import Collector

from ..errors import UnknownCollectorError

logger = logging.getLogger(__name__)

__all__ = [
    "MIGRATE_VMI_DATA_PROCESSED",
    "MIGRATE_VMI_DATA_REMAINING",
    "MIGRATE_VMI_DIRTY_MEMORY_RATE",
    "MIGRATE_VMI_MEMORY_TRANSFER_RATE",
    "MIGRATE_VMI_DISK_TRANSFER_RATE",
    "DomainStatsCollector",
    "VMCollector",
    "MigrationsCollector",
    "COLLECTORS",
    "build_registry",
]

# Migration progress gauges. The domain stats collector only reports them while a
# migration is in flight, so they never show up in a default scrape.
MIGRATE_VMI_DATA_PROCESSED = "kubevirt_migrate_vmi_data_processed_bytes"
MIGRATE_VMI_DATA_REMAINING = "kubevirt_migrate_vmi_data_remaining_bytes"
MIGRATE_VMI_DIRTY_MEMORY_RATE = "kubevirt_migrate_vmi_dirty_memory_rate_bytes"
MIGRATE_VMI_MEMORY_TRANSFER_RATE = "kubevirt_migrate_vmi_memory_transfer_rate_bytes"
MIGRATE_VMI_DISK_TRANSFER_RATE = "kubevirt_migrate_vmi_disk_transfer_rate_bytes"

_VMI_LABELS = ["node", "namespace", "name"]
_VMI_SAMPLE = ["testnode", "testns", "testvmi"]


def _gauge(name: str, doc: str, labels: Sequence[str] = (), values: Sequence[str] = (), value: float = 0.0) -> GaugeMetricFamily:
    fam = GaugeMetricFamily(name, doc, labels=list(labels))
    fam.add_metric(list(values), value)
    return fam


def _counter(name: str, doc: str, labels: Sequence[str] = (), values: Sequence[str] = (), value: float = 0.0) -> CounterMetricFamily:
    fam = CounterMetricFamily(name, doc, labels=list(labels))
    fam.add_metric(list(values), value)
    return fam


class DomainStatsCollector(Collector):
    """virt-handler per-VMI domain statistics (libvirt domstats)."""

    def __init__(self, migration_in_progress: bool = False) -> None:
        self.migration_in_progress = migration_in_progress

    def collect(self) -> Iterator[Metric]:
        labels, values = _VMI_LABELS, _VMI_SAMPLE
        yield _gauge("kubevirt_vmi_memory_resident_bytes",
                     "resident set size of the process running the domain.", labels, values, 1024.0)
        yield _gauge("kubevirt_vmi_memory_available_bytes",
                     "amount of usable memory as seen by the domain. This value may not be accurate if a balloon driver is in use or if the guest OS does not initialize all assigned pages",
                     labels, values, 2048.0)
        yield _gauge("kubevirt_vmi_memory_unused_bytes",
                     "the amount of memory left completely unused by the system. Memory that is available but used for reclaimable caches should NOT be reported as free.",
                     labels, values, 512.0)
        yield _gauge("kubevirt_vmi_memory_actual_balloon_bytes",
                     "current balloon size in bytes.", labels, values)
        yield _gauge("kubevirt_vmi_memory_domain_bytes_total",
                     "the amount of memory in bytes allocated to the domain. The `memory` value in domain xml file.",
                     labels, values)
        yield _gauge("kubevirt_vmi_memory_usable_bytes",
                     "the amount of memory which can be reclaimed by balloon without pushing the guest system to swap, corresponds to 'Available' in /proc/meminfo",
                     labels, values)
        yield _gauge("kubevirt_vmi_memory_swap_in_traffic_bytes_total",
                     "the total amount of data read from swap space of the guest in bytes.", labels, values)
        yield _gauge("kubevirt_vmi_memory_swap_out_traffic_bytes_total",
                     "the total amount of memory written out to swap space of the guest in bytes.", labels, values)
        yield _counter("kubevirt_vmi_memory_pgmajfault",
                       "the number of page faults when disk IO was required. Page faults occur when a process makes a valid access to virtual memory that is not available. When servicing the page fault, if disk IO is required, it is considered as major fault.",
                       labels, values)
        yield _counter("kubevirt_vmi_memory_pgminfault",
                       "the number of other page faults, when disk IO was not required. Page faults occur when a process makes a valid access to virtual memory that is not available. When servicing the page fault, if disk IO is NOT required, it is considered as minor fault.",
                       labels, values)
        yield _counter("kubevirt_vmi_vcpu_seconds",
                       "total amount of time spent in each state by each vcpu (cpu_time excluding hypervisor time). Where `id` is the vcpu identifier and `state` can be one of the following: [`OFFLINE`, `RUNNING`, `BLOCKED`].",
                       labels + ["id", "state"], values + ["0", "running"], 1.0)
        yield _counter("kubevirt_vmi_vcpu_wait_seconds",
                       "amount of time spent by each vcpu while waiting on I/O.", labels + ["id"], values + ["0"])
        yield _counter("kubevirt_vmi_cpu_affinity",
                       "details the cpu pinning map via boolean labels in the form of vcpu_X_cpu_Y.",
                       labels + ["vcpu_0_cpu_0"], values + ["true"], 1.0)
        yield _counter("kubevirt_vmi_network_receive_bytes_total",
                       "total network traffic received in bytes.", labels + ["interface"], values + ["eth0"])
        yield _counter("kubevirt_vmi_network_transmit_bytes_total",
                       "total network traffic transmitted in bytes.", labels + ["interface"], values + ["eth0"])
        yield _counter("kubevirt_vmi_network_receive_packets_dropped_total",
                       "the total number of rx packets dropped on vNIC interfaces.", labels + ["interface"], values + ["eth0"])
        yield _counter("kubevirt_vmi_network_transmit_packets_dropped_total",
                       "the total number of tx packets dropped on vNIC interfaces.", labels + ["interface"], values + ["eth0"])
        yield _counter("kubevirt_vmi_storage_iops_read_total",
                       "total number of I/O read operations.", labels + ["drive"], values + ["vda"])
        yield _counter("kubevirt_vmi_storage_iops_write_total",
                       "total number of I/O write operations.", labels + ["drive"], values + ["vda"])
        yield _counter("kubevirt_vmi_storage_read_traffic_bytes_total",
                       "total number of bytes read from storage.", labels + ["drive"], values + ["vda"])
        yield _counter("kubevirt_vmi_storage_write_traffic_bytes_total",
                       "total number of written bytes.", labels + ["drive"], values + ["vda"])
        yield _gauge("kubevirt_vmi_filesystem_capacity_bytes_total",
                     "total VM filesystem capacity in bytes.", labels + ["disk_name", "mount_point"], values + ["disk1", "/"])
        yield _gauge("kubevirt_vmi_filesystem_used_bytes",
                     "used VM filesystem capacity in bytes.", labels + ["disk_name", "mount_point"], values + ["disk1", "/"])
        if self.migration_in_progress:
            yield from self._migration_progress(labels, values)

    def _migration_progress(self, labels: list[str], values: list[str]) -> Iterator[Metric]:
        yield _gauge(MIGRATE_VMI_DATA_PROCESSED, "The total Guest OS data processed and migrated to the new VM.", labels, values)
        yield _gauge(MIGRATE_VMI_DATA_REMAINING, "The remaining guest OS data to be migrated to the new VM.", labels, values)
        yield _gauge(MIGRATE_VMI_DIRTY_MEMORY_RATE, "The rate of memory being dirty in the Guest OS.", labels, values)
        yield _gauge(MIGRATE_VMI_MEMORY_TRANSFER_RATE, "The rate at which the memory is being transferred.", labels, values)
        yield _gauge(MIGRATE_VMI_DISK_TRANSFER_RATE, "The rate at which the disk is being transferred.", labels, values)


class VMCollector(Collector):
    """virt-controller VM / VMI inventory metrics."""

    def collect(self) -> Iterator[Metric]:
        yield _gauge("kubevirt_vmi_outdated_count",
                     "indication for the total number of VirtualMachineInstance workloads that are not running within the most up-to-date version of the virt-launcher environment.")
        vm_labels = ["name", "namespace"]
        vm_values = ["testvm", "testns"]
        for status in ("error", "migrating", "non_running", "running", "starting"):
            yield _gauge(f"kubevirt_vm_{status}_status_last_transition_timestamp_seconds",
                         f"virtual Machine last transition timestamp to {status.replace('_', ' ')} status.",
                         vm_labels, vm_values)
        yield _gauge("kubevirt_vmsnapshot_succeeded_timestamp_seconds",
                     "returns the timestamp of successful virtual machine snapshot.",
                     vm_labels + ["snapshot_name"], vm_values + ["snap1"])
        hist = HistogramMetricFamily(
            "kubevirt_vmi_phase_transition_time_seconds",
            "histogram of VM phase transitions duration between different phases in seconds.",
            labels=["phase"],
        )
        hist.add_metric(["running"], buckets=[("0.5", 0.0), ("1.0", 1.0), ("+Inf", 1.0)], sum_value=0.8)
        yield hist


class MigrationsCollector(Collector):
    """virt-controller migration queue counts."""

    def collect(self) -> Iterator[Metric]:
        yield _gauge("kubevirt_migrate_vmi_pending_count", "number of current pending migrations.")
        yield _gauge("kubevirt_migrate_vmi_scheduling_count", "number of current scheduling migrations.")
        yield _gauge("kubevirt_migrate_vmi_running_count", "number of current running migrations.")
        mig_labels = ["vmi", "namespace"]
        mig_values = ["testvmi", "testns"]
        yield _gauge("kubevirt_migrate_vmi_succeeded", "indicates if the VMI migration succeeded.", mig_labels, mig_values, 1.0)
        yield _gauge("kubevirt_migrate_vmi_failed", "indicates if the VMI migration failed.", mig_labels, mig_values)


COLLECTORS: dict[str, type[Collector]] = {
    "domainstats": DomainStatsCollector,
    "vms": VMCollector,
    "migrations": MigrationsCollector,
}


def build_registry(collectors: Iterable[str] = tuple(COLLECTORS), *, runtime: bool = False) -> CollectorRegistry:
    """Return a fresh registry holding exactly the named collectors.

    ``runtime=True`` additionally registers the prometheus_client process,
    platform and GC collectors (python_*/process_* families).
    """
    registry = CollectorRegistry()
    names = list(collectors)
    for name in names:
        ctor = COLLECTORS.get(name)
        if ctor is None:
            raise UnknownCollectorError(
                f"unknown collector {name!r} (known: {', '.join(sorted(COLLECTORS))})"
            )
        registry.register(ctor())
    if runtime:
        ProcessCollector(registry=registry)
        PlatformCollector(registry=registry)
        GCCollector(registry=registry)
    logger.debug("Built collector registry collectors=%s runtime=%s", ",".join(names), int(runtime))
    return registry
