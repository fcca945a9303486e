"""Recording rule definitions and their documentation adapter.

The operator ships a fixed set of Prometheus recording rules. Each definition
carries, on top of the Prometheus ``record``/``expr`` pair, a human readable
description and a value-type label so the derived series can be documented
next to the scraped metrics.

Additional definitions can be supplied as YAML in the usual rule-group layout
with two documentation keys per rule::

    groups:
      - name: extra.rules
        rules:
          - record: kubevirt_example_total
            expr: sum(kubevirt_example)
            description: Example derived series.
            type: gauge

Such a file is a documentation input, not a loadable Prometheus rule file;
``render_rule_groups`` strips the documentation keys for that purpose.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from ..errors import RuleDefinitionError
from ..metrics.descriptors import MetricDescriptor, title_first

logger = logging.getLogger(__name__)

__all__ = [
    "RecordingRule",
    "get_recording_rules",
    "load_recording_rules",
    "rules_to_descriptors",
    "render_rule_groups",
    "dump_rule_groups",
]


@dataclass(frozen=True)
class RecordingRule:
    record: str
    expr: str
    description: str = ""
    mtype: str = "gauge"


def get_recording_rules(namespace: str) -> list[RecordingRule]:
    """Return the operator's recording rules for an install in ``namespace``."""
    ns = namespace
    return [
        RecordingRule(
            "kubevirt_virt_api_up_total",
            f"sum(up{{namespace='{ns}', pod=~'virt-api-.*'}}) or vector(0)",
            "The number of virt-api pods that are up.",
        ),
        RecordingRule(
            "kubevirt_allocatable_nodes_count",
            "count(count (kube_node_status_allocatable) by (node))",
            "The number of nodes in the cluster that have allocatable resources.",
        ),
        RecordingRule(
            "kubevirt_kvm_available_nodes_count",
            "count(kube_node_status_allocatable{resource=\"devices_kubevirt_io_kvm\"} != 0) or vector(0)",
            "The number of nodes in the cluster that have the devices.kubevirt.io/kvm resource available.",
        ),
        RecordingRule(
            "kubevirt_virt_controller_up_total",
            f"sum(up{{pod=~'virt-controller-.*', namespace='{ns}'}}) or vector(0)",
            "The number of virt-controller pods that are up.",
        ),
        RecordingRule(
            "kubevirt_virt_controller_ready_total",
            f"sum(kubevirt_virt_controller_ready_status{{namespace='{ns}'}}) or vector(0)",
            "The number of virt-controller pods that are ready.",
        ),
        RecordingRule(
            "kubevirt_virt_operator_up_total",
            f"sum(up{{namespace='{ns}', pod=~'virt-operator-.*'}}) or vector(0)",
            "The number of virt-operator pods that are up.",
        ),
        RecordingRule(
            "kubevirt_virt_operator_ready_total",
            f"sum(kubevirt_virt_operator_ready_status{{namespace='{ns}'}}) or vector(0)",
            "The number of virt-operator pods that are ready.",
        ),
        RecordingRule(
            "kubevirt_virt_operator_leading_total",
            f"sum(kubevirt_virt_operator_leading_status{{namespace='{ns}'}})",
            "The number of virt-operator pods that are leading.",
        ),
        RecordingRule(
            "kubevirt_virt_handler_up_total",
            f"sum(up{{pod=~'virt-handler-.*', namespace='{ns}'}}) or vector(0)",
            "The number of virt-handler pods that are up.",
        ),
        RecordingRule(
            "kubevirt_vmi_memory_used_bytes",
            "kubevirt_vmi_memory_available_bytes-kubevirt_vmi_memory_usable_bytes",
            "Amount of `used` memory as seen by the domain.",
        ),
        RecordingRule(
            "kubevirt_vm_container_free_memory_bytes_based_on_working_set_bytes",
            "sum by(pod, container, namespace) (kube_pod_container_resource_requests{pod=~'virt-launcher-.*', container='compute', resource='memory'}"
            "- on(pod,container, namespace) container_memory_working_set_bytes{pod=~'virt-launcher-.*', container='compute'})",
            "The current available memory of the VM containers based on the working set.",
        ),
        RecordingRule(
            "kubevirt_vm_container_free_memory_bytes_based_on_rss",
            "sum by(pod, container, namespace) (kube_pod_container_resource_requests{pod=~'virt-launcher-.*', container='compute', resource='memory'}"
            "- on(pod,container, namespace) container_memory_rss{pod=~'virt-launcher-.*', container='compute'})",
            "The current available memory of the VM containers based on the rss.",
        ),
        RecordingRule(
            "kubevirt_vmsnapshot_persistentvolumeclaim_labels",
            "label_replace(label_replace(kube_persistentvolumeclaim_labels{label_restore_kubevirt_io_source_vm_name!='', "
            "label_restore_kubevirt_io_source_vm_namespace!=''} == 1, 'vm_namespace', '$1', "
            "'label_restore_kubevirt_io_source_vm_namespace', '(.*)'), 'vm_name', '$1', 'label_restore_kubevirt_io_source_vm_name', '(.*)')",
            "Returns the labels of the persistent volume claims that are used for restoring virtual machines.",
            "info",
        ),
        RecordingRule(
            "kubevirt_vmsnapshot_disks_restored_from_source_total",
            "sum by(vm_name, vm_namespace) (kubevirt_vmsnapshot_persistentvolumeclaim_labels)",
            "Returns the total number of virtual machine disks restored from the source virtual machine.",
        ),
        RecordingRule(
            "kubevirt_vmsnapshot_disks_restored_from_source_bytes",
            "sum by(vm_name, vm_namespace) (kube_persistentvolumeclaim_resource_requests_storage_bytes * on(persistentvolumeclaim, namespace) "
            "group_left(vm_name, vm_namespace) kubevirt_vmsnapshot_persistentvolumeclaim_labels)",
            "Returns the amount of space in bytes restored from the source virtual machine.",
        ),
    ]


def load_recording_rules(path: str | Path) -> list[RecordingRule]:
    """Read rule definitions from a YAML rule-group file.

    Rules without ``record`` (alerting rules) are ignored. A missing ``type``
    yields an empty type label, rendered as-is.
    """
    p = Path(path)
    try:
        data: Any = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise RuleDefinitionError(f"cannot read recording rules file {p}: {e}") from e
    except yaml.YAMLError as e:
        raise RuleDefinitionError(f"invalid YAML in recording rules file {p}: {e}") from e
    if not isinstance(data, dict):
        raise RuleDefinitionError(f"recording rules file {p} must contain a mapping with 'groups'")
    out: list[RecordingRule] = []
    for g in data.get("groups", []) or []:
        if not isinstance(g, dict):
            raise RuleDefinitionError(f"rule group in {p} is not a mapping: {g!r}")
        for r in g.get("rules", []) or []:
            if not isinstance(r, dict):
                continue
            rec = r.get("record")
            if not rec:
                continue
            out.append(RecordingRule(
                record=str(rec),
                expr=str(r.get("expr") or "").strip(),
                description=str(r.get("description") or "").strip(),
                mtype=str(r.get("type") or ""),
            ))
    logger.info("Loaded %d recording rules from %s", len(out), p)
    return out


def rules_to_descriptors(rules: Iterable[RecordingRule]) -> list[MetricDescriptor]:
    return [
        MetricDescriptor(name=r.record, description=r.description, mtype=title_first(r.mtype))
        for r in rules
    ]


def render_rule_groups(rules: Iterable[RecordingRule], name: str = "kubevirt.rules") -> dict[str, Any]:
    """Prometheus rule-group mapping (``record``/``expr`` only)."""
    return {
        "groups": [
            {
                "name": name,
                "rules": [{"record": r.record, "expr": r.expr} for r in rules],
            }
        ]
    }


def dump_rule_groups(rules: Iterable[RecordingRule], name: str = "kubevirt.rules") -> str:
    return yaml.safe_dump(render_rule_groups(rules, name), sort_keys=False)
