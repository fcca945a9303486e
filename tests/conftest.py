"""Pytest configuration for the metrics documentation generator.

Responsibilities:
1. Ensure project root on sys.path (scripts and tests run without install).
2. Scrub KV_* environment variables so settings always start from defaults.
"""
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _clean_kv_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith('KV_'):
            monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture()
def sample_exposition() -> str:
    return (
        '# HELP kubevirt_vmi_count some vm count.\n'
        '# TYPE kubevirt_vmi_count gauge\n'
        'kubevirt_vmi_count 3\n'
        '# HELP other_metric_x desc.\n'
        '# TYPE other_metric_x counter\n'
        'other_metric_x 1\n'
        '# HELP kubevirt_vmi_vcpu_wait_seconds_total amount of time spent by each vcpu while waiting on I/O.\n'
        '# TYPE kubevirt_vmi_vcpu_wait_seconds_total counter\n'
        'kubevirt_vmi_vcpu_wait_seconds_total{id="0"} 0.0\n'
    )
