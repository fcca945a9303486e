from __future__ import annotations

from kvmetrics.docs.catalog import merge_catalog, sort_catalog
from kvmetrics.metrics.descriptors import MetricDescriptor


def _d(name: str, mtype: str = 'Gauge') -> MetricDescriptor:
    return MetricDescriptor(name, f'{name} description.', mtype)


def test_merge_sorts_by_name():
    parsed = [_d('kubevirt_vmi_b'), _d('kubevirt_vmi_a')]
    static = [_d('kubevirt_migrate_vmi_x')]
    rules = [_d('kubevirt_virt_api_up_total')]
    out = merge_catalog(parsed, static, rules)
    assert [m.name for m in out] == [
        'kubevirt_migrate_vmi_x',
        'kubevirt_virt_api_up_total',
        'kubevirt_vmi_a',
        'kubevirt_vmi_b',
    ]


def test_merge_size_is_sum_of_inputs():
    parsed = [_d(f'kubevirt_p{i}') for i in range(5)]
    static = [_d(f'kubevirt_s{i}') for i in range(3)]
    rules = [_d(f'kubevirt_r{i}') for i in range(4)]
    assert len(merge_catalog(parsed, static, rules)) == 12


def test_duplicates_are_preserved():
    scraped = MetricDescriptor('kubevirt_vmi_phase_transition_time_seconds', 'From scrape.', 'Histogram')
    static = MetricDescriptor('kubevirt_vmi_phase_transition_time_seconds', 'From registry.', 'Histogram')
    out = merge_catalog([scraped], [static], [])
    assert len(out) == 2
    assert {m.description for m in out} == {'From scrape.', 'From registry.'}


def test_sort_is_idempotent():
    once = merge_catalog([_d('kubevirt_c'), _d('kubevirt_a')], [_d('kubevirt_b')], [])
    assert sort_catalog(once) == once
    assert merge_catalog(once, [], []) == once


def test_code_point_ordering():
    out = sort_catalog([_d('kubevirt_a'), _d('kubevirt_Z'), _d('kubevirt_0')])
    assert [m.name for m in out] == ['kubevirt_0', 'kubevirt_Z', 'kubevirt_a']


def test_inputs_not_mutated():
    parsed = [_d('kubevirt_b'), _d('kubevirt_a')]
    before = list(parsed)
    merge_catalog(parsed, [], [])
    assert parsed == before


def test_empty_sources():
    assert merge_catalog([], [], []) == []
