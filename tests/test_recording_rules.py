from __future__ import annotations

import pytest
import yaml

from kvmetrics.errors import RuleDefinitionError
from kvmetrics.monitoring.rules import (
    RecordingRule,
    dump_rule_groups,
    get_recording_rules,
    load_recording_rules,
    render_rule_groups,
    rules_to_descriptors,
)


def test_namespace_embedded_in_expressions():
    rules = {r.record: r for r in get_recording_rules('kubevirt')}
    assert "namespace='kubevirt'" in rules['kubevirt_virt_api_up_total'].expr
    assert "namespace='kubevirt'" in rules['kubevirt_virt_handler_up_total'].expr


def test_rule_definitions_complete():
    rules = get_recording_rules('')
    records = [r.record for r in rules]
    assert len(records) == len(set(records))
    for r in rules:
        assert r.record.startswith('kubevirt_')
        assert r.expr
        assert r.description.endswith('.')
        assert r.mtype in {'gauge', 'info'}


def test_rules_adapter_title_cases_type():
    out = rules_to_descriptors([
        RecordingRule('kubevirt_a', 'sum(x)', 'A rule.', 'gauge'),
        RecordingRule('kubevirt_b', 'sum(y)', 'B rule.', 'counter'),
        RecordingRule('kubevirt_c', 'sum(z)', 'C rule.', ''),
    ])
    assert [(d.name, d.description, d.mtype) for d in out] == [
        ('kubevirt_a', 'A rule.', 'Gauge'),
        ('kubevirt_b', 'B rule.', 'Counter'),
        ('kubevirt_c', 'C rule.', ''),
    ]


def test_load_rules_file(tmp_path):
    p = tmp_path / 'extra_rules.yml'
    p.write_text(yaml.safe_dump({
        'groups': [
            {
                'name': 'extra.rules',
                'rules': [
                    {'record': 'kubevirt_extra_total', 'expr': 'sum(kubevirt_extra) ', 'description': 'Extra series.', 'type': 'counter'},
                    {'alert': 'KubeVirtDown', 'expr': 'up == 0'},
                    {'record': 'kubevirt_untyped', 'expr': 'sum(x)'},
                ],
            }
        ]
    }), encoding='utf-8')
    rules = load_recording_rules(p)
    assert rules == [
        RecordingRule('kubevirt_extra_total', 'sum(kubevirt_extra)', 'Extra series.', 'counter'),
        RecordingRule('kubevirt_untyped', 'sum(x)', '', ''),
    ]


def test_load_rules_missing_file(tmp_path):
    with pytest.raises(RuleDefinitionError):
        load_recording_rules(tmp_path / 'nope.yml')


def test_load_rules_invalid_yaml(tmp_path):
    p = tmp_path / 'bad.yml'
    p.write_text('groups: [unclosed', encoding='utf-8')
    with pytest.raises(RuleDefinitionError):
        load_recording_rules(p)


def test_load_rules_requires_mapping(tmp_path):
    p = tmp_path / 'list.yml'
    p.write_text('- record: kubevirt_a\n', encoding='utf-8')
    with pytest.raises(RuleDefinitionError):
        load_recording_rules(p)


def test_empty_rules_file(tmp_path):
    p = tmp_path / 'empty.yml'
    p.write_text('', encoding='utf-8')
    assert load_recording_rules(p) == []


def test_rule_groups_strip_documentation_keys():
    rules = get_recording_rules('kubevirt')
    doc = render_rule_groups(rules)
    assert doc['groups'][0]['name'] == 'kubevirt.rules'
    for r in doc['groups'][0]['rules']:
        assert set(r) == {'record', 'expr'}
    reloaded = yaml.safe_load(dump_rule_groups(rules))
    assert [r['record'] for r in reloaded['groups'][0]['rules']] == [r.record for r in rules]
