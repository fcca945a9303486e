from __future__ import annotations

import re

import pytest
import yaml

import kvmetrics.docs.generator as gen
from kvmetrics.docs.generator import EXIT_DRIFT, EXIT_ERROR, EXIT_OK, generate_catalog, main
from kvmetrics.docs.render import render_to_string
from kvmetrics.errors import ScrapeError
from kvmetrics.metrics.not_exposed import not_exposed_metrics
from kvmetrics.monitoring.collectors import MIGRATE_VMI_DATA_PROCESSED
from kvmetrics.monitoring.handler import ScrapeResult
from kvmetrics.monitoring.rules import get_recording_rules
from kvmetrics.settings import DocGenSettings

BLOCK = re.compile(r'^### (\S+)$', re.MULTILINE)


def _metric_headings(text: str) -> list[str]:
    # kubevirt_info is part of the fixed preamble, not the catalog
    return [n for n in BLOCK.findall(text) if n != 'kubevirt_info']


def test_scraped_metric_rendered(sample_exposition):
    catalog = generate_catalog(DocGenSettings(), body=sample_exposition)
    text = render_to_string(catalog)
    assert '### kubevirt_vmi_count\nSome vm count. Type: Gauge.\n' in text
    assert 'other_metric_x' not in text


def test_not_exposed_metric_present_without_scrape_reference(sample_exposition):
    assert MIGRATE_VMI_DATA_PROCESSED not in sample_exposition
    catalog = generate_catalog(DocGenSettings(), body=sample_exposition)
    assert MIGRATE_VMI_DATA_PROCESSED in [m.name for m in catalog]
    assert f'### {MIGRATE_VMI_DATA_PROCESSED}\n' in render_to_string(catalog)


def test_catalog_size_and_order(sample_exposition):
    catalog = generate_catalog(DocGenSettings(), body=sample_exposition)
    expected = 2 + len(not_exposed_metrics()) + len(get_recording_rules(''))
    assert len(catalog) == expected
    names = [m.name for m in catalog]
    assert names == sorted(names)


def test_full_scrape_keeps_duplicate_sources():
    catalog = generate_catalog(DocGenSettings())
    names = [m.name for m in catalog]
    # exposed by the VM collector and also listed as not exposed by default
    assert names.count('kubevirt_vmi_phase_transition_time_seconds') == 2
    assert 'kubevirt_virt_api_up_total' in names


def test_scrape_failure_raises(monkeypatch):
    monkeypatch.setattr(gen, 'scrape', lambda app, path='/metrics': ScrapeResult(status=500, body=''))
    with pytest.raises(ScrapeError) as ei:
        generate_catalog(DocGenSettings())
    assert ei.value.status == 500
    assert '500' in str(ei.value)


def test_main_writes_sorted_document(tmp_path, capsys):
    out = tmp_path / 'newmetrics.md'
    assert main(['--output', str(out)]) == EXIT_OK
    text = out.read_text(encoding='utf-8')
    headings = _metric_headings(text)
    assert headings == sorted(headings)
    assert 'kubevirt_vmi_memory_resident_bytes' in headings
    assert 'kubevirt_migrate_vmi_disk_transfer_rate_bytes' in headings
    assert 'kubevirt_vmsnapshot_disks_restored_from_source_total' in headings
    assert 'Wrote' in capsys.readouterr().out


def test_main_output_from_env(tmp_path, monkeypatch):
    out = tmp_path / 'from_env.md'
    monkeypatch.setenv('KV_DOCGEN_OUTPUT', str(out))
    monkeypatch.setenv('KV_DOCGEN_COLLECTORS', 'migrations')
    assert main([]) == EXIT_OK
    headings = _metric_headings(out.read_text(encoding='utf-8'))
    assert 'kubevirt_migrate_vmi_running_count' in headings
    assert 'kubevirt_vmi_memory_resident_bytes' not in headings


def test_check_mode(tmp_path, capsys):
    out = tmp_path / 'newmetrics.md'
    assert main(['--output', str(out), '--check']) == EXIT_DRIFT
    assert not out.exists()
    assert main(['--output', str(out)]) == EXIT_OK
    assert main(['--output', str(out), '--check']) == EXIT_OK
    out.write_text(out.read_text(encoding='utf-8') + 'edited\n', encoding='utf-8')
    assert main(['--output', str(out), '--check']) == EXIT_DRIFT
    assert 'drift' in capsys.readouterr().err


def test_main_scrape_failure_exit_code(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(gen, 'scrape', lambda app, path='/metrics': ScrapeResult(status=503, body=''))
    out = tmp_path / 'newmetrics.md'
    assert main(['--output', str(out)]) == EXIT_ERROR
    err = capsys.readouterr().err
    assert 'scrape' in err
    assert '503' in err
    assert not out.exists()


def test_main_unknown_collector(tmp_path, capsys):
    assert main(['--output', str(tmp_path / 'x.md'), '--collectors', 'domainstats,bogus']) == EXIT_ERROR
    assert 'bogus' in capsys.readouterr().err


def test_main_write_failure(tmp_path, capsys):
    out = tmp_path / 'missing' / 'newmetrics.md'
    assert main(['--output', str(out)]) == EXIT_ERROR
    assert 'write' in capsys.readouterr().err
    assert not out.exists()


def test_strict_flag_fails_on_malformed_line(tmp_path, monkeypatch):
    body = '# HELP \n# HELP kubevirt_ok fine.\n# TYPE kubevirt_ok gauge\n'
    monkeypatch.setattr(gen, 'scrape', lambda app, path='/metrics': ScrapeResult(status=200, body=body))
    out = tmp_path / 'newmetrics.md'
    assert main(['--output', str(out), '--strict']) == EXIT_ERROR
    assert not out.exists()
    assert main(['--output', str(out)]) == EXIT_OK
    text = out.read_text(encoding='utf-8')
    assert '### kubevirt_ok\nFine. Type: Gauge.\n' in text


def test_extra_rules_file(tmp_path):
    rules = tmp_path / 'extra.yml'
    rules.write_text(yaml.safe_dump({'groups': [{'name': 'extra', 'rules': [
        {'record': 'kubevirt_extra_ratio', 'expr': 'a / b', 'description': 'Extra ratio.', 'type': 'gauge'},
    ]}]}), encoding='utf-8')
    out = tmp_path / 'newmetrics.md'
    assert main(['--output', str(out), '--extra-rules', str(rules)]) == EXIT_OK
    assert '### kubevirt_extra_ratio\nExtra ratio. Type: Gauge.\n' in out.read_text(encoding='utf-8')


def test_extra_rules_file_missing(tmp_path, capsys):
    out = tmp_path / 'newmetrics.md'
    assert main(['--output', str(out), '--extra-rules', str(tmp_path / 'nope.yml')]) == EXIT_ERROR
    assert 'rules' in capsys.readouterr().err


def test_main_undecodable_scrape_exit_code(tmp_path, monkeypatch, capsys):
    def _latin1(environ, start_response):
        start_response('200 OK', [('Content-Type', 'text/plain')])
        return [b'# HELP kubevirt_a caf\xe9\n']

    monkeypatch.setattr(gen, 'metrics_handler', lambda registry: _latin1)
    out = tmp_path / 'newmetrics.md'
    assert main(['--output', str(out)]) == EXIT_ERROR
    assert 'parse: ' in capsys.readouterr().err
    assert not out.exists()


def test_check_mode_unreadable_output(tmp_path, capsys):
    out = tmp_path / 'newmetrics.md'
    out.mkdir()
    assert main(['--output', str(out), '--check']) == EXIT_ERROR
    assert 'write' in capsys.readouterr().err
