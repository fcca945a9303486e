"""Metrics documentation generator driver.

Pipeline (single pass, synchronous):
  1. build a collector registry from the configured collector names
  2. scrape ``/metrics`` from the in-process exposition handler
  3. parse HELP/TYPE metadata from the body
  4. merge with the not-exposed registry and the recording rule descriptors
  5. render the catalog to the output document

Usage:
  python scripts/gen_metrics_doc.py [--output newmetrics.md] [--strict] [--check]

Modes:
    default (write): writes/overwrites the output document.
    --check: renders in-memory and compares with the existing document; exits
             non-zero (8) on drift.

Exit Codes:
    0 success / up-to-date
    1 fatal error (scrape, parse, rules, collectors or write stage)
    8 drift detected under --check
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from ..errors import DocGenError, DocumentWriteError, ScrapeError
from ..metrics.descriptors import MetricDescriptor
from ..metrics.exposition import parse_exposition
from ..metrics.not_exposed import not_exposed_metrics
from ..monitoring.collectors import COLLECTORS, build_registry
from ..monitoring.handler import METRICS_PATH, metrics_handler, scrape
from ..monitoring.rules import get_recording_rules, load_recording_rules, rules_to_descriptors
from ..settings import DocGenSettings
from .catalog import MetricCatalog, merge_catalog
from .render import render_to_string, write_document

logger = logging.getLogger(__name__)

__all__ = [
    "EXIT_OK",
    "EXIT_ERROR",
    "EXIT_DRIFT",
    "scrape_exposition",
    "rule_descriptors",
    "generate_catalog",
    "main",
]

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DRIFT = 8

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def scrape_exposition(settings: DocGenSettings) -> str:
    registry = build_registry(settings.collectors, runtime=settings.runtime_collectors)
    result = scrape(metrics_handler(registry), METRICS_PATH)
    logger.info(
        "Scraped %s status=%d bytes=%d", METRICS_PATH, result.status, len(result.body),
        extra={"event": "docgen.scrape", "status": result.status},
    )
    if not result.ok:
        raise ScrapeError(result.status, METRICS_PATH)
    return result.body


def rule_descriptors(settings: DocGenSettings) -> list[MetricDescriptor]:
    rules = get_recording_rules(settings.rules_namespace)
    if settings.extra_rules:
        rules.extend(load_recording_rules(settings.extra_rules))
    return rules_to_descriptors(rules)


def generate_catalog(settings: DocGenSettings, body: str | None = None) -> MetricCatalog:
    """Run scrape -> parse -> merge and return the sorted catalog.

    ``body`` short-circuits the scrape with an already captured exposition.
    """
    if body is None:
        body = scrape_exposition(settings)
    parsed = parse_exposition(body, metric_filter=settings.metric_filter, strict=settings.strict)
    static = not_exposed_metrics()
    rules = rule_descriptors(settings)
    catalog = merge_catalog(parsed, static, rules)
    logger.info(
        "Catalog built: %d metrics (%d scraped, %d not exposed by default, %d recording rules)",
        len(catalog), len(parsed), len(static), len(rules),
        extra={"event": "docgen.parse", "metric_count": len(catalog)},
    )
    return catalog


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Generate the KubeVirt metrics document")
    ap.add_argument("--output", type=Path, default=None, help="Output document path (default: KV_DOCGEN_OUTPUT or newmetrics.md)")
    ap.add_argument("--strict", action="store_true", default=None, help="Fail on malformed HELP/TYPE lines instead of skipping them")
    ap.add_argument("--collectors", default=None,
                    help=f"Comma separated collectors to scrape (known: {','.join(sorted(COLLECTORS))})")
    ap.add_argument("--runtime-collectors", action="store_true", default=None,
                    help="Also register process/platform/gc collectors (filtered from the document)")
    ap.add_argument("--rules-namespace", default=None, help="Namespace embedded in recording rule expressions")
    ap.add_argument("--extra-rules", default=None, help="YAML file with additional recording rule definitions")
    ap.add_argument("--check", action="store_true", help="Do not write; fail (exit 8) if the document would change")
    ap.add_argument("--log-level", default=None, help="Logging level (default: KV_LOG_LEVEL or INFO)")
    return ap


def _apply_args(settings: DocGenSettings, args: argparse.Namespace) -> DocGenSettings:
    overrides: dict[str, object] = {}
    if args.output is not None:
        overrides["output"] = str(args.output)
    if args.strict:
        overrides["strict"] = True
    if args.collectors is not None:
        overrides["collectors"] = tuple(c.strip().lower() for c in args.collectors.split(",") if c.strip())
    if args.runtime_collectors:
        overrides["runtime_collectors"] = True
    if args.rules_namespace is not None:
        overrides["rules_namespace"] = args.rules_namespace
    if args.extra_rules is not None:
        overrides["extra_rules"] = args.extra_rules
    if args.log_level is not None:
        overrides["log_level"] = args.log_level.upper()
    return dataclasses.replace(settings, **overrides) if overrides else settings


def _check(settings: DocGenSettings, catalog: MetricCatalog) -> int:
    out = Path(settings.output)
    new_text = render_to_string(catalog)
    if not out.exists():
        print(f"Metrics document drift: {out} missing (would create).", file=sys.stderr)
        return EXIT_DRIFT
    try:
        current = out.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentWriteError(f"cannot read existing metrics document {out}: {e}") from e
    if current != new_text:
        print(f"Metrics document drift detected in {out} (run without --check to update).", file=sys.stderr)
        return EXIT_DRIFT
    print(f"Metrics document {out} up-to-date (check mode).")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = _apply_args(DocGenSettings.from_env(), args)
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO), format=LOG_FORMAT)
    try:
        catalog = generate_catalog(settings)
        if args.check:
            return _check(settings, catalog)
        write_document(settings.output, catalog)
    except DocGenError as e:
        logger.error("Metrics document generation failed at %s stage: %s", e.stage, e,
                     extra={"event": "docgen.failed", "stage": e.stage})
        print(f"{e.stage}: {e}", file=sys.stderr)
        return EXIT_ERROR
    print(f"Wrote {settings.output} ({len(catalog)} metrics)")
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
