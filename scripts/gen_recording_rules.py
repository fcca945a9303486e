#!/usr/bin/env python
"""Generate the Prometheus recording rules file from the operator rule definitions.

Outputs a YAML groups block (record/expr only) ready to load into Prometheus.

Modes:
    default (write): writes/overwrites the output file.
    --check: generates in-memory and compares with existing file; exits non-zero (8) if drift.

Exit Codes:
    0 success / up-to-date
    2 rule definition error
    8 drift detected under --check (file content would change)
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from kvmetrics.errors import RuleDefinitionError  # noqa: E402
from kvmetrics.monitoring.rules import dump_rule_groups, get_recording_rules, load_recording_rules  # noqa: E402

OUTPUT_PATH = ROOT / "kubevirt_recording_rules.yml"


def main(argv: list[str]) -> int:
    ap = argparse.ArgumentParser(description="Generate recording rules YAML")
    ap.add_argument("--output", type=Path, default=OUTPUT_PATH, help="Output path for generated recording rules YAML")
    ap.add_argument("--namespace", default=os.environ.get("KV_DOCGEN_RULES_NAMESPACE", ""), help="Install namespace embedded in expressions")
    ap.add_argument("--extra-rules", type=Path, default=None, help="Additional rule definitions (YAML)")
    ap.add_argument("--check", action="store_true", help="Do not write; fail (exit 8) if output file content would change")
    args = ap.parse_args(argv)
    rules = get_recording_rules(args.namespace)
    if args.extra_rules is not None:
        try:
            rules.extend(load_recording_rules(args.extra_rules))
        except RuleDefinitionError as e:
            print(str(e), file=sys.stderr)
            return 2

    new_text = dump_rule_groups(rules)
    if args.check:
        if not args.output.exists():
            print(f"Recording rules drift: {args.output} missing (would create).", file=sys.stderr)
            return 8
        current = args.output.read_text()
        if current.strip() != new_text.strip():
            print("Recording rules drift detected (run without --check to update).", file=sys.stderr)
            return 8
        print("Recording rules up-to-date (check mode).")
        return 0

    args.output.write_text(new_text)
    print(f"Wrote recording rules -> {args.output} ({len(rules)} rules)")
    return 0

if __name__ == "__main__":  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
