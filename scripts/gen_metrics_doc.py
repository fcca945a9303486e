#!/usr/bin/env python3
"""Generate the KubeVirt metrics document.

Usage:
  python scripts/gen_metrics_doc.py [--output newmetrics.md] [--check]

Environment Variables:
  KV_DOCGEN_OUTPUT, KV_DOCGEN_STRICT, KV_DOCGEN_COLLECTORS, KV_DOCGEN_EXTRA_RULES,
  KV_DOCGEN_RULES_NAMESPACE, KV_LOG_LEVEL (see kvmetrics.settings).
"""
from __future__ import annotations

import os
import sys

# Ensure repository root on path when executed directly.
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from kvmetrics.docs.generator import main  # noqa: E402

if __name__ == '__main__':  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
