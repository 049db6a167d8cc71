#!/usr/bin/env python3
"""Run a headless benchmark worker: one query family over a list of identifiers."""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running from a checkout without installing the package
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from querybench.cli import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main())
