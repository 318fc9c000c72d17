#!/usr/bin/env python3
"""Local CLI entrypoint to validate a package repository outside of CI.

Usage:
  python scripts/validate.py [--catalog meta.yaml] [--json report.json] [--warn-only]

This calls the same validate_repository used by the vpkg-validate console script.
"""

from __future__ import annotations

from vpkg_validator.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
