"""Command line entrypoint for validating a vpkg package repository."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from .config import load_settings
from .core import validate_repository
from .errors import ConfigError, MetadataNotFound, MetadataParseError
from .summary import render_summary

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_NOT_FOUND = 2
EXIT_MALFORMED = 3
EXIT_CONFIG = 4
EXIT_OUTPUT = 5

WARN_ONLY_ENV_VAR = "VPKG_VALIDATOR_WARN_ONLY"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--catalog",
        default=None,
        help="Path or URL of the catalog document (default: meta.yaml)",
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=None,
        help="Directory that relative template paths resolve against",
    )
    parser.add_argument("--rules", type=Path, default=None, help="JSON rule table overrides")
    parser.add_argument("--workers", type=int, default=None, help="Worker pool size")
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Report format written to stdout",
    )
    parser.add_argument("--json", dest="json_path", type=Path, help="Also write a JSON report")
    parser.add_argument("--summary", type=Path, help="Also write a Markdown summary")
    parser.add_argument("--warn-only", action="store_true", help="Exit 0 even when errors exist")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser.parse_args(argv)


def _warn_only(flag: bool) -> bool:
    if flag:
        return True
    return os.getenv(WARN_ONLY_ENV_VAR, "").strip().lower() in {"1", "true", "yes", "y"}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings(catalog=args.catalog, workers=args.workers, rules_path=args.rules)
        report = validate_repository(base_dir=args.base_dir, settings=settings)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    except MetadataNotFound as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except MetadataParseError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_MALFORMED

    if args.format == "json":
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(report.render_text(), end="")

    try:
        if args.json_path:
            args.json_path.write_text(json.dumps(report.to_dict(), indent=2) + "\n", encoding="utf-8")
        if args.summary:
            args.summary.write_text(render_summary(report), encoding="utf-8")
    except OSError as exc:
        print(f"ERROR: Unable to write output: {exc}", file=sys.stderr)
        return EXIT_OUTPUT

    if report.valid:
        return EXIT_OK
    if _warn_only(args.warn_only):
        LOGGER.warning(
            "Validation failed with %d error(s); continuing in warn-only mode", report.errors
        )
        return EXIT_OK
    return EXIT_INVALID


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
