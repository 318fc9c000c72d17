"""Rules applied to the top level of the catalog document."""

from __future__ import annotations

from pathlib import PurePosixPath

from ..config import RuleTables
from ..models import Catalog, Finding, Severity
from .package import is_blank

REQUIRED_CATALOG_FIELDS = ("version", "repository", "author", "license")


def check_catalog(catalog: Catalog, rules: RuleTables) -> list[Finding]:
    """Return catalog-level findings.

    An absent or empty ``packages`` array is reported here; callers skip all
    package and template validation in that case.
    """
    findings: list[Finding] = []

    for field_name in REQUIRED_CATALOG_FIELDS:
        if is_blank(catalog.field_value(field_name)):
            findings.append(
                Finding(
                    severity=Severity.ERROR,
                    message=f"Missing required field in {_name(catalog)}: {field_name}",
                    rule="catalog.required",
                )
            )

    version = catalog.schema_version
    if not is_blank(version) and not rules.schema_version_pattern.match(str(version)):
        findings.append(
            Finding(
                severity=Severity.WARNING,
                message=f'Version format should be X.Y (e.g., "3.0"), found: {version}',
                rule="catalog.version",
            )
        )

    if catalog.packages is None:
        findings.append(
            Finding(
                severity=Severity.ERROR,
                message=f"Missing required field in {_name(catalog)}: packages",
                rule="catalog.packages",
            )
        )
    elif not catalog.packages:
        findings.append(
            Finding(
                severity=Severity.ERROR,
                message="packages array cannot be empty",
                rule="catalog.packages",
            )
        )

    return findings


def _name(catalog: Catalog) -> str:
    return PurePosixPath(catalog.source).name or "meta.yaml"
