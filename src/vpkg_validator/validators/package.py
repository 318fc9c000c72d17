"""Rules applied to each package declared in the catalog.

Every condition becomes a finding; nothing here raises, so one malformed
package never stops its siblings from being checked.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..config import RuleTables
from ..models import Finding, PackageSpec, Severity

REQUIRED_PACKAGE_FIELDS = ("name", "title", "description", "type", "templates", "version")


def is_blank(value: Any) -> bool:
    """Return True for values a required field cannot take: None, blank text, empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, Mapping)):
        return not value
    return False


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def resolve_templates_dir(package: PackageSpec, base_dir: Path) -> Path | None:
    """Return the package's templates directory, or None if it is not an existing directory."""
    raw = package.templates_dir
    if not isinstance(raw, str) or not raw.strip():
        return None
    path = Path(raw)
    if not path.is_absolute():
        path = base_dir / path
    return path if path.is_dir() else None


def check_package(
    package: PackageSpec,
    index: int,
    *,
    base_dir: Path,
    rules: RuleTables,
) -> list[Finding]:
    """Check one package declaration; ``index`` is 1-based."""

    findings: list[Finding] = []

    def emit(severity: Severity, rule: str, message: str) -> None:
        findings.append(
            Finding(
                severity=severity,
                message=f"Package {index}: {message}",
                rule=rule,
                package_index=index,
            )
        )

    findings.append(
        Finding(
            severity=Severity.INFO,
            message=f"Validating package {index}: {package.display_name}",
            rule="package.context",
            package_index=index,
        )
    )

    if not package.is_mapping:
        emit(Severity.ERROR, "package.entry", "package entry must be a mapping")

    for field_name in REQUIRED_PACKAGE_FIELDS:
        if is_blank(package.field_value(field_name)):
            emit(Severity.ERROR, "package.required", f"Missing required field: {field_name}")

    name = package.name
    if not is_blank(name) and not (isinstance(name, str) and rules.name_pattern.match(name)):
        emit(
            Severity.ERROR,
            "package.name",
            f"Invalid name format. Should be 'org/package-name', found: {name}",
        )

    pkg_type = package.type
    if not is_blank(pkg_type) and pkg_type not in rules.package_types:
        emit(
            Severity.WARNING,
            "package.type",
            f"Unknown type '{pkg_type}'. Valid types: {', '.join(rules.package_types)}",
        )

    version = package.version
    if not is_blank(version) and not rules.version_pattern.match(str(version)):
        emit(
            Severity.WARNING,
            "package.version",
            f"Version should follow semantic versioning (e.g., 'v1.0.0'), found: {version}",
        )

    templates = package.templates_dir
    if not is_blank(templates) and resolve_templates_dir(package, base_dir) is None:
        emit(Severity.ERROR, "package.templates", f"Templates directory not found: {templates}")

    if package.tags is not None and not _is_sequence(package.tags):
        emit(Severity.ERROR, "package.tags", "tags field must be an array")

    if package.dependencies is not None and not _is_sequence(package.dependencies):
        emit(Severity.ERROR, "package.dependencies", "dependencies field must be an array")

    return findings
