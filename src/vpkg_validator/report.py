"""Finding aggregation and report rendering."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .models import Finding, Severity

REPORT_VERSION = "1"

# rule evaluation order, used to order findings within one file or package
RULE_ORDER: tuple[str, ...] = (
    "catalog.required",
    "catalog.version",
    "catalog.packages",
    "package.context",
    "package.entry",
    "package.required",
    "package.name",
    "package.type",
    "package.version",
    "package.templates",
    "package.tags",
    "package.dependencies",
    "package.discovery",
    "template.read",
    "template.variables",
    "source.declaration",
    "source.module_import",
    "source.module_export",
    "source.doc_comment",
    "docs.heading",
    "docs.install",
    "docs.code_block",
    "security",
)
_RULE_RANKS = {rule: rank for rank, rule in enumerate(RULE_ORDER)}

_BANNER = "=" * 60
_SECTION_TITLES = {
    Severity.ERROR: "Errors",
    Severity.WARNING: "Warnings",
    Severity.INFO: "Info",
}


def _sort_key(finding: Finding) -> tuple[int, int, int, int]:
    return (
        finding.severity.rank,
        finding.package_index,
        finding.file_index,
        _RULE_RANKS.get(finding.rule, len(RULE_ORDER)),
    )


@dataclass(frozen=True)
class Report:
    """Immutable, deterministically ordered result of one validation run."""

    findings: tuple[Finding, ...]
    errors: int
    warnings: int
    info: int

    @property
    def valid(self) -> bool:
        return self.errors == 0

    def by_severity(self, severity: Severity) -> list[Finding]:
        return [f for f in self.findings if f.severity is severity]

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": REPORT_VERSION,
            "valid": self.valid,
            "totals": {
                "errors": self.errors,
                "warnings": self.warnings,
                "info": self.info,
            },
            "findings": [f.to_dict() for f in self.findings],
        }

    def render_text(self) -> str:
        """Return the human-readable report, grouped by severity."""
        lines = [
            _BANNER,
            "           VPkg Package Validation Report",
            _BANNER,
            "",
            f"Errors: {self.errors}",
            f"Warnings: {self.warnings}",
            f"Info: {self.info}",
        ]

        for severity in Severity:
            group = self.by_severity(severity)
            if not group:
                continue
            lines.append("")
            lines.append(f"{_SECTION_TITLES[severity]}:")
            for i, finding in enumerate(group, start=1):
                lines.append(f"  {i}. {finding.format()}")

        lines.append("")
        if self.valid:
            lines.append("Package validation PASSED!")
            lines.append("Your package is ready for testing and submission.")
        else:
            lines.append("Package validation FAILED!")
            lines.append("Please fix the errors above before submitting.")
        lines.append(_BANNER)

        return "\n".join(lines) + "\n"


class Aggregator:
    """Append-only, thread-safe collection of findings with running counts."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._findings: list[Finding] = []
        self._counts = {severity: 0 for severity in Severity}

    def add(self, finding: Finding) -> None:
        self.extend((finding,))

    def extend(self, findings: Iterable[Finding]) -> None:
        batch = list(findings)
        with self._lock:
            self._findings.extend(batch)
            for finding in batch:
                self._counts[finding.severity] += 1

    def count(self, severity: Severity) -> int:
        with self._lock:
            return self._counts[severity]

    def verdict(self) -> bool:
        """Return True iff no error-severity finding has been recorded."""
        return self.count(Severity.ERROR) == 0

    def report(self) -> Report:
        with self._lock:
            findings = list(self._findings)
            counts = dict(self._counts)
        # stable sort: ties keep per-package emission order
        findings.sort(key=_sort_key)
        return Report(
            findings=tuple(findings),
            errors=counts[Severity.ERROR],
            warnings=counts[Severity.WARNING],
            info=counts[Severity.INFO],
        )
