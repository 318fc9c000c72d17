"""Human-readable summary rendering for $GITHUB_STEP_SUMMARY."""

from __future__ import annotations

from .models import Severity
from .report import Report


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def render_summary(report: Report) -> str:
    """Return a Markdown string with totals and a table of errors and warnings."""
    status = "✅ **PASSED**" if report.valid else "❌ **FAILED**"

    lines = []
    lines.append("# vpkg-validator Summary")
    lines.append("")
    lines.append(f"Overall status: {status}")
    lines.append("")
    lines.append(f"Errors: {report.errors} | Warnings: {report.warnings} | Info: {report.info}")
    lines.append("")
    lines.append("| Severity | Package | File | Message |")
    lines.append("| --- | --- | --- | --- |")

    has_rows = False

    for severity in (Severity.ERROR, Severity.WARNING):
        for finding in report.by_severity(severity):
            package = str(finding.package_index) if finding.package_index else "catalog"
            path = _cell(finding.path) if finding.path else "n/a"
            lines.append(f"| {severity.label} | {package} | {path} | {_cell(finding.message)} |")
            has_rows = True

    if not has_rows:
        lines.append("| n/a | n/a | n/a | No errors or warnings |")

    return "\n".join(lines) + "\n"
