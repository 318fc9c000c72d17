"""Content rules for individual template files.

Each template is read once and every rule is evaluated against the same
content; a failing rule never prevents the remaining rules from running.
"""

from __future__ import annotations

import re

from ..config import RuleTables
from ..models import Finding, PackageSpec, Severity, TemplateFile, TemplateKind

_HEADING = re.compile(r"^\s{0,3}#", re.M)
_CODE_FENCE = "```"


class _Emitter:
    """Collects findings tagged with the template's ordering context."""

    def __init__(self, template: TemplateFile) -> None:
        self.template = template
        self.findings: list[Finding] = []

    def __call__(self, severity: Severity, rule: str, message: str) -> None:
        self.findings.append(
            Finding(
                severity=severity,
                message=message,
                path=self.template.relative_path,
                rule=rule,
                package_index=self.template.package_index,
                file_index=self.template.ordinal,
            )
        )


def check_variables(content: str, emit: _Emitter, rules: RuleTables) -> None:
    if "{{" not in content or "}}" not in content:
        emit(
            Severity.WARNING,
            "template.variables",
            "No template variables found (might be a static file)",
        )

    used = [name for name in rules.common_variables if f"{{{{.{name}}}}}" in content]
    if used:
        emit(Severity.INFO, "template.variables", f"Uses template variables: {', '.join(used)}")


def check_source(
    content: str, package: PackageSpec, emit: _Emitter, rules: RuleTables
) -> None:
    if not rules.declaration_pattern.search(content):
        emit(Severity.ERROR, "source.declaration", "Missing package declaration")

    if package.type in rules.module_types:
        if not any(marker in content for marker in rules.module_import_markers):
            emit(
                Severity.WARNING,
                "source.module_import",
                f"{package.type} should import {' or '.join(rules.module_import_markers)}",
            )
        if not any(marker in content for marker in rules.module_export_markers):
            emit(
                Severity.WARNING,
                "source.module_export",
                f"{package.type} should export "
                f"{' or '.join(rules.module_export_markers)}",
            )

    previous = ""
    for line in content.splitlines():
        match = rules.exported_function_pattern.match(line)
        if match and not _is_doc_comment(previous):
            emit(
                Severity.WARNING,
                "source.doc_comment",
                f"Public function {match.group(1)} missing documentation comment",
            )
        previous = line


def _is_doc_comment(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith("//") or stripped.endswith("*/")


def check_documentation(content: str, emit: _Emitter) -> None:
    if not _HEADING.search(content):
        emit(Severity.WARNING, "docs.heading", "No markdown headings found")

    if "install" not in content.lower():
        emit(Severity.WARNING, "docs.install", "No installation instructions found")

    if _CODE_FENCE not in content:
        emit(Severity.WARNING, "docs.code_block", "No code examples found")


def check_security(content: str, emit: _Emitter, rules: RuleTables) -> None:
    for pattern in rules.security_patterns:
        match = pattern.pattern.search(content)
        if match is None:
            continue
        line_number = content.count("\n", 0, match.start()) + 1
        emit(
            Severity.ERROR,
            "security",
            f"Potential {pattern.description} ({pattern.id}) at line {line_number}",
        )


def check_template(template: TemplateFile, rules: RuleTables) -> list[Finding]:
    """Run every template rule against one file and return the findings."""
    emit = _Emitter(template)

    try:
        content = template.read_content()
    except (OSError, UnicodeDecodeError) as exc:
        emit(Severity.ERROR, "template.read", f"Failed to read template file: {exc}")
        return emit.findings

    check_variables(content, emit, rules)

    if template.kind is TemplateKind.SOURCE:
        check_source(content, template.package, emit, rules)
    elif template.kind is TemplateKind.DOCUMENTATION:
        check_documentation(content, emit)

    check_security(content, emit, rules)
    return emit.findings
