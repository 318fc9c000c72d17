"""Configuration loader for the validator.

Settings resolve from explicit arguments first, then environment variables,
then built-in defaults. The rule tables (field formats, file-kind suffixes,
security patterns) can be overridden from a JSON file; each key replaces the
default table of the same name.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError

DEFAULT_CATALOG = "meta.yaml"
DEFAULT_WORKERS = 4

CATALOG_ENV_VAR = "VPKG_VALIDATOR_CATALOG"
WORKERS_ENV_VAR = "VPKG_VALIDATOR_WORKERS"
RULES_PATH_ENV_VAR = "VPKG_VALIDATOR_RULES"


@dataclass(slots=True, frozen=True)
class SecurityPattern:
    """A content pattern that is always fatal when found in a template."""

    id: str
    description: str
    pattern: re.Pattern[str]

    @classmethod
    def from_dict(cls, data: dict[str, Any], index: int) -> SecurityPattern:
        """Create a SecurityPattern from a dictionary, validating required fields."""
        pattern_id = data.get("id")
        if not pattern_id or not isinstance(pattern_id, str):
            raise ConfigError(f"Security pattern at index {index} is missing required 'id' field")

        description = data.get("description", pattern_id)
        if not isinstance(description, str):
            raise ConfigError(f"Security pattern '{pattern_id}' has invalid 'description' field")

        raw = data.get("pattern")
        if not raw or not isinstance(raw, str):
            raise ConfigError(f"Security pattern '{pattern_id}' is missing required 'pattern' field")

        return cls(id=pattern_id, description=description, pattern=_compile(raw, pattern_id))


_SECRET_ASSIGNMENT = (
    r"(?im)(?:password|passwd|secret|token|api[_-]?key|key)\w*[\"']?\s*(?::=|=|:)\s*"
    r"[\"'](?!\{\{)[^\"'\n]+[\"']"
)

DEFAULT_SECURITY_PATTERNS: tuple[SecurityPattern, ...] = (
    SecurityPattern(
        id="hardcoded-secret",
        description="hardcoded credential assignment",
        pattern=re.compile(_SECRET_ASSIGNMENT),
    ),
    SecurityPattern(
        id="process-execution",
        description="process execution call",
        pattern=re.compile(r"\b(?:exec\.Command(?:Context)?|syscall\.Exec|os\.StartProcess)\s*\("),
    ),
    SecurityPattern(
        id="unsafe-operation",
        description="unsafe operation",
        pattern=re.compile(r"\bunsafe\.Pointer\b|^\s*(?:import\s+)?\"unsafe\"|//go:linkname\b", re.M),
    ),
)


@dataclass(slots=True, frozen=True)
class RuleTables:
    """Pattern tables consulted by the catalog, package and template checks."""

    name_pattern: re.Pattern[str] = re.compile(r"^[a-z0-9-]+/[a-z0-9-]+$")
    version_pattern: re.Pattern[str] = re.compile(r"^v?\d+\.\d+\.\d+")
    schema_version_pattern: re.Pattern[str] = re.compile(r"^\d+\.\d+$")
    package_types: tuple[str, ...] = (
        "fx-module",
        "cli-command",
        "utility",
        "middleware",
        "service",
    )
    template_suffix: str = ".tmpl"
    source_suffixes: tuple[str, ...] = (".go.tmpl",)
    documentation_markers: tuple[str, ...] = ("readme",)
    declaration_pattern: re.Pattern[str] = re.compile(r"^package\s+(?:\w+|\{\{.*?\}\})", re.M)
    module_types: tuple[str, ...] = ("fx-module",)
    module_import_markers: tuple[str, ...] = ("go.uber.org/fx",)
    module_export_markers: tuple[str, ...] = ("var Module", "func NewModule")
    exported_function_pattern: re.Pattern[str] = re.compile(r"^\s*func\s+([A-Z]\w*)\s*[\[(]")
    common_variables: tuple[str, ...] = ("Title", "Package", "Module", "Namespace", "Description")
    security_patterns: tuple[SecurityPattern, ...] = field(
        default_factory=lambda: DEFAULT_SECURITY_PATTERNS
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RuleTables:
        """Return the default tables with the keys present in ``data`` replaced."""
        overrides: dict[str, Any] = {}
        for key, value in data.items():
            attr = _RULE_KEYS.get(key)
            if attr is None:
                known = ", ".join(sorted(_RULE_KEYS))
                raise ConfigError(f"Unknown rule table '{key}'. Known tables: {known}")

            if attr == "security_patterns":
                if not isinstance(value, list):
                    raise ConfigError("'securityPatterns' must be an array")
                patterns = []
                for index, item in enumerate(value):
                    if not isinstance(item, dict):
                        raise ConfigError(f"Security pattern at index {index} must be an object")
                    patterns.append(SecurityPattern.from_dict(item, index))
                overrides[attr] = tuple(patterns)
            elif attr in _PATTERN_ATTRS:
                if not isinstance(value, str) or not value:
                    raise ConfigError(f"'{key}' must be a non-empty string")
                overrides[attr] = _compile(value, key, flags=_PATTERN_ATTRS[attr])
            elif attr == "template_suffix":
                if not isinstance(value, str) or not value:
                    raise ConfigError(f"'{key}' must be a non-empty string")
                overrides[attr] = value
            else:
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ConfigError(f"'{key}' must be an array of strings")
                overrides[attr] = tuple(value)

        return replace(cls(), **overrides)


_RULE_KEYS = {
    "namePattern": "name_pattern",
    "versionPattern": "version_pattern",
    "schemaVersionPattern": "schema_version_pattern",
    "packageTypes": "package_types",
    "templateSuffix": "template_suffix",
    "sourceSuffixes": "source_suffixes",
    "documentationMarkers": "documentation_markers",
    "declarationPattern": "declaration_pattern",
    "moduleTypes": "module_types",
    "moduleImportMarkers": "module_import_markers",
    "moduleExportMarkers": "module_export_markers",
    "exportedFunctionPattern": "exported_function_pattern",
    "commonVariables": "common_variables",
    "securityPatterns": "security_patterns",
}

# compiled attributes and the flags they are compiled with
_PATTERN_ATTRS = {
    "name_pattern": 0,
    "version_pattern": 0,
    "schema_version_pattern": 0,
    "declaration_pattern": re.M,
    "exported_function_pattern": 0,
}


@dataclass(slots=True, frozen=True)
class Settings:
    """Top-level settings container."""

    catalog: str = DEFAULT_CATALOG
    workers: int = DEFAULT_WORKERS
    rules: RuleTables = field(default_factory=RuleTables)


def _compile(raw: str, name: str, flags: int = 0) -> re.Pattern[str]:
    try:
        return re.compile(raw, flags)
    except re.error as exc:
        raise ConfigError(f"Invalid regular expression for '{name}': {exc}") from exc


def load_rules(path: Path | str) -> RuleTables:
    """Load rule table overrides from a JSON file.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    rules_path = Path(path)

    if not rules_path.exists():
        raise ConfigError(f"Rules file not found: {rules_path}")

    try:
        content = rules_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read rules file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in rules file: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Rules file must be a JSON object")

    return RuleTables.from_dict(data)


def _resolve_workers(workers: int | None) -> int:
    if workers is None:
        raw = os.environ.get(WORKERS_ENV_VAR)
        if not raw:
            return DEFAULT_WORKERS
        try:
            workers = int(raw)
        except ValueError as exc:
            raise ConfigError(f"{WORKERS_ENV_VAR} must be an integer, got '{raw}'") from exc

    if workers < 1:
        raise ConfigError(f"Worker count must be at least 1, got {workers}")
    return workers


def load_settings(
    catalog: str | None = None,
    workers: int | None = None,
    rules_path: Path | str | None = None,
) -> Settings:
    """Resolve settings from arguments, environment variables and defaults.

    Priority for each value:
    1. Explicit argument
    2. VPKG_VALIDATOR_* environment variable
    3. Built-in default
    """
    catalog = catalog or os.environ.get(CATALOG_ENV_VAR) or DEFAULT_CATALOG

    if rules_path is None:
        rules_path = os.environ.get(RULES_PATH_ENV_VAR) or None
    rules = load_rules(rules_path) if rules_path is not None else RuleTables()

    return Settings(catalog=catalog, workers=_resolve_workers(workers), rules=rules)
