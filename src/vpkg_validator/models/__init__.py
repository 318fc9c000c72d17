"""Data models for catalogs, templates and validation findings."""

from __future__ import annotations

from .catalog import Catalog, PackageSpec
from .finding import Finding, Severity
from .template_file import TemplateFile, TemplateKind

__all__ = [
    "Catalog",
    "Finding",
    "PackageSpec",
    "Severity",
    "TemplateFile",
    "TemplateKind",
]
