"""Discovered template file model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .catalog import PackageSpec


class TemplateKind(str, Enum):
    SOURCE = "source"
    DOCUMENTATION = "documentation"
    OTHER = "other"

    @classmethod
    def detect(
        cls,
        relative_path: str,
        source_suffixes: tuple[str, ...],
        documentation_markers: tuple[str, ...],
    ) -> TemplateKind:
        """Classify a template by suffix first, then by documentation marker in its path."""
        if relative_path.endswith(source_suffixes):
            return cls.SOURCE
        lowered = relative_path.lower()
        if any(marker.lower() in lowered for marker in documentation_markers):
            return cls.DOCUMENTATION
        return cls.OTHER


@dataclass(frozen=True)
class TemplateFile:
    """A template discovered under a package's templates directory.

    Content is not held on the object; :meth:`read_content` reads it on demand
    so it can be released once the file has been checked.
    """

    path: Path
    relative_path: str
    package: PackageSpec
    package_index: int
    ordinal: int
    kind: TemplateKind

    def read_content(self) -> str:
        with self.path.open("r", encoding="utf-8") as handle:
            return handle.read()
