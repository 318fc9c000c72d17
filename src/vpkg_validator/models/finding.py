"""Validation finding model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @property
    def label(self) -> str:
        return self.value.upper()


_RANKS = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


@dataclass(slots=True, frozen=True)
class Finding:
    """A single diagnostic produced during validation.

    ``rule``, ``package_index`` and ``file_index`` only tag the finding for
    report ordering: package index 0 is the catalog itself, file index -1 is
    the package declaration rather than one of its templates.
    """

    severity: Severity
    message: str
    path: str | None = None
    rule: str = ""
    package_index: int = 0
    file_index: int = -1

    def __post_init__(self) -> None:
        if not isinstance(self.severity, Severity):
            raise ValueError(f"Invalid severity: {self.severity}")
        if not self.message:
            raise ValueError("Finding message must be non-empty")

    def format(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message

    def to_dict(self) -> dict[str, object]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
            "rule": self.rule,
            "package": self.package_index,
        }
