"""Fatal error kinds raised by the validator.

Only these exceptions abort a run. Every field-level or content-level problem
is reported as a :class:`~vpkg_validator.models.Finding` instead.
"""

from __future__ import annotations


class ValidatorError(RuntimeError):
    """Base error for failures that stop a validation run."""


class MetadataNotFound(ValidatorError):
    """Raised when the catalog document cannot be located."""


class MetadataParseError(ValidatorError):
    """Raised when the catalog document cannot be decoded into a catalog."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConfigError(ValidatorError):
    """Raised when the rule configuration cannot be loaded or is invalid."""
