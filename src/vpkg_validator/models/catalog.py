"""Catalog and package declaration models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# document key -> accepted aliases, first match wins
_PACKAGE_KEYS: dict[str, tuple[str, ...]] = {
    "name": ("name",),
    "title": ("title",),
    "description": ("description",),
    "type": ("type",),
    "templates": ("templates", "templatesDir"),
    "version": ("version",),
    "tags": ("tags",),
    "dependencies": ("dependencies",),
}

_CATALOG_KEYS: dict[str, tuple[str, ...]] = {
    "version": ("version", "schemaVersion"),
    "repository": ("repository", "repositoryURL"),
    "author": ("author",),
    "license": ("license",),
}


def _lookup(data: Mapping[str, Any], aliases: tuple[str, ...]) -> Any:
    for key in aliases:
        if key in data:
            return data[key]
    return None


@dataclass(frozen=True)
class PackageSpec:
    """One package declared in the catalog.

    Values are kept as decoded from the document; their types and formats are
    checked by the package rules, not here.
    """

    name: Any = None
    title: Any = None
    description: Any = None
    type: Any = None
    templates_dir: Any = None
    version: Any = None
    tags: Any = None
    dependencies: Any = None
    is_mapping: bool = True

    def field_value(self, field_name: str) -> Any:
        """Return a value by its document key (``templates`` for ``templates_dir``)."""
        if field_name == "templates":
            return self.templates_dir
        return getattr(self, field_name)

    @property
    def display_name(self) -> str:
        return self.name if isinstance(self.name, str) and self.name else "unnamed"

    @classmethod
    def from_document(cls, entry: Any) -> PackageSpec:
        if not isinstance(entry, Mapping):
            return cls(is_mapping=False)
        values = {key: _lookup(entry, aliases) for key, aliases in _PACKAGE_KEYS.items()}
        values["templates_dir"] = values.pop("templates")
        return cls(**values)


@dataclass(frozen=True)
class Catalog:
    """Immutable representation of a parsed ``meta.yaml`` document."""

    schema_version: Any
    repository_url: Any
    author: Any
    license: Any
    packages: tuple[PackageSpec, ...] | None
    source: str = "meta.yaml"

    def field_value(self, field_name: str) -> Any:
        """Return a top-level value by its document key."""
        return {
            "version": self.schema_version,
            "repository": self.repository_url,
            "author": self.author,
            "license": self.license,
            "packages": self.packages,
        }[field_name]

    @classmethod
    def from_document(cls, data: Mapping[str, Any], *, source: str) -> Catalog:
        """Build a catalog from a decoded mapping whose ``packages`` is a list or absent."""
        values = {key: _lookup(data, aliases) for key, aliases in _CATALOG_KEYS.items()}
        entries = data.get("packages")
        packages = (
            None if entries is None else tuple(PackageSpec.from_document(e) for e in entries)
        )
        return cls(
            schema_version=values["version"],
            repository_url=values["repository"],
            author=values["author"],
            license=values["license"],
            packages=packages,
            source=source,
        )
