"""Shared fixtures for building package repositories on disk."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

CATALOG_HEADER = """\
version: "3.0"
repository: "https://github.com/acme/vpkg-packages"
author: "Acme Platform Team"
license: "MIT"
"""

CACHE_GO = """\
package cache

// Cache stores values for {{.Title}}.
type Cache struct {
	items map[string]string
}
"""

CACHE_README = """\
# {{.Title}}

{{.Description}}
"""

CACHE_PACKAGE = """\
  - name: "acme/cache"
    title: "Cache"
    description: "In-memory cache module"
    type: "fx-module"
    templates: "packages/acme-cache/templates"
    version: "v1.0.0"
"""


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing ``meta.yaml`` plus template files; yields the catalog path."""

    def _make(packages: str | None, files: dict[str, str | bytes] | None = None) -> Path:
        document = CATALOG_HEADER
        if packages is not None:
            document += "packages:\n" + textwrap.dedent(packages).rstrip("\n") + "\n"
        catalog = tmp_path / "meta.yaml"
        catalog.write_text(document, encoding="utf-8")

        for relative, content in (files or {}).items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return catalog

    return _make
