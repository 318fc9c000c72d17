"""Parse the ``meta.yaml`` catalog document into a :class:`Catalog`.

Only structural decoding happens here: the document must be a mapping and
``packages``, when present, must be a sequence. Field semantics are left to the
catalog and package rules.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import requests
import yaml
from requests import Response
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from ..errors import MetadataNotFound, MetadataParseError
from ..models import Catalog

LOGGER = logging.getLogger(__name__)


def parse_catalog(text: str, *, source: str = "meta.yaml") -> Catalog:
    """Decode catalog text.

    Raises:
        MetadataParseError: If the text is not valid YAML or not shaped like a catalog.
    """
    try:
        data: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MetadataParseError(f"Failed to parse {source}: {exc}", cause=exc) from exc

    if not isinstance(data, dict):
        raise MetadataParseError(f"{source} must contain a mapping at the top level")

    packages = data.get("packages")
    if packages is not None and not isinstance(packages, list):
        raise MetadataParseError("packages field must be an array")

    catalog = Catalog.from_document(data, source=source)
    LOGGER.debug("Parsed %s with %d package(s)", source, len(catalog.packages or ()))
    return catalog


@retry(
    reraise=True,
    stop=stop_after_attempt(3),
    wait=wait_fixed(2),
    retry=retry_if_exception_type(requests.ConnectionError),
)
def _http_get(url: str) -> Response:  # pragma: no cover - patched in tests
    return requests.get(url, timeout=10)


def _fetch(url: str) -> bytes:
    try:
        response = _http_get(url)
    except requests.RequestException as exc:
        raise MetadataNotFound(f"Failed to fetch catalog from {url}: {exc}") from exc

    if response.status_code != 200:
        raise MetadataNotFound(
            f"Catalog not found at {url} (status code {response.status_code})"
        )
    return response.content


def _read(path: Path) -> bytes:
    if not path.is_file():
        raise MetadataNotFound(f"{path} file not found")
    try:
        with path.open("rb") as handle:
            return handle.read()
    except OSError as exc:
        raise MetadataNotFound(f"Failed to read {path}: {exc}") from exc


def is_remote(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


def load_catalog(source: str | Path) -> Catalog:
    """Load a catalog from a filesystem path or an http(s) URL.

    Raises:
        MetadataNotFound: If the document cannot be located or fetched.
        MetadataParseError: If the document cannot be decoded.
    """
    source = str(source)
    LOGGER.info("Loading catalog from %s", source)
    payload = _fetch(source) if is_remote(source) else _read(Path(source))

    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MetadataParseError(f"{source} is not valid UTF-8: {exc}", cause=exc) from exc

    return parse_catalog(text, source=source)
