"""Template discovery under a package's templates directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path

LOGGER = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".tmpl"


def discover_templates(root: Path, suffix: str = TEMPLATE_SUFFIX) -> list[Path]:
    """Find template files recursively under root.

    Directories are walked depth-first from an explicit stack, in whatever
    order the filesystem lists them; callers that need a stable order must
    sort the result. Symlinked directories are not followed.
    """
    found: list[Path] = []
    pending: list[Path] = [root]

    while pending:
        directory = pending.pop()
        subdirs: list[Path] = []
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    if entry.is_dir(follow_symlinks=False):
                        subdirs.append(Path(entry.path))
                    elif entry.is_file() and entry.name.endswith(suffix):
                        found.append(Path(entry.path))
        except OSError as exc:
            LOGGER.warning("Skipping unreadable directory %s: %s", directory, exc)
            continue
        # reversed so the first listed subdirectory is walked first
        pending.extend(reversed(subdirs))

    LOGGER.debug("Discovered %d template(s) under %s", len(found), root)
    return found
