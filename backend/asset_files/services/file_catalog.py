"""Directory state -> file metadata records.

Nothing here is cached: every call re-reads the filesystem.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from asset_files.schemas.files import FileItem

logger = logging.getLogger(__name__)

NS_PER_MS = 1_000_000


class FileOperationError(Exception):
    """Base class for file-layer failures that are not plain OSErrors."""


class InvalidNameError(FileOperationError):
    """Entry cannot be represented as a metadata record."""


def describe(path: str | Path) -> FileItem:
    """Build the metadata record for a single entry.

    Raises OSError if the entry cannot be stat'ed and InvalidNameError if
    its name is missing or not UTF-8, or its mtime predates the epoch.
    """
    path = Path(path)
    st = os.stat(path)

    if st.st_mtime_ns < 0:
        raise InvalidNameError(f"Modification time before epoch: {path!r}")

    name = path.name
    if not name:
        raise InvalidNameError("Unnamed")
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidNameError(f"Not UTF-8: {path!r}")

    return FileItem(
        name=name,
        size=st.st_size,
        timestamp=st.st_mtime_ns // NS_PER_MS,
    )


def list_all(root: str | Path) -> list[FileItem]:
    """Describe every direct child of ``root``.

    Children that fail to describe are skipped. Only a failure to open
    ``root`` itself propagates.
    """
    items: list[FileItem] = []
    with os.scandir(root) as entries:
        for entry in entries:
            try:
                items.append(describe(entry.path))
            except (OSError, FileOperationError) as e:
                logger.debug("Skipping %r in listing: %s", entry.path, e)
    return items


def newest_first(items: Iterable[FileItem]) -> list[FileItem]:
    """Presentation order for listings: most recently modified first."""
    return sorted(items, key=lambda item: item.timestamp, reverse=True)
