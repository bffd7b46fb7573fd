"""Filesystem mutations inside the managed root directory.

Batch methods follow a partial-success contract: every item is attempted,
a failing item is dropped from the result, and the survivors keep their
input order. Callers cannot tell from the result which items failed or why.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Iterable, TypeVar

from asset_files.schemas.files import FileItem, RenameRequest
from asset_files.services.file_catalog import FileOperationError, InvalidNameError, describe

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class PathEscapeError(FileOperationError):
    """Name resolves outside the managed root (or to the root itself)."""


@dataclass
class Upload:
    """One uploaded part: suggested filename plus a readable stream."""
    filename: str | None
    file: BinaryIO


def collect(items: Iterable[T], fn: Callable[[T], R]) -> list[R]:
    """Map ``fn`` over ``items`` and keep only the successful results."""
    results: list[R] = []
    for item in items:
        try:
            results.append(fn(item))
        except (OSError, FileOperationError) as e:
            logger.debug("Batch item %r skipped: %s", item, e)
    return results


class FileOperations:
    """Create, rename and delete entries under ``root_dir``.

    Synchronous and lock-free; concurrent requests on the same name race
    at the level of the individual syscalls.
    """

    def __init__(self, root_dir: str | Path, overwrite: bool = True):
        self._root = Path(os.path.abspath(root_dir))
        self._overwrite = overwrite

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, name: str) -> Path:
        """Join ``name`` to the root, refusing anything that escapes it."""
        if "\0" in name:
            raise InvalidNameError(f"Embedded NUL in {name!r}")
        candidate = Path(os.path.normpath(os.path.join(self._root, name)))
        if candidate == self._root or os.path.commonpath([self._root, candidate]) != str(self._root):
            raise PathEscapeError(f"{name!r} is outside the managed root")
        return candidate

    def get_one(self, name: str) -> FileItem:
        return describe(self.resolve(name))

    # --- create -------------------------------------------------------

    def create_one(self, upload: Upload) -> FileItem:
        if not upload.filename:
            raise InvalidNameError("Upload has no filename")
        dest = self.resolve(upload.filename)
        # "xb" raises FileExistsError for a taken name
        with open(dest, "wb" if self._overwrite else "xb") as out:
            shutil.copyfileobj(upload.file, out)
        item = describe(dest)
        logger.info("Stored upload %s (%d bytes)", item.name, item.size)
        return item

    def create_many(self, uploads: Iterable[Upload]) -> list[FileItem]:
        return collect(uploads, self.create_one)

    # --- rename -------------------------------------------------------

    def rename_one(self, request: RenameRequest) -> FileItem:
        src = self.resolve(request.from_)
        dst = self.resolve(request.to)
        os.rename(src, dst)
        logger.info("Renamed %s -> %s", request.from_, request.to)
        return describe(dst)

    def rename_many(self, requests: Iterable[RenameRequest]) -> list[FileItem]:
        return collect(requests, self.rename_one)

    # --- delete -------------------------------------------------------

    def delete_one(self, name: str) -> str:
        """Remove a file, or a directory with its whole subtree.

        A symlink to a directory is removed as a link; its target is kept.
        """
        path = self.resolve(name)
        if path.is_file() or (path.is_dir() and path.is_symlink()):
            path.unlink()
        elif path.is_dir():
            shutil.rmtree(path)
        else:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", name)
        logger.info("Deleted %s", name)
        return name

    def delete_many(self, names: Iterable[str]) -> list[str]:
        return collect(names, self.delete_one)
