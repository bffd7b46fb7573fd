"""Business logic services: singleton registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from asset_files.config import settings

if TYPE_CHECKING:
    from asset_files.services.file_operations import FileOperations
    from asset_files.services.token_store import TokenStore

logger = logging.getLogger(__name__)

_token_store: TokenStore | None = None
_file_operations: FileOperations | None = None


def init_services(root_dir: str | None = None, auth_file: str | None = None) -> None:
    """Load the identity table and bind file operations to the managed root."""
    global _token_store, _file_operations

    from asset_files.services.file_operations import FileOperations
    from asset_files.services.token_store import TokenStore

    _token_store = TokenStore.load(auth_file or settings.auth_file)
    if _token_store.is_empty:
        logger.warning("No identities configured, all requests are allowed")

    _file_operations = FileOperations(
        root_dir or settings.root_dir,
        overwrite=settings.upload_overwrite,
    )
    logger.info("File services bound to %s", _file_operations.root)


def shutdown_services() -> None:
    """Drop service singletons."""
    global _token_store, _file_operations
    _token_store = None
    _file_operations = None


def get_token_store() -> TokenStore:
    if _token_store is None:
        raise RuntimeError("Services not initialized, call init_services() first")
    return _token_store


def get_file_operations() -> FileOperations:
    if _file_operations is None:
        raise RuntimeError("Services not initialized, call init_services() first")
    return _file_operations
