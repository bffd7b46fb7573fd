"""File API routes: list, inspect, download, upload, rename, delete.

Filesystem work runs in the worker thread pool: most endpoints are plain
``def``, and the upload handler hands off with ``run_in_threadpool``.
"""

from __future__ import annotations

import io
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from asset_files.api.deps import require_identity
from asset_files.schemas.files import FileItem, RenameRequest
from asset_files.services import get_file_operations
from asset_files.services.file_catalog import FileOperationError, list_all, newest_first
from asset_files.services.file_operations import FileOperations, Upload

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_identity)])


@router.get("/list", response_model=list[FileItem])
def list_files(files: FileOperations = Depends(get_file_operations)):
    """All entries in the managed root, newest first."""
    try:
        items = list_all(files.root)
    except OSError as exc:
        logger.warning("Managed root %s not readable: %s", files.root, exc)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return newest_first(items)


@router.get("/info/{name}", response_model=FileItem)
def file_info(name: str, files: FileOperations = Depends(get_file_operations)):
    """Metadata for a single entry."""
    try:
        return files.get_one(name)
    except (OSError, FileOperationError):
        raise HTTPException(status.HTTP_404_NOT_FOUND, f"{name} not found")


@router.get("/download/{name}")
def download_file(name: str, files: FileOperations = Depends(get_file_operations)):
    """Stream a file's content."""
    try:
        path = files.resolve(name)
    except FileOperationError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, f"{name} not found")
    if not path.is_file():
        raise HTTPException(status.HTTP_404_NOT_FOUND, f"{name} not found")
    return FileResponse(path, filename=path.name)


@router.post("/upload", response_model=list[FileItem])
async def upload_files(request: Request, files: FileOperations = Depends(get_file_operations)):
    """Store uploaded parts; existing names are overwritten unless disabled.

    The form is read by hand so a part without a filename is skipped
    instead of failing validation for the whole request.
    """
    async with request.form() as form:
        uploads = [_as_upload(part) for part in form.getlist("file")]
        return await run_in_threadpool(files.create_many, uploads)


def _as_upload(part: UploadFile | str) -> Upload:
    if isinstance(part, UploadFile):
        return Upload(filename=part.filename, file=part.file)
    return Upload(filename=None, file=io.BytesIO(part.encode()))


@router.post("/rename", response_model=list[FileItem])
def rename_files(
    renames: list[RenameRequest],
    files: FileOperations = Depends(get_file_operations),
):
    """Apply each rename independently; returns the ones that succeeded."""
    return files.rename_many(renames)


@router.post("/delete", response_model=list[str])
def delete_files(
    names: list[str],
    files: FileOperations = Depends(get_file_operations),
):
    """Delete each name independently; directories go recursively."""
    return files.delete_many(names)


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(name: str, files: FileOperations = Depends(get_file_operations)):
    """Delete a single entry."""
    try:
        files.delete_one(name)
    except (FileNotFoundError, FileOperationError):
        raise HTTPException(status.HTTP_404_NOT_FOUND, f"{name} not found")
    except OSError as exc:
        logger.warning("Delete of %s failed: %s", name, exc)
        raise HTTPException(status.HTTP_403_FORBIDDEN, f"Cannot delete {name}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
