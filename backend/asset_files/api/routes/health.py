"""Health check: not gated by the token table."""

import os

from fastapi import APIRouter

from asset_files import __version__
from asset_files.schemas.system import HealthResponse
from asset_files.services import get_file_operations, get_token_store

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check():
    """Service version, whether tokens are enforced, and root accessibility."""
    try:
        auth_enabled = not get_token_store().is_empty
        root = get_file_operations().root
    except RuntimeError:
        return HealthResponse(version=__version__, auth_enabled=False, root_readable=False)

    return HealthResponse(
        version=__version__,
        auth_enabled=auth_enabled,
        root_readable=os.access(root, os.R_OK | os.X_OK),
    )


@router.get("/ping")
async def ping():
    """Ultra-lightweight ping."""
    return {"status": "ok"}
