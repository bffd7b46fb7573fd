"""Health schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str
    service: str = "asset-files"
    auth_enabled: bool
    root_readable: bool
