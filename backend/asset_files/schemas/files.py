"""File schemas: metadata records and batch instructions."""

from pydantic import BaseModel, ConfigDict, Field


class FileItem(BaseModel):
    """File metadata for listing."""
    name: str
    size: int
    timestamp: int  # last modified, ms since epoch


class RenameRequest(BaseModel):
    """Move ``from`` to ``to``, both relative to the managed root."""
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
