"""asset-files configuration: Pydantic BaseSettings loaded from .env."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "asset-files"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Network
    host: str = "0.0.0.0"
    port: int = 8080
    api_prefix: str = "/api"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:8080",
    ]

    # Managed root directory (relative resolved from backend/ at runtime)
    root_dir: str = "./data"

    # Identity table: JSON array of {"name": ..., "token": ...}
    auth_file: str = "/etc/asset-files/auth.json"

    # When True, GET/HEAD requests skip the token check
    public_reads: bool = False

    # When False, uploads never replace an existing file
    upload_overwrite: bool = True

    uvicorn_workers: int = 1

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        env_prefix="ASSET_FILES_",
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str) and not value.startswith("["):
            return [o.strip() for o in value.split(",") if o.strip()]
        if isinstance(value, list):
            return value
        return ["http://localhost:5173"]

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        """Ensure file paths are absolute."""
        base = Path(__file__).resolve().parent.parent  # backend/
        for field in ("root_dir", "auth_file"):
            val = getattr(self, field)
            if not Path(val).is_absolute():
                setattr(self, field, str(base / val))
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
