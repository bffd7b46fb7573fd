"""Test fixtures: temp managed root, identity table and FastAPI test client."""

import json
import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from asset_files.main import create_app
from asset_files.services import init_services, shutdown_services

IDENTITIES = [
    {"name": "alice", "token": "alice-secret"},
    {"name": "bob", "token": "bob-secret"},
]


def write_file(root, name: str, data: bytes = b"", mtime_ms: int | None = None):
    """Create ``root/name`` with ``data`` and an optional mtime in ms."""
    path = root / name
    path.write_bytes(data)
    if mtime_ms is not None:
        ns = mtime_ms * 1_000_000
        os.utime(path, ns=(ns, ns))
    return path


@pytest.fixture
def root_dir(tmp_path):
    """Managed root directory for a single test."""
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture
def auth_file(tmp_path):
    """Identity table with two callers."""
    path = tmp_path / "auth.json"
    path.write_text(json.dumps(IDENTITIES), encoding="utf-8")
    return path


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer alice-secret"}


def _make_client(root_dir, auth_file):
    init_services(root_dir=str(root_dir), auth_file=str(auth_file))
    app = create_app()
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def client(root_dir, auth_file):
    """Async test client with the identity table loaded."""
    c = _make_client(root_dir, auth_file)
    async with c:
        yield c
    shutdown_services()


@pytest_asyncio.fixture
async def open_client(root_dir, tmp_path):
    """Async test client whose identity table is missing (open access)."""
    c = _make_client(root_dir, tmp_path / "missing.json")
    async with c:
        yield c
    shutdown_services()
