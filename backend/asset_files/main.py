"""asset-files FastAPI application factory."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from asset_files import __version__
from asset_files.config import settings
from asset_files.services import init_services, shutdown_services

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("asset_files.access")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    # === STARTUP ===
    _setup_logging()

    Path(settings.root_dir).mkdir(parents=True, exist_ok=True)
    init_services()
    logger.info("asset-files v%s started, listening on %s:%s", __version__, settings.host, settings.port)

    try:
        yield
    finally:
        # === SHUTDOWN ===
        shutdown_services()
        logger.info("asset-files shutting down")


def _setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("python_multipart").setLevel(logging.WARNING)


async def _access_log(request: Request, call_next):
    """One line per request: identity, client, request line, status, duration."""
    start = time.perf_counter()
    response = await call_next(request)
    identity = getattr(request.state, "identity", None) or "-"
    client = request.client.host if request.client else "-"
    access_logger.info(
        "%s %s \"%s %s\" %d %.3fs",
        identity, client, request.method, request.url.path,
        response.status_code, time.perf_counter() - start,
    )
    return response


def create_app() -> FastAPI:
    """Application factory."""
    from asset_files.api.routes import api_router

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=_lifespan,
    )

    app.middleware("http")(_access_log)
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()


def run(**kwargs: Any) -> None:
    import uvicorn

    uvicorn.run(
        "asset_files.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.uvicorn_workers,
        log_level=settings.log_level.lower(),
        **kwargs,
    )


if __name__ == "__main__":
    run()
