# =============================================================================
# File: chatcache/server.py
# Description: FastAPI application entry point
# =============================================================================

from __future__ import annotations

import logging
import os

from fastapi import FastAPI

from chatcache import __version__
from chatcache.api.routers.store_router import router as store_router
from chatcache.config.logging_config import setup_logging
from chatcache.core.exceptions import setup_exception_handlers
from chatcache.core.lifespan import lifespan

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================
setup_logging(
    service_name="chatcache",
    log_file=os.getenv("LOG_FILE") if os.getenv("LOG_FILE") else None,
    enable_json=os.getenv("ENVIRONMENT") == "production",
)

logger = logging.getLogger("chatcache.server")


def create_app() -> FastAPI:
    app = FastAPI(
        title=f"chatcache API v{__version__}",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        openapi_url="/openapi.json",
    )
    app.include_router(store_router)
    setup_exception_handlers(app)
    return app


app = create_app()

__all__ = ["app", "create_app", "__version__"]

# =============================================================================
# Development entry point
# =============================================================================
if __name__ == "__main__":
    import subprocess

    port = os.getenv("PORT", "5002")
    host = os.getenv("HOST", "0.0.0.0")
    reload = os.getenv("RELOAD", "false").lower() == "true"

    logger.info(f"Starting chatcache API on {host}:{port} (reload={reload})")

    cmd = [
        "granian",
        "--interface", "asgi",
        "chatcache.server:app",
        "--host", host,
        "--port", str(port),
    ]

    if reload:
        cmd.extend([
            "--reload",
            "--reload-paths", "chatcache/",
        ])

    subprocess.run(cmd)
