# =============================================================================
# File: chatcache/core/exceptions.py
# Description: Exception handlers for the FastAPI application
# =============================================================================

import logging
import os

from fastapi import FastAPI, Request
from starlette import status
from starlette.responses import JSONResponse

from chatcache.common.exceptions.exceptions import (
    ChatCacheException,
    CorruptRecordError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)

logger = logging.getLogger("chatcache.exceptions")


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application"""
    app.add_exception_handler(NotFoundError, not_found_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(StoreUnavailableError, store_unavailable_exception_handler)
    app.add_exception_handler(CorruptRecordError, corrupt_record_exception_handler)
    app.add_exception_handler(ChatCacheException, chatcache_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Exception handlers registered")


async def not_found_exception_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning(f"Rejected request on path {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


async def store_unavailable_exception_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    """Store could not be reached; the query may succeed later"""
    logger.error(f"Store unavailable on path {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Conversation store unavailable.", "command": exc.command},
    )


async def corrupt_record_exception_handler(request: Request, exc: CorruptRecordError) -> JSONResponse:
    logger.error(f"Corrupt record on path {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"Stored {exc.entity} record could not be decoded."},
    )


async def chatcache_exception_handler(request: Request, exc: ChatCacheException) -> JSONResponse:
    logger.error(f"Unhandled chatcache error on path {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "type": type(exc).__name__},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle general unhandled exceptions"""
    logger.error(f"Unhandled exception on path {request.url.path}: {str(exc)}", exc_info=True)

    if os.getenv("ENVIRONMENT", "development") == "production":
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An internal server error occurred."}
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "type": type(exc).__name__}
    )
