"""
StreamHub API Server - FastAPI Application

This is the main entry point for the video-sharing platform backend.
It mounts the resource routers and turns every failure into the shared
`{statusCode, data, message, success}` envelope.

Business logic is delegated to the controllers package - this file only handles:
- Router registration
- Error-to-envelope translation
- Middleware configuration
- Health checks
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.envelope import failure
from api.errors import ApiError
from config import config
from db.base import Base
from db.session import engine
from routes import ROUTERS

import db.models  # noqa: F401  (registers tables on Base.metadata)


# Configure logging
logging.basicConfig(
    level=getattr(logging, config.server.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler for startup/shutdown events.

    Validates configuration and, when enabled, creates missing tables.
    """
    logger.info("Starting StreamHub API...")

    for warning in config.validate():
        logger.warning(f"Config warning: {warning}")

    if config.database.auto_create:
        Base.metadata.create_all(bind=engine)
        logger.info("Entity store tables ensured")

    logger.info(f"Storage backend: {config.storage.backend}")
    logger.info(f"Debug mode: {config.server.debug}")

    yield

    logger.info("Shutting down StreamHub API...")
    engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title="StreamHub API",
    description="Video-sharing platform backend: videos, comments, playlists and subscriptions",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs" if config.server.debug else None,
    redoc_url="/redoc" if config.server.debug else None,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.server.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)


# =============================================================================
# Error envelope
# =============================================================================

def _envelope(status_code: int, message: str, errors: list | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=failure(status_code, message, errors).model_dump(),
    )


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.kind} error on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    return _envelope(exc.status_code, exc.message, exc.errors)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": str(error.get("msg", "")),
            "type": str(error.get("type", "")),
        }
        for error in exc.errors()
    ]
    logger.warning(f"Malformed request on {request.method} {request.url.path}: {len(errors)} error(s)")
    return _envelope(status.HTTP_400_BAD_REQUEST, "Invalid request", errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _envelope(exc.status_code, str(exc.detail))


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Entity store failure on {request.method} {request.url.path}: {exc}")
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Entity store failure")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# =============================================================================
# Routers
# =============================================================================

for router in ROUTERS:
    app.include_router(router, prefix=config.server.api_prefix)

if config.storage.backend == "local" and os.path.isdir(config.storage.media_dir):
    app.mount("/media", StaticFiles(directory=config.storage.media_dir), name="media")


@app.get("/health", tags=["System"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "version": VERSION}


@app.get("/", tags=["System"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "service": "StreamHub API",
        "version": VERSION,
        "apiPrefix": config.server.api_prefix,
        "docs": "/docs" if config.server.debug else "Disabled in production"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
        log_level=config.server.log_level.lower()
    )
