"""
FastAPI application entry point for the MeterHub API.

Loads Settings at startup, configures logging, initialises the pooled
database engine and parses API_KEYS into a BearerAuth instance stored on
app.state for route handlers. Every error leaves the API as
``{"status": "error", "message": ...}``.

CHANGELOG:
- 2026-10-18: Initial creation
"""

import logging
import os
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from meterhub.api.dashboard import router as dashboard_router
from meterhub.api.health import router as health_router
from meterhub.api.ingest import router as ingest_router
from meterhub.api.schemas import ErrorResponse
from meterhub.api.meters import router as meters_router
from meterhub.auth.bearer import BearerAuth, parse_api_keys
from meterhub.config import Settings
from meterhub.db.session import dispose_engine, init_engine
from meterhub.exceptions import MeterHubError, StoreError
from meterhub.logging_setup import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: configuration, engine setup and teardown.

    Raises:
        RuntimeError: If API_KEYS contains no usable key.
    """
    settings = Settings()
    setup_logging(settings.log_level)
    app.state.settings = settings

    api_keys = parse_api_keys(settings.api_keys)
    if not api_keys:
        raise RuntimeError("API_KEYS parsed but contains no valid key")
    app.state.auth = BearerAuth(api_keys)
    logger.info("Loaded %d API key(s) from API_KEYS", len(api_keys))

    init_engine(settings.database_url, settings.db_pool_size)

    logger.info("Environment validated, MeterHub API ready")
    yield
    await dispose_engine()
    logger.info("MeterHub API shutting down")


def _cors_origins() -> list[str]:
    """Read CORS_ORIGINS (comma-separated, default "*").

    Middleware is installed at import time, before the lifespan builds
    Settings, so this one value is read from the environment directly.
    """
    raw = os.environ.get("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _error(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=headers,
    )


async def meterhub_error_handler(request: Request, exc: MeterHubError) -> JSONResponse:
    """Render a MeterHubError with its status and public message."""
    if not isinstance(exc, StoreError):
        logger.warning(
            "%s %s rejected: %s", request.method, request.url.path, exc.message
        )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return _error(exc.status_code, exc.message, headers)


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (404, 405, 413, ...) in the error envelope."""
    message = "Endpoint not found" if exc.status_code == 404 else str(exc.detail)
    return _error(exc.status_code, message, getattr(exc, "headers", None))


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as a 400 invalid payload."""
    logger.warning(
        "%s %s failed validation: %s", request.method, request.url.path, exc.errors()
    )
    return _error(400, "Invalid payload")


app = FastAPI(
    title="MeterHub API",
    description="Telemetry ingestion and query API for DLMS energy meters.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)

app.add_exception_handler(MeterHubError, meterhub_error_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - start) * 1000,
    )
    return response


app.include_router(health_router)
app.include_router(ingest_router)
app.include_router(meters_router)
app.include_router(dashboard_router)


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    uvicorn.run(
        "meterhub.api.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3000")),
    )
