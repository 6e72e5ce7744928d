"""
Health check endpoint for the MeterHub API.

GET /api/health runs ``SELECT 1`` against the store. It answers 200 with
``{"status": "healthy", "timestamp": ...}`` when the database responds and
503 with ``{"status": "unhealthy"}`` otherwise. No authentication is
required.

CHANGELOG:
- 2026-10-18: Initial creation
"""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from meterhub.api.deps import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health(db: Annotated[AsyncSession, Depends(get_db)]) -> JSONResponse:
    """Report whether the database answers a trivial query."""
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.warning("Health check failed", exc_info=True)
        return JSONResponse(status_code=503, content={"status": "unhealthy"})

    return JSONResponse(
        content={
            "status": "healthy",
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        }
    )
