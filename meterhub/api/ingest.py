"""
POST /api/v1/meter-readings endpoint for ingesting one meter sample.

Requires a bearer API key, enforces the request body limit and hands the raw
JSON body to the ingestion service, which parses it into a SamplePayload. Validation and store failures are
raised as MeterHubError subclasses and rendered by the handlers in main.py.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from meterhub.api.deps import get_db, get_settings, require_api_key
from meterhub.api.schemas import IngestResponse
from meterhub.config import Settings
from meterhub.services.ingestion import ingest_sample

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["ingest"])


async def _read_body(request: Request, max_request_bytes: int) -> bytes:
    """Read the request body, rejecting anything above ``max_request_bytes``.

    Raises:
        HTTPException: 400 for a bad Content-Length, 413 when too large.
    """
    content_length = request.headers.get("content-length")
    if content_length is not None:
        try:
            content_length_int = int(content_length)
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail="Invalid Content-Length header.",
            ) from None
        if content_length_int > max_request_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"Request body exceeds limit of {max_request_bytes} bytes.",
            )

    body = await request.body()
    if len(body) > max_request_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Request body exceeds limit of {max_request_bytes} bytes.",
        )
    return body


@router.post(
    "/meter-readings",
    response_model=IngestResponse,
    dependencies=[Depends(require_api_key)],
)
async def post_meter_readings(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> IngestResponse:
    """Ingest one sample of meter readings.

    Args:
        request: The incoming FastAPI request.
        settings: Application settings.
        db: Async database session.

    Returns:
        IngestResponse: Number of readings received.

    Raises:
        InvalidPayload: Body is not JSON or lacks meter_id/readings.
        TooManyReadings: More readings than MAX_READINGS_PER_SAMPLE.
        StoreError: The sample could not be stored.
    """
    body = await _read_body(request, settings.max_request_bytes)
    received = await ingest_sample(db, body, settings.max_readings_per_sample)
    return IngestResponse(readings_received=received)
