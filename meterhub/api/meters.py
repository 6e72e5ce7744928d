"""
Meter query endpoints.

GET /api/v1/meters lists every registered meter with reading statistics and
online/offline status. GET /api/v1/meters/{meter_id}/latest returns the most
recent logical samples of one meter. Neither endpoint requires
authentication.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

import logging
from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from meterhub.api.deps import get_db, get_settings
from meterhub.api.schemas import MeterListResponse, MeterOut, SampleListResponse, SampleOut
from meterhub.config import Settings
from meterhub.services.meters import list_meters
from meterhub.services.samples import latest_samples

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["meters"])


def parse_limit(raw: str | None, maximum: int) -> int:
    """Parse the ``limit`` query parameter leniently.

    Missing, non-numeric and non-positive values fall back to 1; values
    above ``maximum`` are clamped.
    """
    try:
        limit = int(raw) if raw is not None else 1
    except ValueError:
        return 1
    if limit < 1:
        return 1
    return min(limit, maximum)


@router.get("/meters", response_model=MeterListResponse)
async def get_meters(
    settings: Annotated[Settings, Depends(get_settings)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MeterListResponse:
    """Return all meters, most recently seen first."""
    meters = await list_meters(
        db,
        online_threshold=timedelta(seconds=settings.online_threshold_s),
    )
    return MeterListResponse(data=[MeterOut(**meter) for meter in meters])


@router.get("/meters/{meter_id}/latest", response_model=SampleListResponse)
async def get_latest_samples(
    meter_id: str,
    settings: Annotated[Settings, Depends(get_settings)],
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Annotated[
        str | None,
        Query(description="Number of logical samples to return (default 1)."),
    ] = None,
) -> SampleListResponse:
    """Return the latest logical samples of a meter.

    An unknown meter_id yields an empty list, not an error.
    """
    sample_limit = parse_limit(limit, settings.max_sample_limit)
    samples = await latest_samples(
        db,
        meter_id,
        sample_limit,
        overfetch_factor=settings.sample_overfetch_factor,
    )
    logger.debug("Latest query: meter_id=%s limit=%d", meter_id, sample_limit)
    return SampleListResponse(data=[SampleOut(**sample) for sample in samples])
