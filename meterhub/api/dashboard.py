"""
GET /api/v1/dashboard/data endpoint feeding the dashboard page.

Combines the most recently seen meter, its newest raw reading rows and the
daily aggregate of the trailing window into one response.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from meterhub.api.deps import get_db, get_settings
from meterhub.api.schemas import (
    DailyAggregateOut,
    DashboardData,
    DashboardResponse,
    MeterInfoOut,
    ReadingRowOut,
)
from meterhub.config import Settings
from meterhub.services.aggregation import daily_summary
from meterhub.services.meters import most_recent_meter
from meterhub.services.readings import query_recent, reading_row_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["dashboard"])


@router.get("/dashboard/data", response_model=DashboardResponse)
async def get_dashboard_data(
    settings: Annotated[Settings, Depends(get_settings)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DashboardResponse:
    """Return meter identity, latest rows and daily aggregates.

    With no registered meter, ``meterInfo`` and ``latest`` are empty; the
    daily aggregate still covers all meters.
    """
    meter = await most_recent_meter(db)

    latest_rows = []
    if meter is not None:
        latest_rows = await query_recent(
            db, meter["meter_id"], settings.dashboard_latest_rows
        )

    daily = await daily_summary(
        db,
        window_days=settings.daily_window_days,
        active_power_obis_code=settings.active_power_obis_code,
    )

    return DashboardResponse(
        data=DashboardData(
            meterInfo=[MeterInfoOut(**meter)] if meter is not None else [],
            latest=[ReadingRowOut(**reading_row_to_dict(row)) for row in latest_rows],
            daily=[DailyAggregateOut(**day) for day in daily],
        )
    )
