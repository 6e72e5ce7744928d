"""
Meter registry: device identity, metadata and last-contact tracking.

Registration is a single INSERT ... ON CONFLICT (meter_id) DO UPDATE so that
concurrent samples from the same meter cannot lose updates. first_seen is
only ever written by the INSERT branch.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

import logging
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from meterhub.db.errors import store_errors
from meterhub.db.models import Meter, MeterReading
from meterhub.services.liveness import ONLINE_THRESHOLD, liveness_status

logger = logging.getLogger(__name__)


def build_upsert_statement(meter_id: str, location: Any, device_info: Any):
    """Build the atomic insert-or-update statement for a meter.

    New rows take first_seen/last_seen from the server default ``now()``.
    On conflict, location, device_info and last_seen are refreshed.
    """
    stmt = pg_insert(Meter).values(
        meter_id=meter_id,
        location=location,
        device_info=device_info,
    )
    return stmt.on_conflict_do_update(
        index_elements=[Meter.meter_id],
        set_={
            "location": stmt.excluded.location,
            "device_info": stmt.excluded.device_info,
            "last_seen": func.now(),
        },
    )


async def upsert_meter(
    db: AsyncSession,
    meter_id: str,
    location: Any = None,
    device_info: Any = None,
) -> None:
    """Register a meter or refresh its metadata and last_seen.

    Does not commit; the caller owns the transaction.

    Args:
        db: Async SQLAlchemy session.
        meter_id: Meter identifier.
        location: Installation location, may be None.
        device_info: Device metadata; None is stored as ``{}``.
    """
    await db.execute(build_upsert_statement(meter_id, location, device_info or {}))
    logger.debug("Upserted meter %s", meter_id)


def meter_to_dict(meter: Meter) -> dict:
    """Serialise a Meter ORM instance to a plain dict."""
    return {
        "meter_id": meter.meter_id,
        "location": meter.location,
        "device_info": meter.device_info or {},
        "first_seen": meter.first_seen,
        "last_seen": meter.last_seen,
    }


async def list_meters(
    db: AsyncSession,
    now: datetime | None = None,
    online_threshold: timedelta = ONLINE_THRESHOLD,
) -> list[dict]:
    """List all meters with reading statistics and liveness status.

    Each entry carries the number of stored reading rows and the timestamp
    of the newest one (LEFT JOIN, so meters without rows report 0 and None).
    Ordered by last_seen, most recent first.

    Args:
        db: Async SQLAlchemy session.
        now: Evaluation time for liveness; defaults to the current UTC time.
        online_threshold: Max age of last_seen for an "online" status.

    Returns:
        list[dict]: One dict per meter.

    Raises:
        StoreError: If the query fails.
    """
    stmt = (
        select(
            Meter,
            func.count(MeterReading.id).label("total_readings"),
            func.max(MeterReading.timestamp).label("latest_reading_time"),
        )
        .outerjoin(MeterReading, MeterReading.meter_id == Meter.meter_id)
        .group_by(Meter.meter_id)
        .order_by(Meter.last_seen.desc())
    )
    with store_errors("meter listing"):
        result = await db.execute(stmt)
        rows = result.all()

    meters = []
    for meter, total_readings, latest_reading_time in rows:
        entry = meter_to_dict(meter)
        entry["total_readings"] = total_readings
        entry["latest_reading_time"] = latest_reading_time
        entry["status"] = liveness_status(meter.last_seen, now, online_threshold)
        meters.append(entry)
    return meters


async def most_recent_meter(db: AsyncSession) -> dict | None:
    """Return the most recently seen meter, or None if no meter exists."""
    stmt = select(Meter).order_by(Meter.last_seen.desc()).limit(1)
    with store_errors("most recent meter lookup"):
        result = await db.execute(stmt)
        meter = result.scalar_one_or_none()
    return meter_to_dict(meter) if meter is not None else None
