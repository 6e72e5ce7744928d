"""
Aggregation service for the dashboard's daily summary.

Groups the reading rows of the trailing window by UTC calendar date and
returns, per date, the number of rows and the average value of the active
power (+) readings. A date without active power rows reports None, not 0.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import Date, case, cast, func, literal_column, select
from sqlalchemy.ext.asyncio import AsyncSession

from meterhub.db.errors import store_errors
from meterhub.db.models import MeterReading

logger = logging.getLogger(__name__)

# OBIS 1.0.1.7.0.255: instantaneous active power, positive direction (import).
ACTIVE_POWER_OBIS_CODE = "1.0.1.7.0.255"
DAILY_WINDOW_DAYS = 7


def build_daily_summary_statement(
    since: datetime,
    active_power_obis_code: str = ACTIVE_POWER_OBIS_CODE,
):
    """Build the per-date count / average active power query.

    Rows with ``timestamp >= since`` are grouped by their UTC date, newest
    date first. ``AVG(CASE ...)`` ignores the NULLs of non-matching rows, so
    dates without active power rows yield NULL.
    """
    # 'UTC' is a literal so GROUP BY repeats the SELECT expression exactly.
    day = cast(
        func.timezone(literal_column("'UTC'"), MeterReading.timestamp), Date
    ).label("date")
    active_power = case(
        (MeterReading.obis_code == active_power_obis_code, MeterReading.value),
    )
    return (
        select(
            day,
            func.count(MeterReading.id).label("reading_count"),
            func.avg(active_power).label("avg_power"),
        )
        .where(MeterReading.timestamp >= since)
        .group_by(day)
        .order_by(day.desc())
    )


async def daily_summary(
    db: AsyncSession,
    now: datetime | None = None,
    window_days: int = DAILY_WINDOW_DAYS,
    active_power_obis_code: str = ACTIVE_POWER_OBIS_CODE,
) -> list[dict]:
    """Return per-day reading counts and average active power.

    Args:
        db: Async database session.
        now: End of the window; defaults to the current UTC time.
        window_days: Length of the trailing window in days.
        active_power_obis_code: OBIS code whose values are averaged.

    Returns:
        list[dict]: ``{"date", "reading_count", "avg_power"}`` dicts,
        most recent date first.

    Raises:
        StoreError: If the query fails.
    """
    if now is None:
        now = datetime.now(UTC)
    since = now - timedelta(days=window_days)

    stmt = build_daily_summary_statement(since, active_power_obis_code)
    with store_errors("daily summary"):
        result = await db.execute(stmt)
        rows = result.mappings().all()

    logger.debug("Daily summary since %s: %d day(s)", since.isoformat(), len(rows))
    return [
        {
            "date": row["date"],
            "reading_count": row["reading_count"],
            "avg_power": float(row["avg_power"]) if row["avg_power"] is not None else None,
        }
        for row in rows
    ]
