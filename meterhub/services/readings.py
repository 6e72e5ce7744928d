"""
Reading store: append-only storage of OBIS-coded measurement rows.

A logical sample is written as one multi-row INSERT, every row sharing the
sample's meter_id, timestamp and sequence_number. Reads return raw rows
newest first; regrouping into samples happens in services/samples.py.

Reading fields are not type-checked here. A row the database rejects
(missing obis_code, non-numeric value, unparseable timestamp) fails the
whole statement, and the caller sees a StoreError.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from meterhub.db.errors import store_errors
from meterhub.db.models import MeterReading

logger = logging.getLogger(__name__)

READING_FIELDS = ("obis_code", "description", "value", "unit", "scaler")


def parse_timestamp(value: Any) -> Any:
    """Convert an ISO 8601 string to an aware datetime.

    Naive results are taken to be UTC. Values that are not parseable
    strings are returned unchanged for the database to accept or reject.
    """
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return value
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    return value


def build_reading_rows(
    meter_id: str,
    timestamp: Any,
    sequence_number: Any,
    readings: list,
) -> list[dict]:
    """Flatten a sample's readings into insertable row dicts.

    Entries that are not objects contribute empty fields, which the
    NOT NULL constraints then reject.
    """
    sample_ts = parse_timestamp(timestamp)
    rows = []
    for reading in readings:
        fields = reading if isinstance(reading, dict) else {}
        row = {name: fields.get(name) for name in READING_FIELDS}
        row.update(
            meter_id=meter_id,
            timestamp=sample_ts,
            sequence_number=sequence_number,
        )
        rows.append(row)
    return rows


async def append_readings(
    db: AsyncSession,
    meter_id: str,
    timestamp: Any,
    sequence_number: Any,
    readings: list,
) -> int:
    """Insert one row per reading for a sample.

    Does not commit; the caller owns the transaction so that the meter
    upsert and the rows succeed or fail together.

    Args:
        db: Async SQLAlchemy session.
        meter_id: Owning meter.
        timestamp: Sample timestamp (ISO 8601 string or datetime).
        sequence_number: Sample sequence number.
        readings: Raw reading entries.

    Returns:
        int: Number of rows written.
    """
    rows = build_reading_rows(meter_id, timestamp, sequence_number, readings)
    if not rows:
        return 0

    await db.execute(insert(MeterReading).values(rows))
    return len(rows)


async def query_latest(
    db: AsyncSession,
    meter_id: str,
    row_limit: int,
) -> list[MeterReading]:
    """Return the newest ``row_limit`` rows of a meter.

    Rows are ordered by (timestamp DESC, id DESC). The limit counts rows,
    not samples.

    Raises:
        StoreError: If the query fails.
    """
    stmt = (
        select(MeterReading)
        .where(MeterReading.meter_id == meter_id)
        .order_by(MeterReading.timestamp.desc(), MeterReading.id.desc())
        .limit(row_limit)
    )
    with store_errors("reading query"):
        result = await db.execute(stmt)
        return list(result.scalars().all())


# The dashboard's "latest N rows" uses the same primitive.
query_recent = query_latest


def reading_row_to_dict(row: MeterReading) -> dict:
    """Serialise a MeterReading ORM instance with all of its columns."""
    return {
        "id": row.id,
        "meter_id": row.meter_id,
        "timestamp": row.timestamp,
        "sequence_number": row.sequence_number,
        "obis_code": row.obis_code,
        "description": row.description,
        "value": row.value,
        "unit": row.unit,
        "scaler": row.scaler,
        "received_at": row.received_at,
    }
