"""
Sample reconstructor: regroups flat reading rows into logical samples.

The store limits by rows, so ``latest_samples`` over-fetches
``limit * SAMPLE_OVERFETCH_FACTOR`` rows and groups them by timestamp. The
factor assumes at most that many readings per sample; a larger sample can
be cut at the row limit and come back with only part of its readings.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

import logging
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from meterhub.db.models import MeterReading
from meterhub.services.readings import query_latest

logger = logging.getLogger(__name__)

SAMPLE_OVERFETCH_FACTOR = 10
MAX_SAMPLE_LIMIT = 100


def _reading_to_dict(row: MeterReading) -> dict:
    return {
        "obis_code": row.obis_code,
        "description": row.description,
        "value": row.value,
        "unit": row.unit,
        "scaler": row.scaler,
    }


def group_samples(rows: Iterable[MeterReading], limit: int = 1) -> list[dict]:
    """Group rows into logical samples, newest first.

    ``rows`` must already be ordered by (timestamp DESC, id DESC). Rows
    sharing a timestamp form one sample, which keeps the sequence_number
    of its first row. Readings inside a sample are returned in ingestion
    order.

    Args:
        rows: Reading rows of a single meter.
        limit: Maximum number of samples to return.

    Returns:
        list[dict]: ``{"timestamp", "sequence_number", "readings"}`` dicts.
    """
    samples: dict = {}
    for row in rows:
        sample = samples.get(row.timestamp)
        if sample is None:
            if len(samples) >= limit:
                break
            sample = {
                "timestamp": row.timestamp,
                "sequence_number": row.sequence_number,
                "readings": [],
            }
            samples[row.timestamp] = sample
        sample["readings"].append(_reading_to_dict(row))

    # Rows arrive id DESC; flip each sample back to the order it was sent in.
    for sample in samples.values():
        sample["readings"].reverse()
    return list(samples.values())


async def latest_samples(
    db: AsyncSession,
    meter_id: str,
    limit: int = 1,
    overfetch_factor: int = SAMPLE_OVERFETCH_FACTOR,
) -> list[dict]:
    """Return up to ``limit`` of the most recent logical samples of a meter.

    An unknown or silent meter yields an empty list.

    Args:
        db: Async SQLAlchemy session.
        meter_id: Meter to query.
        limit: Number of samples wanted.
        overfetch_factor: Rows fetched per wanted sample.

    Returns:
        list[dict]: Logical samples, newest first.

    Raises:
        StoreError: If the underlying query fails.
    """
    rows = await query_latest(db, meter_id, limit * overfetch_factor)
    samples = group_samples(rows, limit)
    logger.debug(
        "Latest samples: meter_id=%s limit=%d rows=%d samples=%d",
        meter_id,
        limit,
        len(rows),
        len(samples),
    )
    return samples
