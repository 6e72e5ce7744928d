"""
Ingestion service for meter samples.

Validates the sample envelope, then registers the meter and appends the
sample's reading rows inside one transaction. Validation failures are raised
before the database is touched, so a rejected sample never leaves rows
behind; a store failure rolls back the meter upsert together with the rows.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from meterhub.db.errors import store_errors
from meterhub.services.meters import upsert_meter
from meterhub.services.readings import append_readings
from meterhub.services.validation import MAX_READINGS_PER_SAMPLE, validate_payload

logger = logging.getLogger(__name__)


async def ingest_sample(
    db: AsyncSession,
    payload: Any,
    max_readings: int = MAX_READINGS_PER_SAMPLE,
) -> int:
    """Store one sample: meter upsert plus one row per reading.

    Args:
        db: Async SQLAlchemy session.
        payload: Raw JSON request body, or an already decoded object.
        max_readings: Maximum readings accepted in the sample.

    Returns:
        int: Number of readings received (and stored).

    Raises:
        InvalidPayload: Body is not JSON, or meter_id or readings missing.
        TooManyReadings: More than ``max_readings`` readings.
        StoreError: The upsert or the row insert failed; nothing is kept.
    """
    sample = validate_payload(payload, max_readings)

    with store_errors(f"ingestion for meter {sample.meter_id}"):
        try:
            await upsert_meter(db, sample.meter_id, sample.location, sample.device_info)
            await append_readings(
                db,
                sample.meter_id,
                sample.timestamp,
                sample.sequence,
                sample.readings,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    logger.info(
        "Ingested %d reading(s) for meter %s (sequence=%s)",
        len(sample.readings),
        sample.meter_id,
        sample.sequence,
    )
    return len(sample.readings)
