"""
Structural validation of inbound meter samples.

Only the envelope is checked: meter_id must be a non-empty string and
readings must be a list of at most MAX_READINGS_PER_SAMPLE entries. The
individual reading fields and the sample timestamp are passed through
untouched, so a malformed value surfaces later as a StoreError when the
database rejects the row.

CHANGELOG:
- 2026-10-18: Initial creation
- 2026-10-18: Parse the envelope with a pydantic model

TODO:
- None
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from meterhub.exceptions import InvalidPayload, TooManyReadings

logger = logging.getLogger(__name__)

MAX_READINGS_PER_SAMPLE = 100


class SamplePayload(BaseModel):
    """An accepted sample envelope.

    Attributes:
        meter_id: Reporting meter.
        location: Installation location, if reported.
        timestamp: Sample timestamp as sent by the meter (unchecked).
        sequence: Sample sequence number as sent (unchecked).
        device_info: Device metadata; empty when not reported.
        readings: Raw reading entries (unchecked).
    """

    model_config = ConfigDict(frozen=True)

    meter_id: StrictStr = Field(min_length=1)
    location: Any = None
    timestamp: Any = None
    sequence: Any = None
    device_info: Any = Field(default=None, validate_default=True)
    readings: list[Any]

    @field_validator("device_info")
    @classmethod
    def empty_device_info(cls, v: Any) -> Any:
        """Store a missing or null device_info as an empty object."""
        return v or {}


def validate_payload(
    payload: Any,
    max_readings: int = MAX_READINGS_PER_SAMPLE,
) -> SamplePayload:
    """Check the sample envelope and return it as a SamplePayload.

    Args:
        payload: Raw JSON request body (bytes or str) or an already
            decoded object.
        max_readings: Maximum number of entries in ``readings``.

    Returns:
        SamplePayload: The accepted envelope.

    Raises:
        InvalidPayload: The body is not JSON, meter_id is missing, empty
            or not a string, or readings is missing or not a list.
        TooManyReadings: readings has more than ``max_readings`` entries.
    """
    try:
        if isinstance(payload, (bytes, bytearray, str)):
            sample = SamplePayload.model_validate_json(payload)
        else:
            sample = SamplePayload.model_validate(payload)
    except ValidationError as exc:
        logger.debug("Sample envelope rejected: %s", exc.errors())
        raise InvalidPayload() from None

    if len(sample.readings) > max_readings:
        raise TooManyReadings(max_readings)

    return sample
