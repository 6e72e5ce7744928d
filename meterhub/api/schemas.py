"""
Pydantic response models for the MeterHub API.

Every successful response is wrapped in ``{"status": "success", "data": ...}``
(ingestion returns ``readings_received`` instead of ``data``). Datetimes are
serialised as ISO 8601, UTC values with a ``Z`` suffix.

CHANGELOG:
- 2026-10-18: Initial creation
"""

import datetime
from typing import Any, Literal

from pydantic import BaseModel


class IngestResponse(BaseModel):
    """Response from the ingestion endpoint."""

    status: Literal["success"] = "success"
    readings_received: int


class MeterOut(BaseModel):
    """Registered meter with reading statistics and liveness."""

    meter_id: str
    location: str | None = None
    device_info: Any = None
    total_readings: int
    first_seen: datetime.datetime
    last_seen: datetime.datetime
    latest_reading_time: datetime.datetime | None = None
    status: Literal["online", "offline"]


class MeterListResponse(BaseModel):
    status: Literal["success"] = "success"
    data: list[MeterOut]


class ReadingOut(BaseModel):
    """One measurement inside a logical sample."""

    obis_code: str
    description: str | None = None
    value: float
    unit: str | None = None
    scaler: int | None = None


class SampleOut(BaseModel):
    """A logical sample: all readings sharing one timestamp."""

    timestamp: datetime.datetime
    sequence_number: int | None = None
    readings: list[ReadingOut]


class SampleListResponse(BaseModel):
    status: Literal["success"] = "success"
    data: list[SampleOut]


class MeterInfoOut(BaseModel):
    """Identity of a meter, without statistics."""

    meter_id: str
    location: str | None = None
    device_info: Any = None
    first_seen: datetime.datetime
    last_seen: datetime.datetime


class ReadingRowOut(BaseModel):
    """A raw stored reading row with all of its columns."""

    id: int
    meter_id: str
    timestamp: datetime.datetime
    sequence_number: int | None = None
    obis_code: str
    description: str | None = None
    value: float
    unit: str | None = None
    scaler: int | None = None
    received_at: datetime.datetime


class DailyAggregateOut(BaseModel):
    """Reading count and average active power for one calendar date."""

    date: datetime.date
    reading_count: int
    avg_power: float | None = None


class DashboardData(BaseModel):
    """Combined dashboard view.

    Attributes:
        meterInfo: The most recently seen meter (empty when none exists).
        latest: Its newest raw reading rows.
        daily: Daily aggregates over the trailing window.
    """

    meterInfo: list[MeterInfoOut]
    latest: list[ReadingRowOut]
    daily: list[DailyAggregateOut]


class DashboardResponse(BaseModel):
    status: Literal["success"] = "success"
    data: DashboardData


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    message: str
