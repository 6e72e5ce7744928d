"""
SQLAlchemy ORM models for the MeterHub database.

Defines the Meter registry table and the flat MeterReading table. One row of
meter_readings holds one OBIS-coded measurement; all rows of one logical
sample share (meter_id, timestamp, sequence_number). The surrogate ``id``
records insertion order and breaks timestamp ties when reading back.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

import datetime

from sqlalchemy import (
    JSON,
    BigInteger,
    DateTime,
    Double,
    ForeignKey,
    Integer,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all MeterHub ORM models."""

    pass


class Meter(Base):
    """Identity and metadata of one energy meter.

    Created on the first sample received from ``meter_id``. Re-registration
    updates location, device_info and last_seen; first_seen is kept.

    Attributes:
        meter_id: Device identifier reported by the meter.
        location: Free-form installation location (nullable).
        device_info: Opaque device metadata (manufacturer, model, ...).
        first_seen: Server time of the first sample.
        last_seen: Server time of the most recent sample.
    """

    __tablename__ = "meters"

    meter_id: Mapped[str] = mapped_column(Text, primary_key=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    device_info: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    first_seen: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    last_seen: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:
        """Return string representation of the Meter."""
        return f"Meter(meter_id={self.meter_id!r}, last_seen={self.last_seen!r})"


class MeterReading(Base):
    """One OBIS-coded measurement belonging to a logical sample.

    Attributes:
        id: Auto-increment row id (insertion order).
        meter_id: Owning meter.
        timestamp: Sample timestamp reported by the meter.
        sequence_number: Sample sequence number, repeated on every row
            of the sample.
        obis_code: Identifier of the measured quantity.
        description: Human readable name of the quantity.
        value: Raw measured value.
        unit: Unit of ``value``.
        scaler: Power-of-ten exponent for ``value``.
        received_at: Server time the row was stored.
    """

    __tablename__ = "meter_readings"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    meter_id: Mapped[str] = mapped_column(
        Text, ForeignKey("meters.meter_id"), nullable=False, index=True
    )
    timestamp: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    sequence_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    obis_code: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    value: Mapped[float] = mapped_column(Double, nullable=False)
    unit: Mapped[str | None] = mapped_column(Text, nullable=True)
    scaler: Mapped[int | None] = mapped_column(Integer, nullable=True)
    received_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:
        """Return string representation of the MeterReading."""
        return (
            f"MeterReading(meter_id={self.meter_id!r}, "
            f"timestamp={self.timestamp!r}, obis_code={self.obis_code!r})"
        )
