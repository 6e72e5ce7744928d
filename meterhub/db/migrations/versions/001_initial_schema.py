"""
Initial schema: meters registry and meter_readings rows.

Creates the meters table keyed by meter_id and the append-only
meter_readings table with a surrogate id (insertion order), a foreign key to
meters, and indexes on meter_id and timestamp for the latest-rows and
daily-window queries.

Revision ID: 001
Revises: None
Create Date: 2026-10-18

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# Revision identifiers used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create meters and meter_readings with their indexes."""
    op.create_table(
        "meters",
        sa.Column("meter_id", sa.Text(), nullable=False),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("device_info", sa.JSON(), nullable=False),
        sa.Column(
            "first_seen",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "last_seen",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("meter_id"),
    )

    op.create_table(
        "meter_readings",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("meter_id", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("sequence_number", sa.Integer(), nullable=True),
        sa.Column("obis_code", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("value", sa.Double(), nullable=False),
        sa.Column("unit", sa.Text(), nullable=True),
        sa.Column("scaler", sa.Integer(), nullable=True),
        sa.Column(
            "received_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["meter_id"], ["meters.meter_id"]),
    )
    op.create_index("ix_meter_readings_meter_id", "meter_readings", ["meter_id"])
    op.create_index("ix_meter_readings_timestamp", "meter_readings", ["timestamp"])


def downgrade() -> None:
    """Drop meter_readings, then meters."""
    op.drop_index("ix_meter_readings_timestamp", table_name="meter_readings")
    op.drop_index("ix_meter_readings_meter_id", table_name="meter_readings")
    op.drop_table("meter_readings")
    op.drop_table("meters")
