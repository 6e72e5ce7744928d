"""
API configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
Values come from environment variables or a .env file; the defaults for the
tunables are the named constants of the service modules they control.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from meterhub.services.aggregation import ACTIVE_POWER_OBIS_CODE, DAILY_WINDOW_DAYS
from meterhub.services.liveness import ONLINE_THRESHOLD
from meterhub.services.samples import MAX_SAMPLE_LIMIT, SAMPLE_OVERFETCH_FACTOR
from meterhub.services.validation import MAX_READINGS_PER_SAMPLE


class Settings(BaseSettings):
    """MeterHub API configuration.

    Attributes:
        database_url: SQLAlchemy async URL, e.g. postgresql+asyncpg://...
        api_keys: Comma-separated allow-list of bearer API keys.
        db_pool_size: Connection pool size for the async engine.
        max_readings_per_sample: Max readings accepted in one sample.
        max_request_bytes: Max ingestion request body size.
        sample_overfetch_factor: Rows fetched per requested logical sample.
        max_sample_limit: Upper clamp for the latest-samples ``limit``.
        online_threshold_s: Seconds since last contact a meter stays online.
        daily_window_days: Trailing window of the daily aggregate.
        dashboard_latest_rows: Raw rows returned by the dashboard view.
        active_power_obis_code: OBIS code averaged by the daily aggregate.
        log_level: Root log level name.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str
    api_keys: str
    db_pool_size: int = 10
    max_readings_per_sample: int = MAX_READINGS_PER_SAMPLE
    max_request_bytes: int = 10 * 1024 * 1024
    sample_overfetch_factor: int = SAMPLE_OVERFETCH_FACTOR
    max_sample_limit: int = MAX_SAMPLE_LIMIT
    online_threshold_s: int = int(ONLINE_THRESHOLD.total_seconds())
    daily_window_days: int = DAILY_WINDOW_DAYS
    dashboard_latest_rows: int = 10
    active_power_obis_code: str = ACTIVE_POWER_OBIS_CODE
    log_level: str = "INFO"

    @field_validator(
        "db_pool_size",
        "max_readings_per_sample",
        "max_request_bytes",
        "sample_overfetch_factor",
        "max_sample_limit",
        "online_threshold_s",
        "daily_window_days",
        "dashboard_latest_rows",
    )
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        """Reject zero or negative limits and windows."""
        if v < 1:
            raise ValueError(f"must be >= 1 (got: {v})")
        return v

