"""
Error taxonomy for the MeterHub API.

Every domain failure derives from MeterHubError and carries the HTTP status
and the public message rendered by the exception handlers in api/main.py.
Store failures keep their internal detail in the exception chain and in the
logs; only the generic public message reaches the caller.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""


class MeterHubError(Exception):
    """Base class for all MeterHub errors.

    Attributes:
        status_code: HTTP status used when the error reaches the API boundary.
        message: Public, caller-safe description of the failure.
    """

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidPayload(MeterHubError):
    """The sample payload is missing meter_id or readings."""

    status_code = 400
    message = "Invalid payload"


class TooManyReadings(MeterHubError):
    """The sample payload carries more readings than the configured limit."""

    status_code = 400
    message = "Too many readings (max 100)"

    def __init__(self, limit: int = 100) -> None:
        self.limit = limit
        super().__init__(f"Too many readings (max {limit})")


class Unauthorized(MeterHubError):
    """The bearer API key is missing or not in the allow-list."""

    status_code = 401
    message = "Invalid API key"


class StoreError(MeterHubError):
    """The persistence layer rejected or failed an operation."""

    status_code = 500
    message = "Database error"


class StoreUnavailable(StoreError):
    """The persistence layer could not be reached."""

    status_code = 503
    message = "Database unavailable"
