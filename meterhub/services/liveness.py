"""Online/offline status derived from a meter's last contact time."""

from datetime import UTC, datetime, timedelta

ONLINE_THRESHOLD = timedelta(minutes=2)


def is_online(
    last_seen: datetime | None,
    now: datetime | None = None,
    threshold: timedelta = ONLINE_THRESHOLD,
) -> bool:
    """Return True if ``last_seen`` lies less than ``threshold`` before ``now``.

    Naive datetimes are taken to be UTC. A meter that was never seen is
    offline.
    """
    if last_seen is None:
        return False
    if now is None:
        now = datetime.now(UTC)
    return _as_utc(now) - _as_utc(last_seen) < threshold


def liveness_status(
    last_seen: datetime | None,
    now: datetime | None = None,
    threshold: timedelta = ONLINE_THRESHOLD,
) -> str:
    """Return ``"online"`` or ``"offline"`` for the given last contact."""
    return "online" if is_online(last_seen, now, threshold) else "offline"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
