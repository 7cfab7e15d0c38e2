"""Pick locking relative to an episode's scheduled air time."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from src.rules_engine.config import PICK_LOCK_GRACE


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def lock_time(air_time: datetime, grace: timedelta = PICK_LOCK_GRACE) -> datetime:
    """Instant after which no picks may be submitted or changed."""
    return air_time + grace


def is_locked(
    air_time: datetime,
    now: Optional[datetime] = None,
    grace: timedelta = PICK_LOCK_GRACE,
) -> bool:
    """Whether picks are locked at ``now`` (defaults to the current UTC time).

    The lock falls ``grace`` after the nominal air time, not at the air time
    itself, and is inclusive: exactly at the lock instant picks are locked.
    """
    if now is None:
        now = _utc_now()
    return now >= lock_time(air_time, grace)


def time_until_lock(
    air_time: datetime,
    now: Optional[datetime] = None,
    grace: timedelta = PICK_LOCK_GRACE,
) -> timedelta:
    """Time remaining before picks lock, never negative."""
    if now is None:
        now = _utc_now()
    return max(timedelta(0), lock_time(air_time, grace) - now)
