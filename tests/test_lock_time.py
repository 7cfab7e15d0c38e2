"""Tests for pick locking around episode air time."""

from datetime import datetime, timedelta, timezone

from src.rules_engine.config import PICK_LOCK_GRACE
from src.rules_engine.lock_time import is_locked, lock_time, time_until_lock

AIR = datetime(2026, 3, 4, 1, 0, tzinfo=timezone.utc)


class TestLockTime:
    def test_grace_is_ten_minutes(self):
        assert PICK_LOCK_GRACE == timedelta(minutes=10)

    def test_lock_time_after_air_time(self):
        assert lock_time(AIR) == AIR + timedelta(minutes=10)

    def test_custom_grace(self):
        assert lock_time(AIR, grace=timedelta(0)) == AIR


class TestIsLocked:
    def test_open_before_air_time(self):
        assert is_locked(AIR, now=AIR - timedelta(hours=1)) is False

    def test_open_at_air_time(self):
        assert is_locked(AIR, now=AIR) is False

    def test_open_nine_minutes_after_air(self):
        assert is_locked(AIR, now=AIR + timedelta(minutes=9)) is False

    def test_locked_exactly_at_grace_boundary(self):
        assert is_locked(AIR, now=AIR + timedelta(minutes=10)) is True

    def test_locked_thereafter(self):
        assert is_locked(AIR, now=AIR + timedelta(days=2)) is True

    def test_defaults_to_current_time(self):
        past = datetime.now(timezone.utc) - timedelta(days=1)
        future = datetime.now(timezone.utc) + timedelta(days=1)
        assert is_locked(past) is True
        assert is_locked(future) is False


class TestTimeUntilLock:
    def test_remaining_before_lock(self):
        assert time_until_lock(AIR, now=AIR) == timedelta(minutes=10)

    def test_never_negative(self):
        assert time_until_lock(AIR, now=AIR + timedelta(hours=3)) == timedelta(0)
