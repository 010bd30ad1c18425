"""Tests for reminder policies."""
from datetime import datetime, timedelta

from planner_server.reminders import is_valid_reminder, reminder_offset, reminder_trigger


def test_known_policies() -> None:
    for policy in ("off", "1w", "3d", "1d", "1h", "30m"):
        assert is_valid_reminder(policy)
    assert not is_valid_reminder("2y")
    assert not is_valid_reminder(None)


def test_reminder_offsets() -> None:
    assert reminder_offset("off") is None
    assert reminder_offset("1w") == timedelta(days=7)
    assert reminder_offset("30m") == timedelta(minutes=30)


def test_reminder_trigger() -> None:
    start = datetime(2026, 1, 10, 9, 0)
    assert reminder_trigger(start, "1h") == datetime(2026, 1, 10, 8, 0)
    assert reminder_trigger(start, "3d") == datetime(2026, 1, 7, 9, 0)
    assert reminder_trigger(start, "off") is None
