# -*- coding: utf-8 -*-
"""
Reminder policies attached to classes, exams and notes.

A policy is an opaque lead-time code. The planner only stores and validates
it and can compute when a reminder would fire; delivering notifications is
left to the host platform.
"""
from __future__ import annotations

import typing as t
from datetime import datetime, timedelta

DEFAULT_REMINDER = "off"

REMINDER_OFFSETS: dict[str, t.Optional[timedelta]] = {
    "off": None,
    "1w": timedelta(weeks=1),
    "3d": timedelta(days=3),
    "1d": timedelta(days=1),
    "1h": timedelta(hours=1),
    "30m": timedelta(minutes=30),
}


def is_valid_reminder(policy: t.Any) -> bool:
    return isinstance(policy, str) and policy in REMINDER_OFFSETS


def reminder_offset(policy: str) -> t.Optional[timedelta]:
    """Lead time for ``policy``, or None when reminders are off or unknown."""
    return REMINDER_OFFSETS.get(policy)


def reminder_trigger(event_start: datetime, policy: str) -> t.Optional[datetime]:
    """Moment a reminder for an event starting at ``event_start`` would fire."""
    offset = reminder_offset(policy)
    if offset is None:
        return None
    return event_start - offset
