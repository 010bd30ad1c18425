"""
Data models for the weekly planner.

This module contains the dataclasses used to represent classes, exams and
notes, the recurrence descriptors the resolver dispatches on, the patch
structures used for edits and the explicit view context.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
import typing as t

from .calendar_utils import Weekday, week_start
from .reminders import DEFAULT_REMINDER

DEFAULT_CLASS_COLOR = "#FF6B6B"


# -----------------------------
# Recurrence descriptors
# -----------------------------

@dataclass(frozen=True)
class ActiveRange:
    """Inclusive date window of a class. Bounds are stored date strings."""
    start: t.Optional[str] = None
    end: t.Optional[str] = None


@dataclass(frozen=True)
class WeeklyRecurrence:
    """Every ``weekday``, optionally limited to ``active_range``."""
    weekday: Weekday
    active_range: t.Optional[ActiveRange] = None
    kind: t.Literal["weekly"] = "weekly"


@dataclass(frozen=True)
class ExactDate:
    """A single calendar date (DD/MM/YYYY)."""
    date: str
    kind: t.Literal["exact"] = "exact"


@dataclass(frozen=True)
class NoteRecurrence:
    """Weekday recurrence, an exact date, or both (either one matches)."""
    kind: t.Literal["weekly", "exact", "both"]
    weekdays: tuple[Weekday, ...] = ()
    date: t.Optional[str] = None


Recurrence = t.Union[WeeklyRecurrence, ExactDate, NoteRecurrence]


# -----------------------------
# Entities
# -----------------------------

@dataclass
class ScheduledClass:
    """A class recurring on one weekday."""
    id: str
    name: str
    teacher: str
    room: str
    start_time: str
    end_time: str
    weekday: Weekday
    color: str = DEFAULT_CLASS_COLOR
    notes: str = ""
    start_date: t.Optional[str] = None
    end_date: t.Optional[str] = None
    reminder: str = DEFAULT_REMINDER

    @property
    def recurrence(self) -> WeeklyRecurrence:
        active_range = None
        if self.start_date or self.end_date:
            active_range = ActiveRange(start=self.start_date, end=self.end_date)
        return WeeklyRecurrence(weekday=self.weekday, active_range=active_range)


@dataclass
class Exam:
    """A one-off exam."""
    id: str
    subject: str
    date: str
    time: str
    room: str
    reminder: str = DEFAULT_REMINDER

    @property
    def recurrence(self) -> ExactDate:
        return ExactDate(date=self.date)


@dataclass
class Note:
    """A note shown on given weekdays and/or on one specific date."""
    id: str
    title: str
    content: str = ""
    weekdays: list[Weekday] = field(default_factory=list)
    date: t.Optional[str] = None
    reminder: str = DEFAULT_REMINDER

    @property
    def recurrence(self) -> NoteRecurrence:
        if self.weekdays and self.date:
            kind = "both"
        elif self.date:
            kind = "exact"
        else:
            kind = "weekly"
        return NoteRecurrence(kind=kind, weekdays=tuple(self.weekdays), date=self.date)


# -----------------------------
# Patches
# -----------------------------
# A field left as None is kept from the existing record. For optional
# fields an empty string clears the value.

@dataclass
class ClassPatch:
    name: t.Optional[str] = None
    teacher: t.Optional[str] = None
    room: t.Optional[str] = None
    start_time: t.Optional[str] = None
    end_time: t.Optional[str] = None
    weekday: t.Optional[Weekday] = None
    color: t.Optional[str] = None
    notes: t.Optional[str] = None
    start_date: t.Optional[str] = None
    end_date: t.Optional[str] = None
    reminder: t.Optional[str] = None


@dataclass
class ExamPatch:
    subject: t.Optional[str] = None
    date: t.Optional[str] = None
    time: t.Optional[str] = None
    room: t.Optional[str] = None
    reminder: t.Optional[str] = None


@dataclass
class NotePatch:
    title: t.Optional[str] = None
    content: t.Optional[str] = None
    weekdays: t.Optional[list[Weekday]] = None
    date: t.Optional[str] = None
    reminder: t.Optional[str] = None


def patch_fields(patch: t.Any) -> dict[str, t.Any]:
    """Returns the fields a patch actually sets."""
    return {name: value for name, value in vars(patch).items() if value is not None}


# -----------------------------
# View state
# -----------------------------

@dataclass
class ViewContext:
    """The week being displayed and the selected day within it."""
    current_week: date
    selected_day_index: int = 0

    def __post_init__(self) -> None:
        self.current_week = week_start(self.current_week)
        if not 0 <= self.selected_day_index <= 6:
            raise ValueError(f"Day index must be 0-6, got {self.selected_day_index}")

    @classmethod
    def for_date(cls, day: date) -> ViewContext:
        return cls(current_week=day, selected_day_index=day.weekday())

    @property
    def reference_date(self) -> date:
        return self.current_week + timedelta(days=self.selected_day_index)

    def select_day(self, index: int) -> ViewContext:
        return ViewContext(current_week=self.current_week, selected_day_index=index)

    def shift_weeks(self, weeks: int) -> ViewContext:
        return ViewContext(
            current_week=self.current_week + timedelta(weeks=weeks),
            selected_day_index=self.selected_day_index,
        )
