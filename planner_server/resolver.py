# -*- coding: utf-8 -*-
"""
Temporal resolution: which classes, exams and notes apply to a given date.

Everything here is a pure read over the store's collections and is
recomputed on every call.

Two fallback policies differ on purpose:
- a class whose start/end date cannot be parsed is still shown on its
  weekday (the bound does not exclude it);
- exams and notes match dates by exact string equality with the formatted
  reference date, so a malformed stored date never matches.
"""
from __future__ import annotations

import functools
import typing as t
from dataclasses import dataclass, field
from datetime import date

from .calendar_utils import DAYS, Weekday, format_date, week_dates, weekday_label, weekday_name
from .models import ExactDate, Exam, Note, NoteRecurrence, Recurrence, ScheduledClass, ViewContext, WeeklyRecurrence
from .validators import compare_time, is_valid_time, parse_date

if t.TYPE_CHECKING:
    from .store import EntityStore

_EPOCH = date(1970, 1, 1)


@dataclass
class DayView:
    """Everything shown for the selected day."""
    reference_date: date
    label: str
    classes: list[ScheduledClass] = field(default_factory=list)
    exams: list[Exam] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)


@dataclass
class DaySnapshot:
    """One weekday of an exported week."""
    weekday: Weekday
    date: date
    classes: list[ScheduledClass] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)


@dataclass
class WeekSnapshot:
    """Read-only snapshot of a displayed week, as consumed by exports."""
    monday: date
    days: list[DaySnapshot] = field(default_factory=list)
    exams: list[Exam] = field(default_factory=list)


# -----------------------------
# Recurrence matching
# -----------------------------

def _within_range(recurrence: WeeklyRecurrence, day: date) -> bool:
    active_range = recurrence.active_range
    if active_range is None:
        return True
    if active_range.start:
        start = parse_date(active_range.start)
        if start is not None and day < start:
            return False
    if active_range.end:
        end = parse_date(active_range.end)
        if end is not None and day > end:
            return False
    return True


def occurs_on(recurrence: Recurrence, day: date) -> bool:
    """Dispatches on the recurrence kind to decide whether it covers ``day``."""
    if isinstance(recurrence, WeeklyRecurrence):
        return recurrence.weekday == weekday_name(day) and _within_range(recurrence, day)
    if isinstance(recurrence, ExactDate):
        return recurrence.date == format_date(day)
    if isinstance(recurrence, NoteRecurrence):
        by_weekday = recurrence.kind in ("weekly", "both") and weekday_name(day) in recurrence.weekdays
        by_date = recurrence.kind in ("exact", "both") and recurrence.date == format_date(day)
        return by_weekday or by_date
    raise TypeError(f"Unsupported recurrence: {recurrence!r}")


# -----------------------------
# Ordering
# -----------------------------

def _compare_start_times(a: ScheduledClass, b: ScheduledClass) -> int:
    if is_valid_time(a.start_time) and is_valid_time(b.start_time):
        return compare_time(a.start_time, b.start_time)
    return 0


def sort_by_start_time(classes: t.Iterable[ScheduledClass]) -> list[ScheduledClass]:
    """Stable sort by start time; a class with an invalid time compares equal."""
    return sorted(classes, key=functools.cmp_to_key(_compare_start_times))


def _exam_sort_key(exam: Exam) -> tuple[date, str]:
    day = parse_date(exam.date) or _EPOCH
    return day, exam.time if is_valid_time(exam.time) else "00:00"


def sorted_exams(exams: t.Iterable[Exam]) -> list[Exam]:
    """Exams ordered by date, then time.

    An unparsable date sorts as the epoch and a missing or invalid time as
    00:00, so malformed records end up first instead of failing the sort.
    """
    return sorted(exams, key=_exam_sort_key)


# -----------------------------
# Queries
# -----------------------------

def active_classes(schedule: t.Mapping[Weekday, t.Sequence[ScheduledClass]], reference_date: date) -> list[ScheduledClass]:
    """Classes running on ``reference_date``, ordered by start time."""
    candidates = schedule.get(weekday_name(reference_date), [])
    return sort_by_start_time(cls for cls in candidates if occurs_on(cls.recurrence, reference_date))


def exams_for_date(exams: t.Iterable[Exam], reference_date: date) -> list[Exam]:
    return [exam for exam in exams if occurs_on(exam.recurrence, reference_date)]


def notes_for_date(notes: t.Iterable[Note], reference_date: date) -> list[Note]:
    return [note for note in notes if occurs_on(note.recurrence, reference_date)]


def resolve_day(store: EntityStore, context: ViewContext) -> DayView:
    """Resolves the selected day of ``context`` against the store."""
    day = context.reference_date
    return DayView(
        reference_date=day,
        label=f"{weekday_label(weekday_name(day))}, {format_date(day)}",
        classes=active_classes(store.schedule, day),
        exams=exams_for_date(store.exams, day),
        notes=notes_for_date(store.notes, day),
    )


def resolve_week(store: EntityStore, monday: date) -> WeekSnapshot:
    """Builds the export snapshot of the week starting at ``monday``.

    Each weekday lists every class of its weekday group in stored order,
    regardless of active range, along with the notes matching that date.
    """
    schedule = store.schedule
    notes = store.notes
    days = [
        DaySnapshot(
            weekday=weekday,
            date=day,
            classes=list(schedule.get(weekday, [])),
            notes=notes_for_date(notes, day),
        )
        for weekday, day in zip(DAYS, week_dates(monday))
    ]
    return WeekSnapshot(monday=monday, days=days, exams=sorted_exams(store.exams))
