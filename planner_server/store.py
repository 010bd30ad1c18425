# -*- coding: utf-8 -*-
"""
In-memory entity store for classes, exams and notes.

All mutations are validated before anything changes: a failed create or
update raises ``ValidationError`` and leaves every collection untouched.
Listeners registered with ``subscribe`` are told which storage slot
("schedule", "exams" or "notes") changed after each successful mutation.
"""
from __future__ import annotations

import logging
import time
import typing as t
from dataclasses import replace

from .calendar_utils import DAYS, Weekday
from .errors import NotFoundError, ValidationError
from .models import (DEFAULT_CLASS_COLOR, ClassPatch, Exam, ExamPatch, Note, NotePatch, ScheduledClass,
                     patch_fields)
from .reminders import DEFAULT_REMINDER, is_valid_reminder
from .validators import compare_time, is_valid_date, is_valid_time, normalize_date, parse_date

logger = logging.getLogger(__name__)

SLOTS = ("schedule", "exams", "notes")

ChangeListener = t.Callable[[str], None]


def empty_schedule() -> dict[Weekday, list[ScheduledClass]]:
    return {day: [] for day in DAYS}


# -----------------------------
# Validation
# -----------------------------

def _require(value: t.Any, field: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "This field is required")


def _optional_date(value: t.Optional[str], field: str) -> t.Optional[str]:
    """Validates and normalizes an optional date; '' and None mean absent."""
    if not value:
        return None
    if not is_valid_date(value):
        raise ValidationError(field, f"Invalid date {value!r}, expected DD/MM/YYYY")
    return normalize_date(value)


def _check_reminder(value: str) -> str:
    value = value or DEFAULT_REMINDER
    if not is_valid_reminder(value):
        raise ValidationError("reminder", f"Unknown reminder policy {value!r}")
    return value


def validate_class(record: ScheduledClass) -> ScheduledClass:
    """Checks a full class record and returns it with normalized dates."""
    for name in ("name", "teacher", "room", "start_time", "end_time"):
        _require(getattr(record, name), name)
    if record.weekday not in DAYS:
        raise ValidationError("weekday", f"Unknown weekday {record.weekday!r}")
    for name in ("start_time", "end_time"):
        if not is_valid_time(getattr(record, name)):
            raise ValidationError(name, "Time must be HH:MM (00:00 - 23:59)")
    if compare_time(record.start_time, record.end_time) >= 0:
        raise ValidationError("end_time", "Start time must be before end time")

    start_date = _optional_date(record.start_date, "start_date")
    end_date = _optional_date(record.end_date, "end_date")
    if start_date and end_date and parse_date(start_date) >= parse_date(end_date):
        raise ValidationError("end_date", "Start date must be before end date")

    return replace(
        record,
        start_date=start_date,
        end_date=end_date,
        color=record.color or DEFAULT_CLASS_COLOR,
        notes=record.notes or "",
        reminder=_check_reminder(record.reminder),
    )


def validate_exam(record: Exam) -> Exam:
    for name in ("subject", "date", "time", "room"):
        _require(getattr(record, name), name)
    if not is_valid_date(record.date):
        raise ValidationError("date", f"Invalid date {record.date!r}, expected DD/MM/YYYY")
    if not is_valid_time(record.time):
        raise ValidationError("time", "Time must be HH:MM (00:00 - 23:59)")
    return replace(record, date=normalize_date(record.date), reminder=_check_reminder(record.reminder))


def validate_note(record: Note) -> Note:
    _require(record.title, "title")
    unknown = [day for day in record.weekdays if day not in DAYS]
    if unknown:
        raise ValidationError("weekdays", f"Unknown weekdays {unknown}")
    # Keep weekday order stable and drop duplicates.
    weekdays = [day for day in DAYS if day in record.weekdays]
    return replace(
        record,
        content=record.content or "",
        weekdays=weekdays,
        date=_optional_date(record.date, "date"),
        reminder=_check_reminder(record.reminder),
    )


# -----------------------------
# Store
# -----------------------------

class EntityStore:
    """Owns the schedule (classes grouped by weekday), exams and notes."""

    def __init__(
            self,
            schedule: t.Optional[dict[Weekday, list[ScheduledClass]]] = None,
            exams: t.Optional[list[Exam]] = None,
            notes: t.Optional[list[Note]] = None,
    ) -> None:
        self._schedule = empty_schedule()
        for day, classes in (schedule or {}).items():
            if day in self._schedule:
                self._schedule[day].extend(classes)
        self._exams: list[Exam] = list(exams or [])
        self._notes: list[Note] = list(notes or [])
        self._listeners: list[ChangeListener] = []
        self._last_id = 0

    # Read access

    @property
    def schedule(self) -> dict[Weekday, list[ScheduledClass]]:
        return {day: list(classes) for day, classes in self._schedule.items()}

    @property
    def exams(self) -> list[Exam]:
        return list(self._exams)

    @property
    def notes(self) -> list[Note]:
        return list(self._notes)

    def classes_for(self, weekday: Weekday) -> list[ScheduledClass]:
        return list(self._schedule.get(weekday, []))

    def all_classes(self) -> list[ScheduledClass]:
        return [cls for day in DAYS for cls in self._schedule[day]]

    def get_class(self, class_id: str) -> t.Optional[ScheduledClass]:
        return next((cls for cls in self.all_classes() if cls.id == class_id), None)

    def get_exam(self, exam_id: str) -> t.Optional[Exam]:
        return next((exam for exam in self._exams if exam.id == exam_id), None)

    def get_note(self, note_id: str) -> t.Optional[Note]:
        return next((note for note in self._notes if note.id == note_id), None)

    def snapshot(self, slot: str) -> t.Any:
        """Shallow copy of one storage slot; records are never mutated in place."""
        if slot == "schedule":
            return self.schedule
        if slot == "exams":
            return self.exams
        if slot == "notes":
            return self.notes
        raise KeyError(f"Unknown slot: {slot}")

    # Change notification

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _notify(self, slot: str) -> None:
        for listener in self._listeners:
            listener(slot)

    def _new_id(self) -> str:
        """Timestamp id, bumped so that ids are strictly increasing."""
        self._last_id = max(time.time_ns() // 1000, self._last_id + 1)
        return str(self._last_id)

    # Classes

    def create_class(
            self,
            name: str,
            teacher: str,
            room: str,
            start_time: str,
            end_time: str,
            weekday: Weekday,
            color: str = DEFAULT_CLASS_COLOR,
            notes: str = "",
            start_date: t.Optional[str] = None,
            end_date: t.Optional[str] = None,
            reminder: str = DEFAULT_REMINDER,
    ) -> ScheduledClass:
        """Validates and appends a new class to its weekday group.

        :raises ValidationError: If a required field is missing or malformed,
            or if the start/end ordering is violated.
        """
        record = validate_class(ScheduledClass(
            id="",
            name=name,
            teacher=teacher,
            room=room,
            start_time=start_time,
            end_time=end_time,
            weekday=weekday,
            color=color,
            notes=notes,
            start_date=start_date,
            end_date=end_date,
            reminder=reminder,
        ))
        record = replace(record, id=self._new_id())
        self._schedule[record.weekday].append(record)
        logger.debug("Created class %s on %s", record.id, record.weekday)
        self._notify("schedule")
        return record

    def update_class(self, class_id: str, patch: ClassPatch) -> ScheduledClass:
        """Merges ``patch`` into a class, re-validates and replaces it.

        Changing the weekday moves the class to the end of its new group.
        """
        existing = self.get_class(class_id)
        if existing is None:
            raise NotFoundError("class", class_id)
        updated = validate_class(replace(existing, **patch_fields(patch)))

        old_group = self._schedule[existing.weekday]
        index = next(i for i, cls in enumerate(old_group) if cls.id == class_id)
        if updated.weekday == existing.weekday:
            old_group[index] = updated
        else:
            del old_group[index]
            self._schedule[updated.weekday].append(updated)
        self._notify("schedule")
        return updated

    def delete_class(self, class_id: str) -> None:
        """Removes a class; unknown ids are ignored."""
        for day in DAYS:
            remaining = [cls for cls in self._schedule[day] if cls.id != class_id]
            if len(remaining) != len(self._schedule[day]):
                self._schedule[day] = remaining
                self._notify("schedule")
                return

    # Exams

    def create_exam(
            self,
            subject: str,
            date: str,
            time: str,
            room: str,
            reminder: str = DEFAULT_REMINDER,
    ) -> Exam:
        record = validate_exam(Exam(id="", subject=subject, date=date, time=time, room=room, reminder=reminder))
        record = replace(record, id=self._new_id())
        self._exams.append(record)
        self._notify("exams")
        return record

    def update_exam(self, exam_id: str, patch: ExamPatch) -> Exam:
        existing = self.get_exam(exam_id)
        if existing is None:
            raise NotFoundError("exam", exam_id)
        updated = validate_exam(replace(existing, **patch_fields(patch)))
        self._exams = [updated if exam.id == exam_id else exam for exam in self._exams]
        self._notify("exams")
        return updated

    def delete_exam(self, exam_id: str) -> None:
        remaining = [exam for exam in self._exams if exam.id != exam_id]
        if len(remaining) != len(self._exams):
            self._exams = remaining
            self._notify("exams")

    # Notes

    def create_note(
            self,
            title: str,
            content: str = "",
            weekdays: t.Optional[t.Iterable[Weekday]] = None,
            date: t.Optional[str] = None,
            reminder: str = DEFAULT_REMINDER,
    ) -> Note:
        record = validate_note(Note(
            id="",
            title=title,
            content=content,
            weekdays=list(weekdays or []),
            date=date,
            reminder=reminder,
        ))
        record = replace(record, id=self._new_id())
        self._notes.append(record)
        self._notify("notes")
        return record

    def update_note(self, note_id: str, patch: NotePatch) -> Note:
        existing = self.get_note(note_id)
        if existing is None:
            raise NotFoundError("note", note_id)
        updated = validate_note(replace(existing, **patch_fields(patch)))
        self._notes = [updated if note.id == note_id else note for note in self._notes]
        self._notify("notes")
        return updated

    def delete_note(self, note_id: str) -> None:
        remaining = [note for note in self._notes if note.id != note_id]
        if len(remaining) != len(self._notes):
            self._notes = remaining
            self._notify("notes")
