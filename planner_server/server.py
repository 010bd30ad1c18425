# -*- coding: utf-8 -*-
import typing as t
from datetime import date

from fastmcp import FastMCP

from planner_server.calendar_utils import Weekday, format_date, week_start, weekday_label
from planner_server.config import load_settings
from planner_server.export import ExportGateway
from planner_server.models import ClassPatch, Exam, ExamPatch, Note, NotePatch, ScheduledClass, ViewContext
from planner_server.persistence import JsonFileStorage, PersistenceGateway
from planner_server.resolver import DayView, WeekSnapshot, resolve_day, resolve_week, sorted_exams
from planner_server.store import EntityStore

mcp = FastMCP("WeeklyPlannerServer")

_store: t.Optional[EntityStore] = None


def get_store() -> EntityStore:
    """Returns the process-wide store, loading it from disk on first use."""
    global _store
    if _store is None:
        settings = load_settings()
        _store = PersistenceGateway(JsonFileStorage(settings.data_dir)).load()
    return _store


def set_store(store: EntityStore) -> None:
    """Replaces the process-wide store (used by tests and embedding hosts)."""
    global _store
    _store = store


def _parse_iso(day: t.Optional[str]) -> date:
    return date.fromisoformat(day) if day else date.today()


@mcp.tool()
def create_class(
        name: str,
        teacher: str,
        room: str,
        start_time: str,
        end_time: str,
        weekday: Weekday,
        color: str = "",
        notes: str = "",
        start_date: str = "",
        end_date: str = "",
        reminder: str = "off",
) -> ScheduledClass:
    """Creates a weekly class.

    :param name: Subject name.
    :param teacher: Teacher name.
    :param room: Room.
    :param start_time: Start time as HH:MM.
    :param end_time: End time as HH:MM, after the start time.
    :param weekday: Weekday the class recurs on, e.g. "Monday".
    :param color: Display color (optional).
    :param notes: Free text notes (optional).
    :param start_date: First date the class runs, DD/MM/YYYY (optional).
    :param end_date: Last date the class runs, DD/MM/YYYY (optional).
    :param reminder: Reminder policy: off, 1w, 3d, 1d, 1h or 30m.
    :return: The created class.
    """
    return get_store().create_class(
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
    )


@mcp.tool()
def update_class(class_id: str, patch: ClassPatch) -> ScheduledClass:
    """Updates the fields of a class set in ``patch``.

    :param class_id: Id of the class.
    :param patch: Fields to change; an empty string clears an optional date.
    :return: The updated class.
    """
    return get_store().update_class(class_id, patch)


@mcp.tool()
def delete_class(class_id: str) -> bool:
    """Deletes a class. Deleting an unknown id does nothing.

    :param class_id: Id of the class.
    :return: True.
    """
    get_store().delete_class(class_id)
    return True


@mcp.tool()
def create_exam(subject: str, date: str, time: str, room: str, reminder: str = "off") -> Exam:
    """Creates an exam.

    :param subject: Subject of the exam.
    :param date: Exam date as DD/MM/YYYY.
    :param time: Exam time as HH:MM.
    :param room: Room.
    :param reminder: Reminder policy (optional).
    :return: The created exam.
    """
    return get_store().create_exam(subject=subject, date=date, time=time, room=room, reminder=reminder)


@mcp.tool()
def update_exam(exam_id: str, patch: ExamPatch) -> Exam:
    """Updates the fields of an exam set in ``patch``."""
    return get_store().update_exam(exam_id, patch)


@mcp.tool()
def delete_exam(exam_id: str) -> bool:
    """Deletes an exam. Deleting an unknown id does nothing."""
    get_store().delete_exam(exam_id)
    return True


@mcp.tool()
def create_note(
        title: str,
        content: str = "",
        weekdays: t.Optional[list[Weekday]] = None,
        date: str = "",
        reminder: str = "off",
) -> Note:
    """Creates a note shown on the given weekdays and/or on a specific date.

    :param title: Title of the note.
    :param content: Body text (optional).
    :param weekdays: Weekdays the note recurs on (optional).
    :param date: A specific date, DD/MM/YYYY (optional).
    :param reminder: Reminder policy (optional).
    :return: The created note.
    """
    return get_store().create_note(title=title, content=content, weekdays=weekdays, date=date, reminder=reminder)


@mcp.tool()
def update_note(note_id: str, patch: NotePatch) -> Note:
    """Updates the fields of a note set in ``patch``."""
    return get_store().update_note(note_id, patch)


@mcp.tool()
def delete_note(note_id: str) -> bool:
    """Deletes a note. Deleting an unknown id does nothing."""
    get_store().delete_note(note_id)
    return True


@mcp.tool()
def list_exams() -> list[Exam]:
    """Lists all exams sorted by date, then time."""
    return sorted_exams(get_store().exams)


@mcp.tool()
def list_notes() -> list[Note]:
    """Lists all notes in insertion order."""
    return get_store().notes


def format_day(view: DayView) -> str:
    """Formats a resolved day as a clean text table."""
    lines = []
    lines.append(f"📅 {view.label}")
    lines.append("=" * 80)
    lines.append(f"{'Time':<14} {'Class':<30} {'Teacher':<20} {'Room':<12}")
    lines.append("-" * 80)
    if not view.classes:
        lines.append("No classes.")
    for cls in view.classes:
        lines.append(f"{cls.start_time + ' - ' + cls.end_time:<14} {cls.name[:29]:<30} "
                     f"{cls.teacher[:19]:<20} {cls.room[:11]:<12}")
    if view.exams:
        lines.append("")
        lines.append("📝 Exams")
        for exam in view.exams:
            lines.append(f"  {exam.time:<6} {exam.subject} ({exam.room})")
    if view.notes:
        lines.append("")
        lines.append("🗒 Notes")
        for note in view.notes:
            lines.append(f"  {note.title}" + (f": {note.content}" if note.content else ""))
    lines.append("=" * 80)
    return "\n".join(lines)


def format_week(snapshot: WeekSnapshot) -> str:
    """Formats a week snapshot, one block per weekday."""
    lines = [f"📅 Week of {format_date(snapshot.monday)}", "=" * 80]
    for day in snapshot.days:
        lines.append(f"{weekday_label(day.weekday)} {format_date(day.date)}")
        if not day.classes and not day.notes:
            lines.append("  —")
        for cls in day.classes:
            lines.append(f"  {cls.start_time}-{cls.end_time}  {cls.name} ({cls.room})")
        for note in day.notes:
            lines.append(f"  🗒 {note.title}")
    lines.append("=" * 80)
    lines.append(f"Total exams: {len(snapshot.exams)}")
    return "\n".join(lines)


@mcp.tool()
def show_day(day: str = "") -> str:
    """Displays the classes, exams and notes of one day.

    :param day: ISO date (YYYY-MM-DD); defaults to today.
    :return: Formatted text table.
    """
    return format_day(resolve_day(get_store(), ViewContext.for_date(_parse_iso(day))))


@mcp.tool()
def show_week(day: str = "") -> str:
    """Displays the week containing ``day``.

    :param day: Any ISO date (YYYY-MM-DD) in the week; defaults to today.
    :return: Formatted text overview.
    """
    return format_week(resolve_week(get_store(), week_start(_parse_iso(day))))


@mcp.tool()
def export_week(day: str = "") -> str:
    """Exports the week containing ``day`` to an .xlsx file.

    :param day: Any ISO date (YYYY-MM-DD) in the week; defaults to today.
    :return: Path of the written file.
    """
    exporter = ExportGateway(load_settings().export_dir)
    return str(exporter.export_schedule(resolve_week(get_store(), week_start(_parse_iso(day)))))


if __name__ == "__main__":
    mcp.run()
