"""Tests for resolving classes, exams and notes against a date.

Reference dates used below: 08/12/2025 and 05/01/2026 are Mondays,
09/12/2025 is a Tuesday and 25/12/2025 is a Thursday.
"""
from datetime import date

from planner_server.models import Exam, Note, ScheduledClass, ViewContext
from planner_server.resolver import (active_classes, exams_for_date, notes_for_date, resolve_day, resolve_week,
                                     sorted_exams)
from planner_server.store import EntityStore, empty_schedule


def make_class(id: str, start_time: str = "09:00", weekday: str = "Monday", **kwargs) -> ScheduledClass:
    """Build a class record directly, bypassing store validation."""
    fields = dict(name=f"Class {id}", teacher="T", room="R", start_time=start_time, end_time="23:00",
                  weekday=weekday)
    fields.update(kwargs)
    return ScheduledClass(id=id, **fields)


def schedule_of(*classes: ScheduledClass) -> dict:
    schedule = empty_schedule()
    for cls in classes:
        schedule[cls.weekday].append(cls)
    return schedule


def test_class_active_range_is_inclusive_and_weekday_bound() -> None:
    """A December-only Monday class shows on Mondays in December only."""
    cls = make_class("c1", start_date="01/12/2025", end_date="31/12/2025")
    schedule = schedule_of(cls)

    assert active_classes(schedule, date(2025, 12, 8)) == [cls]
    assert active_classes(schedule, date(2026, 1, 5)) == []
    assert active_classes(schedule, date(2025, 12, 9)) == []
    # Bounds are inclusive
    assert active_classes(schedule_of(make_class("c2", start_date="08/12/2025")), date(2025, 12, 8))
    assert active_classes(schedule_of(make_class("c3", end_date="08/12/2025")), date(2025, 12, 8))


def test_class_without_range_recurs_every_week() -> None:
    cls = make_class("c1")
    schedule = schedule_of(cls)
    assert active_classes(schedule, date(2020, 1, 6)) == [cls]
    assert active_classes(schedule, date(2030, 1, 7)) == [cls]


def test_unparsable_range_does_not_exclude_class() -> None:
    """Corrupted start/end dates fall back to showing the class."""
    broken_start = make_class("c1", start_date="not a date")
    broken_end = make_class("c2", start_time="10:00", end_date="99/99/2025")
    schedule = schedule_of(broken_start, broken_end)

    assert active_classes(schedule, date(2025, 12, 8)) == [broken_start, broken_end]


def test_active_classes_sorted_by_start_time() -> None:
    late = make_class("late", start_time="13:30")
    early = make_class("early", start_time="07:00")
    middle = make_class("middle", start_time="09:15")

    result = active_classes(schedule_of(late, early, middle), date(2025, 12, 8))

    assert [cls.id for cls in result] == ["early", "middle", "late"]


def test_classes_with_invalid_start_times_keep_their_order() -> None:
    first = make_class("first", start_time="")
    second = make_class("second", start_time="9h")

    result = active_classes(schedule_of(first, second), date(2025, 12, 8))

    assert [cls.id for cls in result] == ["first", "second"]


def test_exams_match_by_exact_formatted_date() -> None:
    """Exams match on string equality; an unpadded stored date never matches."""
    normalized = Exam(id="e1", subject="Math", date="08/12/2025", time="09:00", room="A1")
    unpadded = Exam(id="e2", subject="Physics", date="8/12/2025", time="09:00", room="A2")
    other_day = Exam(id="e3", subject="Chemistry", date="09/12/2025", time="09:00", room="A3")

    result = exams_for_date([normalized, unpadded, other_day], date(2025, 12, 8))

    assert result == [normalized]


def test_weekday_note_appears_every_matching_week() -> None:
    note = Note(id="n1", title="Bring laptop", weekdays=["Monday"])

    assert notes_for_date([note], date(2025, 12, 8)) == [note]
    assert notes_for_date([note], date(2026, 1, 5)) == [note]
    assert notes_for_date([note], date(2025, 12, 9)) == []


def test_date_note_appears_only_on_its_date() -> None:
    note = Note(id="n1", title="Christmas", date="25/12/2025")

    assert notes_for_date([note], date(2025, 12, 25)) == [note]
    assert notes_for_date([note], date(2025, 12, 18)) == []
    assert notes_for_date([note], date(2026, 12, 25)) == []


def test_note_with_weekdays_and_date_matches_either_once() -> None:
    """Weekdays and date combine with OR; a note matching both appears once."""
    note = Note(id="n1", title="Both", weekdays=["Thursday"], date="08/12/2025")

    assert notes_for_date([note], date(2025, 12, 8)) == [note]    # by date (a Monday)
    assert notes_for_date([note], date(2025, 12, 25)) == [note]   # by weekday
    assert notes_for_date([note], date(2025, 12, 11)) == [note]   # Thursday, and not the date
    assert notes_for_date([note], date(2025, 12, 9)) == []


def test_note_without_weekdays_or_date_never_matches() -> None:
    note = Note(id="n1", title="Floating")
    assert notes_for_date([note], date(2025, 12, 8)) == []


def test_sorted_exams_orders_by_date_then_time() -> None:
    a = Exam(id="A", subject="A", date="10/01/2026", time="09:00", room="")
    b = Exam(id="B", subject="B", date="09/01/2026", time="15:00", room="")
    c = Exam(id="C", subject="C", date="09/01/2026", time="08:00", room="")

    assert [e.id for e in sorted_exams([a, b, c])] == ["C", "B", "A"]


def test_sorted_exams_puts_unparsable_dates_first() -> None:
    good = Exam(id="good", subject="", date="01/01/2026", time="09:00", room="")
    bad = Exam(id="bad", subject="", date="??", time="", room="")

    assert [e.id for e in sorted_exams([good, bad])] == ["bad", "good"]


def test_five_digit_years_never_break_resolution() -> None:
    """Records loaded with a year past 9999 are treated as unparsable."""
    cls = make_class("c1", start_date="01/01/10000", end_date="02/01/10000")
    exam = Exam(id="far", subject="", date="01/01/10000", time="09:00", room="")
    good = Exam(id="good", subject="", date="01/01/2026", time="09:00", room="")

    assert active_classes(schedule_of(cls), date(2025, 12, 8)) == [cls]
    assert [e.id for e in sorted_exams([good, exam])] == ["far", "good"]
    assert exams_for_date([exam], date(2025, 12, 8)) == []


def test_resolve_day_uses_view_context() -> None:
    """The reference date is the week anchor plus the selected day index."""
    store = EntityStore()
    store.create_class(name="Math", teacher="T", room="R", start_time="08:00", end_time="09:00",
                       weekday="Tuesday")
    store.create_exam(subject="Physics", date="9/12/2025", time="13:00", room="B2")
    store.create_note(title="Tuesday note", weekdays=["Tuesday"])

    # Anchor on a Thursday; normalized to Monday 08/12/2025
    context = ViewContext(current_week=date(2025, 12, 11), selected_day_index=1)
    view = resolve_day(store, context)

    assert view.reference_date == date(2025, 12, 9)
    assert view.label == "Thứ Ba, 09/12/2025"
    assert [cls.name for cls in view.classes] == ["Math"]
    assert [exam.subject for exam in view.exams] == ["Physics"]
    assert [note.title for note in view.notes] == ["Tuesday note"]


def test_view_context_navigation_keeps_the_anchor_on_monday() -> None:
    context = ViewContext.for_date(date(2025, 12, 11))

    moved = context.shift_weeks(-1)
    assert moved.current_week == date(2025, 12, 1)
    assert moved.reference_date == date(2025, 12, 4)
    assert context.select_day(6).reference_date == date(2025, 12, 14)
    assert context.current_week == date(2025, 12, 8)


def test_resolve_day_does_not_mutate_store() -> None:
    store = EntityStore()
    store.create_class(name="B", teacher="T", room="R", start_time="10:00", end_time="11:00", weekday="Monday")
    store.create_class(name="A", teacher="T", room="R", start_time="08:00", end_time="09:00", weekday="Monday")

    resolve_day(store, ViewContext.for_date(date(2025, 12, 8)))

    assert [cls.name for cls in store.classes_for("Monday")] == ["B", "A"]


def test_resolve_week_lists_all_classes_per_weekday() -> None:
    store = EntityStore()
    store.create_class(name="Ranged", teacher="T", room="R", start_time="08:00", end_time="09:00",
                       weekday="Monday", start_date="01/01/2030", end_date="01/02/2030")
    store.create_note(title="Friday", weekdays=["Friday"])
    store.create_exam(subject="Late", date="10/01/2026", time="09:00", room="")
    store.create_exam(subject="Early", date="09/01/2026", time="08:00", room="")

    snapshot = resolve_week(store, date(2025, 12, 8))

    assert [d.date for d in snapshot.days][0] == date(2025, 12, 8)
    assert [d.weekday for d in snapshot.days][-1] == "Sunday"
    assert [cls.name for cls in snapshot.days[0].classes] == ["Ranged"]
    assert [note.title for note in snapshot.days[4].notes] == ["Friday"]
    assert [exam.subject for exam in snapshot.exams] == ["Early", "Late"]
