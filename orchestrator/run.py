# -*- coding: utf-8 -*-
import sys
import typing as t
from datetime import date, datetime
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from planner_server.calendar_utils import DAYS, format_date, week_options, week_start
from planner_server.config import configure_logging, load_settings
from planner_server.errors import ExportError, PlannerError, ValidationError
from planner_server.export import ExportGateway
from planner_server.models import ViewContext
from planner_server.persistence import JsonFileStorage, PersistenceGateway
from planner_server.reminders import REMINDER_OFFSETS
from planner_server.resolver import DayView, WeekSnapshot, resolve_day, resolve_week
from planner_server.store import EntityStore

console = Console()

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d", "%d/%m/%Y"])
WEEKDAY_TYPE = click.Choice(DAYS, case_sensitive=False)
REMINDER_TYPE = click.Choice(list(REMINDER_OFFSETS))


class PlannerContext:
    """Store and gateways shared by the CLI commands."""

    def __init__(self, data_dir: t.Optional[str]) -> None:
        settings = load_settings()
        data_path = Path(data_dir) if data_dir else settings.data_dir
        export_path = data_path / "exports" if data_dir else settings.export_dir
        self.gateway = PersistenceGateway(JsonFileStorage(data_path))
        self.store: EntityStore = self.gateway.load()
        self.exporter = ExportGateway(export_path)

    def close(self) -> None:
        self.gateway.close()


def _day(value: t.Optional[datetime]) -> date:
    return value.date() if value else date.today()


def _canonical_weekday(value: str) -> str:
    return next(day for day in DAYS if day.lower() == value.lower())


def create_day_table(view: DayView) -> Table:
    """Create a table of the classes of one resolved day."""
    table = Table(title=f"📅 {view.label}", show_header=True, header_style="bold magenta")
    table.add_column("Time", style="yellow")
    table.add_column("Class", style="white")
    table.add_column("Teacher", style="cyan")
    table.add_column("Room", style="green")
    table.add_column("Id", style="dim")

    for cls in view.classes:
        table.add_row(f"{cls.start_time} - {cls.end_time}", cls.name, cls.teacher, cls.room, cls.id)
    return table


def create_week_table(snapshot: WeekSnapshot) -> Table:
    """Create a table with one row per weekday."""
    table = Table(title=f"📅 Week of {format_date(snapshot.monday)}", show_header=True, header_style="bold magenta")
    table.add_column("Day", style="cyan")
    table.add_column("Classes", style="white")
    table.add_column("Notes", style="yellow")

    for day in snapshot.days:
        classes = "\n".join(f"{cls.start_time}-{cls.end_time} {cls.name}" for cls in day.classes) or "—"
        notes = "\n".join(note.title for note in day.notes) or "—"
        table.add_row(f"{day.weekday}\n{format_date(day.date)}", classes, notes)
    return table


def _fail(message: str) -> t.NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(1)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--data-dir", type=click.Path(file_okay=False), default=None, help="Directory holding the planner data.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, data_dir: t.Optional[str], verbose: bool) -> None:
    """Weekly planner for classes, exams and notes."""
    level = "DEBUG" if verbose else load_settings().log_level
    configure_logging(level, RichHandler(console=console, show_path=False))
    planner = PlannerContext(data_dir)
    ctx.obj = planner
    ctx.call_on_close(planner.close)


@main.command()
@click.argument("day", type=DATE_TYPE, required=False)
@click.option("--weeks", type=int, default=0, help="Move this many weeks forward (negative for back).")
@click.option("--weekday", type=WEEKDAY_TYPE, default=None, help="Show this weekday of the week instead.")
@click.pass_obj
def day(planner: PlannerContext, day: t.Optional[datetime], weeks: int, weekday: t.Optional[str]) -> None:
    """Show classes, exams and notes of DAY (default: today)."""
    context = ViewContext.for_date(_day(day))
    if weeks:
        context = context.shift_weeks(weeks)
    if weekday:
        context = context.select_day(DAYS.index(_canonical_weekday(weekday)))
    view = resolve_day(planner.store, context)
    console.print(create_day_table(view))

    if view.exams:
        exams = Text()
        for exam in view.exams:
            exams.append(f"{exam.time} ", style="bold yellow")
            exams.append(f"{exam.subject} ({exam.room})\n")
        console.print(Panel(exams, title="📝 Exams", border_style="red"))
    if view.notes:
        notes = Text()
        for note in view.notes:
            notes.append(note.title, style="bold")
            notes.append(f" {note.content}\n" if note.content else "\n")
        console.print(Panel(notes, title="🗒 Notes", border_style="blue"))


@main.command()
@click.argument("day", type=DATE_TYPE, required=False)
@click.pass_obj
def week(planner: PlannerContext, day: t.Optional[datetime]) -> None:
    """Show the week containing DAY (default: this week)."""
    console.print(create_week_table(resolve_week(planner.store, week_start(_day(day)))))


@main.command()
@click.argument("day", type=DATE_TYPE, required=False)
def weeks(day: t.Optional[datetime]) -> None:
    """List the weeks offered by the week picker."""
    for option in week_options(_day(day)):
        marker = "→" if option.offset == 0 else " "
        console.print(f"{marker} {option.offset:+d}  {option.label}")


@main.command("add-class")
@click.option("--name", required=True)
@click.option("--teacher", required=True)
@click.option("--room", required=True)
@click.option("--start", "start_time", required=True, help="Start time, HH:MM.")
@click.option("--end", "end_time", required=True, help="End time, HH:MM.")
@click.option("--weekday", type=WEEKDAY_TYPE, required=True)
@click.option("--from", "start_date", default=None, help="First date, DD/MM/YYYY.")
@click.option("--until", "end_date", default=None, help="Last date, DD/MM/YYYY.")
@click.option("--color", default="")
@click.option("--notes", default="")
@click.option("--reminder", type=REMINDER_TYPE, default="off")
@click.pass_obj
def add_class(planner: PlannerContext, weekday: str, **fields: t.Any) -> None:
    """Add a weekly class."""
    try:
        created = planner.store.create_class(weekday=_canonical_weekday(weekday), **fields)
    except ValidationError as e:
        _fail(e.message + f" ({e.field})")
    console.print(f"[green]✓[/green] Class created: {created.name} ({created.id})")


@main.command("add-exam")
@click.option("--subject", required=True)
@click.option("--date", "exam_date", required=True, help="Exam date, DD/MM/YYYY.")
@click.option("--time", "exam_time", required=True, help="Exam time, HH:MM.")
@click.option("--room", required=True)
@click.option("--reminder", type=REMINDER_TYPE, default="off")
@click.pass_obj
def add_exam(planner: PlannerContext, subject: str, exam_date: str, exam_time: str, room: str, reminder: str) -> None:
    """Add an exam."""
    try:
        created = planner.store.create_exam(subject=subject, date=exam_date, time=exam_time, room=room,
                                            reminder=reminder)
    except ValidationError as e:
        _fail(e.message + f" ({e.field})")
    console.print(f"[green]✓[/green] Exam created: {created.subject} on {created.date} ({created.id})")


@main.command("add-note")
@click.option("--title", required=True)
@click.option("--content", default="")
@click.option("--weekday", "weekdays", type=WEEKDAY_TYPE, multiple=True, help="Repeat on this weekday.")
@click.option("--date", "note_date", default=None, help="Specific date, DD/MM/YYYY.")
@click.option("--reminder", type=REMINDER_TYPE, default="off")
@click.pass_obj
def add_note(planner: PlannerContext, title: str, content: str, weekdays: tuple[str, ...],
             note_date: t.Optional[str], reminder: str) -> None:
    """Add a note for weekdays and/or a specific date."""
    try:
        created = planner.store.create_note(
            title=title,
            content=content,
            weekdays=[_canonical_weekday(day) for day in weekdays],
            date=note_date,
            reminder=reminder,
        )
    except ValidationError as e:
        _fail(e.message + f" ({e.field})")
    console.print(f"[green]✓[/green] Note created: {created.title} ({created.id})")


@main.command()
@click.argument("kind", type=click.Choice(["class", "exam", "note"]))
@click.argument("entity_id")
@click.pass_obj
def delete(planner: PlannerContext, kind: str, entity_id: str) -> None:
    """Delete a class, exam or note by id."""
    {
        "class": planner.store.delete_class,
        "exam": planner.store.delete_exam,
        "note": planner.store.delete_note,
    }[kind](entity_id)
    console.print(f"[green]✓[/green] Deleted {kind} {entity_id}")


@main.command()
@click.argument("what", type=click.Choice(["schedule", "exams"]))
@click.option("--day", type=DATE_TYPE, default=None, help="Any date in the week to export.")
@click.pass_obj
def export(planner: PlannerContext, what: str, day: t.Optional[datetime]) -> None:
    """Export the week's schedule or all exams to an .xlsx file."""
    try:
        if what == "schedule":
            path = planner.exporter.export_schedule(resolve_week(planner.store, week_start(_day(day))))
        else:
            path = planner.exporter.export_exams(planner.store.exams)
    except ExportError as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Exported to {path}")


if __name__ == "__main__":
    try:
        main()
    except PlannerError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
