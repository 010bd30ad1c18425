"""
FastAPI service for the weekly planner.

This service exposes the entity store and the temporal resolver as REST API
endpoints: CRUD for classes, exams and notes, day and week views, the week
picker and spreadsheet exports.
"""
from __future__ import annotations

import logging
import typing as t
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, HTTPException

from planner_server.calendar_utils import format_date, week_options, week_start, weekday_label
from planner_server.config import configure_logging, load_settings
from planner_server.errors import ExportError, NotFoundError, ValidationError
from planner_server.export import ExportGateway
from planner_server.models import ClassPatch, ExamPatch, NotePatch, ViewContext
from planner_server.persistence import JsonFileStorage, PersistenceGateway
from planner_server.resolver import resolve_day, resolve_week, sorted_exams
from planner_server.store import EntityStore
from services.shared.models import (
    CreateClassRequest,
    CreateExamRequest,
    CreateNoteRequest,
    DayResponse,
    Exam,
    ExportResponse,
    Note,
    ScheduledClass,
    UpdateClassRequest,
    UpdateExamRequest,
    UpdateNoteRequest,
    WeekDay,
    WeekOptionResponse,
    WeekResponse,
)

logger = logging.getLogger(__name__)

# Process-wide state; set up in the lifespan unless already provided.
store: t.Optional[EntityStore] = None
gateway: t.Optional[PersistenceGateway] = None
exporter: t.Optional[ExportGateway] = None


def configure(
        new_store: EntityStore,
        new_exporter: ExportGateway,
        new_gateway: t.Optional[PersistenceGateway] = None,
) -> None:
    """Installs the store and exporter the endpoints operate on."""
    global store, gateway, exporter
    store, exporter, gateway = new_store, new_exporter, new_gateway


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load persisted data on startup and flush pending writes on shutdown."""
    if store is None:
        settings = load_settings()
        configure_logging(settings.log_level)
        persistence = PersistenceGateway(JsonFileStorage(settings.data_dir))
        configure(persistence.load(), ExportGateway(settings.export_dir), persistence)
        logger.info("Loaded planner data from %s", settings.data_dir)
    yield
    if gateway is not None:
        gateway.close()


app = FastAPI(
    title="Weekly Planner Service",
    description="REST API for classes, exams and notes resolved per week",
    version="1.0.0",
    lifespan=lifespan,
)


def _store() -> EntityStore:
    if store is None:
        raise HTTPException(status_code=503, detail="Planner store is not initialized")
    return store


def _parse_day(day: t.Optional[str]) -> date:
    if not day:
        return date.today()
    try:
        return date.fromisoformat(day)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid date '{day}', expected YYYY-MM-DD")


def _validation_failed(e: ValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"field": e.field, "message": e.message})


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "planner-service"}


# Classes

@app.get("/classes", response_model=list[ScheduledClass])
async def list_classes() -> list[ScheduledClass]:
    """List all classes, grouped Monday to Sunday in stored order."""
    return [ScheduledClass.model_validate(cls) for cls in _store().all_classes()]


@app.post("/classes", response_model=ScheduledClass)
async def create_class(request: CreateClassRequest) -> ScheduledClass:
    try:
        created = _store().create_class(**request.model_dump())
    except ValidationError as e:
        raise _validation_failed(e)
    return ScheduledClass.model_validate(created)


@app.patch("/classes/{class_id}", response_model=ScheduledClass)
async def update_class(class_id: str, request: UpdateClassRequest) -> ScheduledClass:
    try:
        updated = _store().update_class(class_id, ClassPatch(**request.model_dump(exclude_unset=True)))
    except ValidationError as e:
        raise _validation_failed(e)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ScheduledClass.model_validate(updated)


@app.delete("/classes/{class_id}")
async def delete_class(class_id: str):
    _store().delete_class(class_id)
    return {"deleted": class_id}


# Exams

@app.get("/exams", response_model=list[Exam])
async def list_exams() -> list[Exam]:
    """List all exams sorted by date, then time."""
    return [Exam.model_validate(exam) for exam in sorted_exams(_store().exams)]


@app.post("/exams", response_model=Exam)
async def create_exam(request: CreateExamRequest) -> Exam:
    try:
        created = _store().create_exam(**request.model_dump())
    except ValidationError as e:
        raise _validation_failed(e)
    return Exam.model_validate(created)


@app.patch("/exams/{exam_id}", response_model=Exam)
async def update_exam(exam_id: str, request: UpdateExamRequest) -> Exam:
    try:
        updated = _store().update_exam(exam_id, ExamPatch(**request.model_dump(exclude_unset=True)))
    except ValidationError as e:
        raise _validation_failed(e)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Exam.model_validate(updated)


@app.delete("/exams/{exam_id}")
async def delete_exam(exam_id: str):
    _store().delete_exam(exam_id)
    return {"deleted": exam_id}


# Notes

@app.get("/notes", response_model=list[Note])
async def list_notes() -> list[Note]:
    return [Note.model_validate(note) for note in _store().notes]


@app.post("/notes", response_model=Note)
async def create_note(request: CreateNoteRequest) -> Note:
    try:
        created = _store().create_note(**request.model_dump())
    except ValidationError as e:
        raise _validation_failed(e)
    return Note.model_validate(created)


@app.patch("/notes/{note_id}", response_model=Note)
async def update_note(note_id: str, request: UpdateNoteRequest) -> Note:
    try:
        updated = _store().update_note(note_id, NotePatch(**request.model_dump(exclude_unset=True)))
    except ValidationError as e:
        raise _validation_failed(e)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Note.model_validate(updated)


@app.delete("/notes/{note_id}")
async def delete_note(note_id: str):
    _store().delete_note(note_id)
    return {"deleted": note_id}


# Views

@app.get("/day", response_model=DayResponse)
async def show_day(day: t.Optional[str] = None) -> DayResponse:
    """
    Resolve one date.

    Returns the classes active that day ordered by start time, the exams on
    that exact date and the notes matching the date or its weekday.
    """
    view = resolve_day(_store(), ViewContext.for_date(_parse_day(day)))
    return DayResponse(
        date=format_date(view.reference_date),
        label=view.label,
        classes=[ScheduledClass.model_validate(cls) for cls in view.classes],
        exams=[Exam.model_validate(exam) for exam in view.exams],
        notes=[Note.model_validate(note) for note in view.notes],
    )


@app.get("/week", response_model=WeekResponse)
async def show_week(day: t.Optional[str] = None) -> WeekResponse:
    """Snapshot of the week containing ``day`` (defaults to today)."""
    snapshot = resolve_week(_store(), week_start(_parse_day(day)))
    return WeekResponse(
        monday=format_date(snapshot.monday),
        days=[
            WeekDay(
                weekday=d.weekday,
                label=weekday_label(d.weekday),
                date=format_date(d.date),
                classes=[ScheduledClass.model_validate(cls) for cls in d.classes],
                notes=[Note.model_validate(note) for note in d.notes],
            )
            for d in snapshot.days
        ],
        exams=[Exam.model_validate(exam) for exam in snapshot.exams],
    )


@app.get("/weeks", response_model=list[WeekOptionResponse])
async def list_weeks(day: t.Optional[str] = None) -> list[WeekOptionResponse]:
    """Week picker: two weeks back to seven weeks ahead of ``day``'s week."""
    return [
        WeekOptionResponse(offset=option.offset, monday=format_date(option.monday), label=option.label)
        for option in week_options(_parse_day(day))
    ]


# Exports

@app.post("/export/schedule", response_model=ExportResponse)
async def export_schedule(day: t.Optional[str] = None) -> ExportResponse:
    if exporter is None:
        raise HTTPException(status_code=503, detail="Exporter is not initialized")
    try:
        path = exporter.export_schedule(resolve_week(_store(), week_start(_parse_day(day))))
    except ExportError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return ExportResponse(path=str(path))


@app.post("/export/exams", response_model=ExportResponse)
async def export_exams() -> ExportResponse:
    if exporter is None:
        raise HTTPException(status_code=503, detail="Exporter is not initialized")
    try:
        path = exporter.export_exams(_store().exams)
    except ExportError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return ExportResponse(path=str(path))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=load_settings().service_port)
