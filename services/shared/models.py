"""
Shared Pydantic models for REST API serialization.

This module contains the Pydantic request and response models of the planner
service. Entities are returned with the same field names as the core
dataclasses, so responses can be built straight from them.
"""
from __future__ import annotations

import typing as t
from pydantic import BaseModel, ConfigDict, Field


Weekday = t.Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
ReminderPolicy = t.Literal["off", "1w", "3d", "1d", "1h", "30m"]


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Entity Models
class ScheduledClass(_FromAttributes):
    """A class recurring on one weekday."""
    id: str
    name: str
    teacher: str
    room: str
    start_time: str
    end_time: str
    weekday: Weekday
    color: str
    notes: str = ""
    start_date: t.Optional[str] = None  # "DD/MM/YYYY"
    end_date: t.Optional[str] = None    # "DD/MM/YYYY"
    reminder: str = "off"


class Exam(_FromAttributes):
    """A one-off exam."""
    id: str
    subject: str
    date: str  # "DD/MM/YYYY"
    time: str  # "HH:MM"
    room: str
    reminder: str = "off"


class Note(_FromAttributes):
    """A note bound to weekdays and/or a specific date."""
    id: str
    title: str
    content: str = ""
    weekdays: list[Weekday] = Field(default_factory=list)
    date: t.Optional[str] = None
    reminder: str = "off"


# Request Models
class CreateClassRequest(BaseModel):
    """Request model for creating a class. Missing fields fail validation in the store."""
    name: str = ""
    teacher: str = ""
    room: str = ""
    start_time: str = ""
    end_time: str = ""
    weekday: Weekday
    color: str = ""
    notes: str = ""
    start_date: t.Optional[str] = None
    end_date: t.Optional[str] = None
    reminder: ReminderPolicy = "off"


class UpdateClassRequest(BaseModel):
    """Patch for a class; only the fields sent are changed."""
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
    reminder: t.Optional[ReminderPolicy] = None


class CreateExamRequest(BaseModel):
    """Request model for creating an exam."""
    subject: str = ""
    date: str = ""
    time: str = ""
    room: str = ""
    reminder: ReminderPolicy = "off"


class UpdateExamRequest(BaseModel):
    subject: t.Optional[str] = None
    date: t.Optional[str] = None
    time: t.Optional[str] = None
    room: t.Optional[str] = None
    reminder: t.Optional[ReminderPolicy] = None


class CreateNoteRequest(BaseModel):
    """Request model for creating a note."""
    title: str = ""
    content: str = ""
    weekdays: list[Weekday] = Field(default_factory=list)
    date: t.Optional[str] = None
    reminder: ReminderPolicy = "off"


class UpdateNoteRequest(BaseModel):
    title: t.Optional[str] = None
    content: t.Optional[str] = None
    weekdays: t.Optional[list[Weekday]] = None
    date: t.Optional[str] = None
    reminder: t.Optional[ReminderPolicy] = None


# Response Models
class DayResponse(BaseModel):
    """Everything active on one date."""
    date: str  # "DD/MM/YYYY"
    label: str
    classes: list[ScheduledClass]
    exams: list[Exam]
    notes: list[Note]


class WeekDay(BaseModel):
    weekday: Weekday
    label: str
    date: str
    classes: list[ScheduledClass]
    notes: list[Note]


class WeekResponse(BaseModel):
    """Snapshot of one week as used by exports."""
    monday: str
    days: list[WeekDay]
    exams: list[Exam]


class WeekOptionResponse(BaseModel):
    offset: int
    monday: str
    label: str


class ExportResponse(BaseModel):
    """Response model for export endpoints."""
    path: str
