# -*- coding: utf-8 -*-
"""
Persistence gateway: mirrors the entity store into three JSON slots.

Slots are ``schedule``, ``exams`` and ``notes``. Loading never fails: a slot
that is missing or cannot be parsed comes back as its empty default. Saving
is fire-and-forget; writes run on a single background worker in submission
order (the last write wins) and failures are only logged.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import typing as t
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import asdict
from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic import ValidationError as PydanticValidationError

from .calendar_utils import DAYS, Weekday
from .errors import PersistenceError
from .models import DEFAULT_CLASS_COLOR, Exam, Note, ScheduledClass
from .reminders import DEFAULT_REMINDER
from .store import SLOTS, EntityStore, empty_schedule

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "schedule": "tkb_schedule_v1",
    "exams": "tkb_exams_v1",
    "notes": "tkb_notes_v1",
}


# -----------------------------
# Stored record models
# -----------------------------
# Records accept both the snake_case keys written by this package and the
# camelCase keys of older blobs.

class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ClassRecord(_Record):
    id: str
    name: str = ""
    teacher: str = ""
    room: str = ""
    start_time: str = Field("", validation_alias=AliasChoices("start_time", "startTime"))
    end_time: str = Field("", validation_alias=AliasChoices("end_time", "endTime"))
    weekday: t.Optional[str] = Field(None, validation_alias=AliasChoices("weekday", "day"))
    color: str = DEFAULT_CLASS_COLOR
    notes: t.Optional[str] = ""
    start_date: t.Optional[str] = Field(None, validation_alias=AliasChoices("start_date", "startDate"))
    end_date: t.Optional[str] = Field(None, validation_alias=AliasChoices("end_date", "endDate"))
    reminder: str = DEFAULT_REMINDER

    def to_entity(self, weekday: Weekday) -> ScheduledClass:
        # The weekday group a record is stored under is authoritative.
        return ScheduledClass(**{**self.model_dump(), "weekday": weekday, "notes": self.notes or ""})


class ExamRecord(_Record):
    id: str
    subject: str = ""
    date: str = ""
    time: str = ""
    room: str = ""
    reminder: str = DEFAULT_REMINDER

    def to_entity(self) -> Exam:
        return Exam(**self.model_dump())


class NoteRecord(_Record):
    id: str
    title: str = ""
    content: t.Optional[str] = ""
    weekdays: list[str] = Field(default_factory=list, validation_alias=AliasChoices("weekdays", "days"))
    date: t.Optional[str] = None
    reminder: str = DEFAULT_REMINDER

    @model_validator(mode="before")
    @classmethod
    def _migrate_single_day(cls, data: t.Any) -> t.Any:
        """Rewrites a legacy singular ``day`` into a one-element weekday list."""
        if not isinstance(data, dict):
            return data
        if isinstance(data.get("weekdays"), list) or isinstance(data.get("days"), list):
            return data
        migrated = {key: value for key, value in data.items() if key != "day"}
        migrated["weekdays"] = [data["day"]] if data.get("day") else []
        migrated.pop("days", None)
        return migrated

    def to_entity(self) -> Note:
        return Note(
            id=self.id,
            title=self.title,
            content=self.content or "",
            weekdays=[day for day in self.weekdays if day in DAYS],
            date=self.date or None,
            reminder=self.reminder,
        )


_SCHEDULE_ADAPTER = TypeAdapter(dict[str, list[ClassRecord]])
_EXAMS_ADAPTER = TypeAdapter(list[ExamRecord])
_NOTES_ADAPTER = TypeAdapter(list[NoteRecord])


def decode_schedule(blob: str) -> dict[Weekday, list[ScheduledClass]]:
    groups = _SCHEDULE_ADAPTER.validate_json(blob)
    schedule = empty_schedule()
    for day, records in groups.items():
        if day not in schedule:
            logger.warning("Dropping %d class(es) stored under unknown weekday %r", len(records), day)
            continue
        schedule[day] = [record.to_entity(day) for record in records]
    return schedule


def decode_exams(blob: str) -> list[Exam]:
    return [record.to_entity() for record in _EXAMS_ADAPTER.validate_json(blob)]


def decode_notes(blob: str) -> list[Note]:
    return [record.to_entity() for record in _NOTES_ADAPTER.validate_json(blob)]


def encode_slot(slot: str, snapshot: t.Any) -> str:
    """Serializes a store snapshot of ``slot`` to a JSON string."""
    if slot == "schedule":
        data = {day: [asdict(cls) for cls in classes] for day, classes in snapshot.items()}
    else:
        data = [asdict(item) for item in snapshot]
    return json.dumps(data, ensure_ascii=False)


_DECODERS: dict[str, t.Callable[[str], t.Any]] = {
    "schedule": decode_schedule,
    "exams": decode_exams,
    "notes": decode_notes,
}

_DEFAULTS: dict[str, t.Callable[[], t.Any]] = {
    "schedule": empty_schedule,
    "exams": list,
    "notes": list,
}


# -----------------------------
# Storage backend
# -----------------------------

class JsonFileStorage:
    """Key/value storage with one JSON file per key inside ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> t.Optional[str]:
        path = self._path(key)
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Error reading {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        """Writes ``value`` atomically (temp file then rename)."""
        path = self._path(key)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise PersistenceError(f"Error writing {path}: {e}") from e


# -----------------------------
# Gateway
# -----------------------------

class PersistenceGateway:
    """Loads the store at startup and mirrors every mutation afterwards."""

    def __init__(self, storage: JsonFileStorage) -> None:
        self.storage = storage
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="planner-persist")
        self._pending: list[Future] = []

    def load_slot(self, slot: str) -> t.Any:
        """Reads one slot, substituting the empty default on any failure."""
        try:
            blob = self.storage.get_item(STORAGE_KEYS[slot])
            if blob is None:
                return _DEFAULTS[slot]()
            return _DECODERS[slot](blob)
        except (PersistenceError, PydanticValidationError, ValueError) as e:
            logger.warning("Failed to load %s, starting empty: %s", slot, e)
            return _DEFAULTS[slot]()

    def load(self) -> EntityStore:
        """Builds a store from the persisted slots and attaches to it."""
        store = EntityStore(
            schedule=self.load_slot("schedule"),
            exams=self.load_slot("exams"),
            notes=self.load_slot("notes"),
        )
        self.attach(store)
        return store

    def attach(self, store: EntityStore) -> None:
        store.subscribe(lambda slot: self.save(slot, store.snapshot(slot)))

    def save(self, slot: str, snapshot: t.Any) -> Future:
        """Queues a write of ``snapshot`` into ``slot`` and returns at once."""
        if slot not in SLOTS:
            raise KeyError(f"Unknown slot: {slot}")
        future = self._executor.submit(self._write, slot, snapshot)
        self._pending = [f for f in self._pending if not f.done()] + [future]
        return future

    def _write(self, slot: str, snapshot: t.Any) -> bool:
        try:
            self.storage.set_item(STORAGE_KEYS[slot], encode_slot(slot, snapshot))
            return True
        except Exception as e:
            logger.warning("Failed to persist %s: %s", slot, e)
            return False

    def flush(self) -> None:
        """Blocks until every queued write has finished."""
        for future in list(self._pending):
            future.result()
        self._pending = []

    def close(self) -> None:
        self.flush()
        self._executor.shutdown(wait=True)
