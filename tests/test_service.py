"""Tests for the planner REST service."""
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from planner_server.export import ExportGateway
from planner_server.store import EntityStore
from services.planner_service import app as service


@pytest.fixture
def client(tmp_path: Path):
    """Client bound to a fresh in-memory store."""
    service.configure(EntityStore(), ExportGateway(tmp_path))
    with TestClient(service.app) as test_client:
        yield test_client
    service.configure(None, None)


def class_payload(**overrides) -> dict:
    payload = {"name": "Math", "teacher": "Lan", "room": "A1", "start_time": "09:00", "end_time": "10:00",
               "weekday": "Monday"}
    payload.update(overrides)
    return payload


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_class_and_resolve_day(client: TestClient) -> None:
    response = client.post("/classes", json=class_payload(start_date="1/12/2025", end_date="31/12/2025"))
    assert response.status_code == 200
    created = response.json()
    assert created["start_date"] == "01/12/2025"

    day = client.get("/day", params={"day": "2025-12-08"}).json()
    assert day["date"] == "08/12/2025"
    assert day["label"] == "Thứ Hai, 08/12/2025"
    assert [c["id"] for c in day["classes"]] == [created["id"]]

    assert client.get("/day", params={"day": "2026-01-05"}).json()["classes"] == []


def test_validation_error_returns_422_with_field(client: TestClient) -> None:
    response = client.post("/classes", json=class_payload(end_time="09:00"))

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "end_time"
    assert client.get("/classes").json() == []


def test_update_and_delete_exam(client: TestClient) -> None:
    exam = client.post("/exams", json={"subject": "Physics", "date": "9/1/2026", "time": "08:00",
                                       "room": "B2"}).json()
    assert exam["date"] == "09/01/2026"

    response = client.patch(f"/exams/{exam['id']}", json={"time": "10:30"})
    assert response.status_code == 200
    assert response.json()["time"] == "10:30"

    assert client.patch("/exams/missing", json={"time": "10:30"}).status_code == 404

    assert client.delete("/exams/missing").status_code == 200
    assert len(client.get("/exams").json()) == 1
    client.delete(f"/exams/{exam['id']}")
    assert client.get("/exams").json() == []


def test_notes_in_week_view(client: TestClient) -> None:
    client.post("/notes", json={"title": "Gym", "weekdays": ["Wednesday"]})
    client.post("/notes", json={"title": "Christmas", "date": "25/12/2025"})

    week = client.get("/week", params={"day": "2025-12-24"}).json()

    assert week["monday"] == "22/12/2025"
    by_day = {d["weekday"]: [n["title"] for n in d["notes"]] for d in week["days"]}
    assert by_day["Wednesday"] == ["Gym"]
    assert by_day["Thursday"] == ["Christmas"]
    assert by_day["Friday"] == []


def test_week_picker(client: TestClient) -> None:
    options = client.get("/weeks", params={"day": "2025-12-10"}).json()
    assert len(options) == 10
    assert options[2] == {"offset": 0, "monday": "08/12/2025", "label": "08/12/2025 - 14/12/2025"}


def test_invalid_query_date(client: TestClient) -> None:
    assert client.get("/day", params={"day": "08/12/2025"}).status_code == 422


def test_export_exams(client: TestClient) -> None:
    client.post("/exams", json={"subject": "Physics", "date": "9/1/2026", "time": "08:00", "room": "B2"})

    response = client.post("/export/exams")

    assert response.status_code == 200
    assert Path(response.json()["path"]).is_file()
