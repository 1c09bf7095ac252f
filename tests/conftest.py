import copy
import json

import pytest
from fastapi.testclient import TestClient

from schedule_engine.api.dependencies.schedule import get_store
from schedule_engine.main import create_app
from schedule_engine.services.engine import ScheduleEngine
from schedule_engine.services.schedule_store import ScheduleStore, parse_schedule_document

# 2024-06-03 is a Monday, 2024-07-01 is a Monday.
SAMPLE_SCHEDULE = {
    "events": [
        {
            "id": "weekly-meetup",
            "type": "recurring",
            "title": "Weekly Meetup",
            "description": "Hack night",
            "location": "Makerspace",
            "color": "#df7020",
            "recurrence": {
                "frequency": "weekly",
                "daysOfWeek": ["mon", "wed"],
                "startDate": "2024-01-01",
                "endDate": "2024-12-31",
                "startTime": "18:00",
                "endTime": "20:00",
            },
        },
        {
            "id": "conference",
            "type": "static",
            "title": "Conference",
            "startDate": "2024-07-01",
            "endDate": "2024-07-03",
            "startTime": "00:00",
            "endTime": "00:00",
        },
        {
            "id": "workshop",
            "type": "static",
            "title": "Workshop",
            "location": "Room 2",
            "startDate": "2024-07-01",
            "endDate": "2024-07-03",
            "startTime": "09:00",
            "endTime": "10:00",
        },
        {
            "id": "third-thursday",
            "type": "recurring",
            "title": "Third Thursday Social",
            "recurrence": {
                "frequency": "monthly",
                "ordinalDay": "third thursday",
                "startDate": "2024-01-01",
                "startTime": "17:30",
                "endTime": "19:00",
            },
        },
        {
            "id": "hidden-daily",
            "type": "recurring",
            "title": "Staff Standup",
            "visible": False,
            "recurrence": {
                "frequency": "daily",
                "startDate": "2024-06-01",
                "endDate": "2024-06-30",
                "startTime": "08:00",
                "endTime": "08:15",
            },
        },
    ],
    "overrides": [
        {"eventId": "weekly-meetup", "date": "2024-06-03", "cancelled": True, "reason": "Holiday"},
        {"eventId": "weekly-meetup", "date": "2024-06-05", "location": "Library"},
    ],
}


@pytest.fixture
def schedule_payload() -> dict:
    return copy.deepcopy(SAMPLE_SCHEDULE)


@pytest.fixture
def schedule_document(schedule_payload):
    return parse_schedule_document(schedule_payload)


@pytest.fixture
def engine(schedule_document) -> ScheduleEngine:
    return ScheduleEngine(schedule_document)


@pytest.fixture
def store(schedule_document) -> ScheduleStore:
    loaded = ScheduleStore(sources=[])
    loaded.set_document(schedule_document, source="sample")
    return loaded


@pytest.fixture
def client(store) -> TestClient:
    """
    TestClient wired to an in-memory schedule store.

    Uses the application factory so every test gets a fresh app with its own
    dependency overrides.
    """
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def schedule_file(tmp_path, schedule_payload):
    path = tmp_path / "events.json"
    path.write_text(json.dumps(schedule_payload), encoding="utf-8")
    return path


@pytest.fixture
def file_store(schedule_file) -> ScheduleStore:
    """
    Store backed by a real file so /internal/reload has something to read.
    """
    return ScheduleStore(sources=[str(schedule_file)])
