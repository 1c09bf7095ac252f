from datetime import date
from http import HTTPStatus

import pytest

from schedule_engine.api.dependencies import internal_auth as auth_module
from schedule_engine.api.dependencies.schedule import get_store
from schedule_engine.api.routes import internal as internal_routes
from schedule_engine.schemas.sync import SourceSyncResult, SyncSummary
from schedule_engine.services.sync import CalendarSyncError


class DummySettingsLocal:
    APP_ENV = "test"
    INTERNAL_API_KEY = None
    is_local_env = True


@pytest.fixture
def internal_client(monkeypatch, client, file_store):
    monkeypatch.setattr(auth_module, "get_settings", lambda: DummySettingsLocal())
    client.app.dependency_overrides[get_store] = lambda: file_store
    return client


def test_reload_loads_schedule_from_source(internal_client, file_store, schedule_file):
    resp = internal_client.post("/internal/reload")

    assert resp.status_code == HTTPStatus.OK
    assert resp.json() == {"source": str(schedule_file), "events": 5, "overrides": 2}
    assert file_store.is_loaded

    day = internal_client.get("/calendar/day/2024-06-10")
    assert [occ["event_id"] for occ in day.json()] == ["weekly-meetup"]


def test_reload_failure_returns_502_and_keeps_document(internal_client, file_store, schedule_file):
    assert internal_client.post("/internal/reload").status_code == HTTPStatus.OK

    schedule_file.write_text("[]", encoding="utf-8")
    resp = internal_client.post("/internal/reload")

    assert resp.status_code == HTTPStatus.BAD_GATEWAY
    assert internal_client.get("/calendar/day/2024-06-10").status_code == HTTPStatus.OK


def test_sync_runs_pipeline_then_reloads(monkeypatch, internal_client, file_store):
    summary = SyncSummary(
        window_start=date(2023, 5, 1),
        window_end=date(2025, 5, 31),
        output_path="events-materialized.json",
        total_events=5,
        sources=[SourceSyncResult(name="Hack Club", fetched=2, included=1, normalized=1)],
    )

    async def _fake_sync():
        return summary

    monkeypatch.setattr(internal_routes, "run_calendar_sync", _fake_sync)

    resp = internal_client.post("/internal/sync")

    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["total_events"] == 5
    assert data["sources"][0]["name"] == "Hack Club"
    assert file_store.is_loaded


def test_sync_failure_returns_500(monkeypatch, internal_client):
    async def _failing_sync():
        raise CalendarSyncError("sources file missing")

    monkeypatch.setattr(internal_routes, "run_calendar_sync", _failing_sync)

    resp = internal_client.post("/internal/sync")

    assert resp.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert "sources file missing" in resp.json()["detail"]
