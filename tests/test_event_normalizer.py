from datetime import date

import pytest

from schedule_engine.schemas.source import CalendarSource
from schedule_engine.services.event_normalizer import (
    EventNormalizationError,
    filter_events,
    normalize_event,
    normalize_events,
    sanitize_source_name,
    should_include_event,
)


def _source(**fields) -> CalendarSource:
    data = {
        "name": "Hack Club!",
        "calendarId": "hackclub@group.calendar.google.com",
        "color": "#336699",
        "website": "https://hack.example.org",
    }
    data.update(fields)
    return CalendarSource.model_validate(data)


def _google_event(**fields) -> dict:
    data = {
        "id": "abc123",
        "status": "confirmed",
        "summary": "Soldering 101",
        "description": "Bring your own iron",
        "location": "Lab",
        "htmlLink": "https://calendar.google.com/event?eid=abc123",
        "start": {"dateTime": "2024-06-05T18:30:00-07:00"},
        "end": {"dateTime": "2024-06-05T20:00:00-07:00"},
    }
    data.update(fields)
    return data


def test_sanitize_source_name():
    assert sanitize_source_name("Hack Club!") == "hack-club"
    assert sanitize_source_name("Makers & Co 2") == "makers--co-2"


def test_normalize_timed_event_keeps_wall_clock():
    event = normalize_event(_google_event(), _source())

    assert event.type == "static"
    assert event.id == "hack-club-abc123"
    assert event.title == "Soldering 101"
    assert event.start_date == date(2024, 6, 5)
    assert event.end_date == date(2024, 6, 5)
    assert event.start_time == "18:30"
    assert event.end_time == "20:00"
    assert event.color == "#336699"
    assert event.website == "https://hack.example.org"
    assert event.gcal_link == "https://calendar.google.com/event?eid=abc123"
    assert event.visible is True


def test_normalize_all_day_event_is_full_day():
    event = normalize_event(
        _google_event(start={"date": "2024-07-01"}, end={"date": "2024-07-03"}),
        _source(),
    )

    assert event.start_time == "00:00"
    assert event.end_time == "00:00"
    assert event.end_date == date(2024, 7, 3)


def test_normalize_respects_source_visibility():
    event = normalize_event(_google_event(), _source(visible=False))
    assert event.visible is False


def test_normalize_utc_suffix():
    event = normalize_event(
        _google_event(
            start={"dateTime": "2024-06-05T09:00:00Z"},
            end={"dateTime": "2024-06-05T10:00:00Z"},
        ),
        _source(),
    )
    assert event.start_time == "09:00"


def test_normalize_event_without_times_raises():
    with pytest.raises(EventNormalizationError):
        normalize_event(_google_event(start={}), _source())


def test_normalize_events_skips_broken_entries():
    events = [_google_event(), _google_event(id="bad", end={"dateTime": "not-a-date"})]

    normalized = normalize_events(events, _source())

    assert [event.id for event in normalized] == ["hack-club-abc123"]


def test_keyword_filter_rules():
    source = _source(eventFilter={"includeKeywords": ["solder"], "excludeKeywords": ["private"]})

    assert should_include_event(_google_event(), source.event_filter) is True
    assert should_include_event(_google_event(summary="Board meeting"), source.event_filter) is False
    assert (
        should_include_event(_google_event(description="Private soldering"), source.event_filter)
        is False
    )


def test_keyword_filter_without_include_keywords_keeps_everything():
    assert should_include_event(_google_event(summary="Anything"), _source().event_filter) is True


def test_filter_events_drops_cancelled():
    events = [_google_event(), _google_event(id="gone", status="cancelled")]
    assert [event["id"] for event in filter_events(events, _source())] == ["abc123"]
