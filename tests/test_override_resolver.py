from datetime import date

from schedule_engine.schemas.event import Override
from schedule_engine.schemas.occurrence import Occurrence
from schedule_engine.services.override_resolver import OverrideResolver


def _occurrence(type_: str = "recurring") -> Occurrence:
    return Occurrence(
        event_id="weekly-meetup",
        type=type_,
        date=date(2024, 6, 5),
        title="Weekly Meetup",
        description="Hack night",
        location="Makerspace",
        start_time="18:00",
        end_time="20:00",
    )


def _override(**fields) -> Override:
    data = {"eventId": "weekly-meetup", "date": "2024-06-05"}
    data.update(fields)
    return Override.model_validate(data)


def test_get_override_matches_event_id_and_date():
    resolver = OverrideResolver(
        [
            _override(date="2024-06-04", title="Wrong day"),
            _override(title="Right one"),
            _override(eventId="other", title="Wrong event"),
        ]
    )

    found = resolver.get_override("weekly-meetup", "2024-06-05")

    assert found is not None
    assert found.title == "Right one"


def test_get_override_first_match_wins_for_duplicates():
    resolver = OverrideResolver([_override(title="First"), _override(title="Second")])
    assert resolver.get_override("weekly-meetup", "2024-06-05").title == "First"


def test_get_override_returns_none_when_absent():
    resolver = OverrideResolver([_override()])

    assert resolver.get_override("weekly-meetup", "2024-06-06") is None
    assert resolver.get_override("unknown", "2024-06-05") is None


def test_apply_cancelled_override_suppresses_occurrence():
    result = OverrideResolver.apply_override(_occurrence(), _override(cancelled=True, reason="Holiday"))
    assert result is None


def test_apply_override_replaces_only_supplied_fields():
    result = OverrideResolver.apply_override(_occurrence(), _override(location="Library"))

    assert result is not None
    assert result.location == "Library"
    assert result.title == "Weekly Meetup"
    assert result.description == "Hack night"
    assert result.start_time == "18:00"
    assert result.is_overridden is True


def test_apply_override_replaces_times():
    result = OverrideResolver.apply_override(
        _occurrence(), _override(startTime="19:00", endTime="21:30")
    )

    assert result.start_time == "19:00"
    assert result.end_time == "21:30"


def test_apply_override_ignores_empty_values():
    result = OverrideResolver.apply_override(_occurrence(), _override(title="", location="Library"))

    assert result.title == "Weekly Meetup"
    assert result.location == "Library"


def test_apply_override_is_noop_for_static_events():
    occurrence = _occurrence(type_="static")

    result = OverrideResolver.apply_override(occurrence, _override(title="Changed", cancelled=True))

    assert result == occurrence
    assert result.is_overridden is False


def test_apply_without_override_returns_occurrence_unchanged():
    occurrence = _occurrence()
    assert OverrideResolver.apply_override(occurrence, None) is occurrence
