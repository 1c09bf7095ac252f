from collections import Counter
from datetime import date

from schedule_engine.services.dates import month_aligned_window, month_grid_start
from schedule_engine.services.occurrence_resolver import OccurrenceResolver
from schedule_engine.services.range_enumerator import (
    enumerate_occurrences,
    partition_occurrences,
)


def test_enumeration_is_sorted_and_unique(schedule_document):
    resolver = OccurrenceResolver(schedule_document)

    occurrences = enumerate_occurrences(resolver, date(2024, 1, 1), date(2024, 12, 31), show_hidden=True)

    dates = [occ.date for occ in occurrences]
    assert dates == sorted(dates)
    keys = [(occ.event_id, occ.date.isoformat()) for occ in occurrences]
    assert len(keys) == len(set(keys))


def test_enumeration_skips_cancelled_occurrences(schedule_document):
    resolver = OccurrenceResolver(schedule_document)

    occurrences = enumerate_occurrences(resolver, date(2024, 6, 1), date(2024, 6, 7))

    meetups = [occ.date for occ in occurrences if occ.event_id == "weekly-meetup"]
    assert meetups == [date(2024, 6, 5)]


def test_multi_day_static_events_appear_once_per_day(schedule_document):
    resolver = OccurrenceResolver(schedule_document)

    occurrences = enumerate_occurrences(resolver, "2024-06-28", "2024-07-05")
    counts = Counter(occ.event_id for occ in occurrences)

    assert counts["workshop"] == 3
    assert counts["conference"] == 2
    assert counts["weekly-meetup"] == 2
    assert "hidden-daily" not in counts


def test_same_day_ties_keep_document_order(schedule_document):
    resolver = OccurrenceResolver(schedule_document)

    occurrences = enumerate_occurrences(resolver, date(2024, 7, 1), date(2024, 7, 1))

    assert [occ.event_id for occ in occurrences] == ["weekly-meetup", "conference", "workshop"]


def test_inverted_range_yields_nothing(schedule_document):
    resolver = OccurrenceResolver(schedule_document)
    assert enumerate_occurrences(resolver, date(2024, 7, 5), date(2024, 7, 1)) == []


def test_partition_puts_today_in_upcoming(schedule_document):
    resolver = OccurrenceResolver(schedule_document)
    occurrences = enumerate_occurrences(resolver, date(2024, 6, 28), date(2024, 7, 5))

    past, upcoming = partition_occurrences(occurrences, date(2024, 7, 2))

    assert all(occ.date < date(2024, 7, 2) for occ in past)
    assert all(occ.date >= date(2024, 7, 2) for occ in upcoming)
    assert len(past) + len(upcoming) == len(occurrences)
    assert {occ.event_id for occ in upcoming if occ.date == date(2024, 7, 2)} == {
        "conference",
        "workshop",
    }


def test_month_aligned_window():
    assert month_aligned_window(date(2024, 5, 17), 12) == (date(2023, 5, 1), date(2025, 5, 31))
    assert month_aligned_window("2024-01-31", 1) == (date(2023, 12, 1), date(2024, 2, 29))


def test_month_grid_start_is_a_sunday():
    assert month_grid_start(2024, 6) == date(2024, 5, 26)
    # September 2024 starts on a Sunday.
    assert month_grid_start(2024, 9) == date(2024, 9, 1)


def test_engine_upcoming_splits_window(engine):
    result = engine.upcoming(date(2024, 7, 2), months=1)

    assert result.start_date == date(2024, 6, 1)
    assert result.end_date == date(2024, 8, 31)
    assert result.past
    assert result.upcoming
    assert result.past[-1].date < date(2024, 7, 2) <= result.upcoming[0].date
    assert date(2024, 6, 3) not in [
        occ.date for occ in result.past if occ.event_id == "weekly-meetup"
    ]


def test_engine_month_grid(engine):
    grid = engine.month_grid(2024, 6)

    assert grid.days[0].date == date(2024, 5, 26)
    assert len(grid.days) == 42
    assert sum(1 for cell in grid.days if cell.in_month) == 30

    by_date = {cell.date: cell for cell in grid.days}
    assert [occ.event_id for occ in by_date[date(2024, 6, 20)].occurrences] == ["third-thursday"]
    assert by_date[date(2024, 7, 1)].in_month is False


def test_engine_show_hidden_default_can_be_overridden(schedule_document):
    from schedule_engine.services.engine import ScheduleEngine

    engine = ScheduleEngine(schedule_document, show_hidden=True)

    assert "hidden-daily" in [occ.event_id for occ in engine.get_events_for_date(date(2024, 6, 12))]
    assert "hidden-daily" not in [
        occ.event_id for occ in engine.get_events_for_date(date(2024, 6, 12), show_hidden=False)
    ]


def test_enumeration_reaches_the_last_representable_date(schedule_document):
    resolver = OccurrenceResolver(schedule_document)

    # 9999-12-30 is the fifth Thursday, so the monthly series has nothing here.
    assert enumerate_occurrences(resolver, date.max, date.max) == []
    assert enumerate_occurrences(resolver, date(9999, 12, 30), date.max) == []
