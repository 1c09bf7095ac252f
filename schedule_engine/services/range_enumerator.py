from __future__ import annotations

import logging

from schedule_engine.schemas.occurrence import Occurrence
from schedule_engine.services.dates import DateLike, format_date, iter_days, to_calendar_date
from schedule_engine.services.occurrence_resolver import OccurrenceResolver

logger = logging.getLogger(__name__)


def enumerate_occurrences(
    resolver: OccurrenceResolver,
    min_date: DateLike,
    max_date: DateLike,
    show_hidden: bool = False,
) -> list[Occurrence]:
    """
    Collect occurrences for every date in [min_date, max_date].

    Steps
    -----
    1) Resolve each day via the OccurrenceResolver (cancelled overrides are
       already dropped there).
    2) Deduplicate on (event_id, YYYY-MM-DD).
    3) Sort ascending by date; same-day ties keep schedule document order.

    The range is taken as given: bounding it is the caller's job.
    """
    start = to_calendar_date(min_date)
    end = to_calendar_date(max_date)

    seen: set[tuple[str, str]] = set()
    collected: list[Occurrence] = []

    for day in iter_days(start, end):
        for occurrence in resolver.get_events_for_date(day, show_hidden=show_hidden):
            key = (occurrence.event_id, format_date(occurrence.date))
            if key in seen:
                continue
            seen.add(key)
            collected.append(occurrence)

    # sorted() is stable, so document order survives for same-date entries.
    result = sorted(collected, key=lambda occ: occ.date)
    logger.debug("Enumerated %d occurrences between %s and %s", len(result), start, end)
    return result


def partition_occurrences(
    occurrences: list[Occurrence],
    today: DateLike,
) -> tuple[list[Occurrence], list[Occurrence]]:
    """
    Split a sorted occurrence list into (past, upcoming) around `today`.

    Past is strictly before today; today's occurrences count as upcoming.
    """
    reference = to_calendar_date(today)
    past = [occ for occ in occurrences if occ.date < reference]
    upcoming = [occ for occ in occurrences if occ.date >= reference]
    return past, upcoming
