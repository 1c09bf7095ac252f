from __future__ import annotations

import logging
from datetime import date as date_type
from typing import Optional

from schedule_engine.schemas.event import RecurringEvent, ScheduleDocument, StaticEvent
from schedule_engine.schemas.occurrence import FULL_DAY_TIME, Occurrence
from schedule_engine.services.dates import DateLike, format_date, to_calendar_date
from schedule_engine.services.override_resolver import OverrideResolver
from schedule_engine.services.recurrence_matcher import is_recurring_event_on_date

logger = logging.getLogger(__name__)


def _base_occurrence(event: StaticEvent | RecurringEvent, day: date_type) -> Occurrence:
    common = {
        "event_id": event.id,
        "type": event.type,
        "date": day,
        "title": event.title,
        "description": event.description,
        "location": event.location,
        "website": event.website,
        "color": event.color,
        "gcal_link": event.gcal_link,
        "visible": event.visible is not False,
    }
    if isinstance(event, RecurringEvent):
        return Occurrence(
            **common,
            start_time=event.recurrence.start_time,
            end_time=event.recurrence.end_time,
        )
    return Occurrence(
        **common,
        start_time=event.start_time,
        end_time=event.end_time,
        start_date=event.start_date,
        end_date=event.end_date,
    )


def is_static_event_on_date(event: StaticEvent, day: DateLike) -> bool:
    """
    Static events cover [start_date, end_date]; full-day events (both times
    "00:00") exclude their end date, i.e. [start_date, end_date).
    """
    target = to_calendar_date(day)
    if event.start_time == FULL_DAY_TIME and event.end_time == FULL_DAY_TIME:
        return event.start_date <= target < event.end_date
    return event.start_date <= target <= event.end_date


class OccurrenceResolver:
    """
    Produces the visible, override-applied occurrences for a single date.

    Pure over the (immutable) schedule document: repeated calls with the
    same arguments return equal results.
    """

    def __init__(self, document: ScheduleDocument, overrides: Optional[OverrideResolver] = None):
        self.document = document
        self.overrides = overrides or OverrideResolver(document.overrides)

    def get_events_for_date(self, day: DateLike, show_hidden: bool = False) -> list[Occurrence]:
        """
        Return occurrences on `day` in schedule document order (not sorted).
        """
        target = to_calendar_date(day)
        date_string = format_date(target)
        occurrences: list[Occurrence] = []

        for event in self.document.events:
            if event.visible is False and not show_hidden:
                continue

            if isinstance(event, RecurringEvent):
                if not is_recurring_event_on_date(event, target):
                    continue
                override = self.overrides.get_override(event.id, date_string)
                occurrence = self.overrides.apply_override(
                    _base_occurrence(event, target), override
                )
                if occurrence is None:
                    logger.debug("Occurrence %s on %s cancelled", event.id, date_string)
                    continue
            elif isinstance(event, StaticEvent):
                if not is_static_event_on_date(event, target):
                    continue
                occurrence = _base_occurrence(event, target)
            else:  # pragma: no cover - the discriminated union rules this out
                raise TypeError(f"Unsupported event type: {type(event).__name__}")

            occurrences.append(occurrence)

        return occurrences
