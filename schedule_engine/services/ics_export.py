from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, timezone
from typing import Optional

from icalendar import Calendar, Event as ICalEvent

from schedule_engine.schemas.occurrence import Occurrence

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT_ID = "-//Schedule Engine//Calendar Export//EN"
UID_DOMAIN = "schedule-engine"


def _parse_wall_clock(value: Optional[str]) -> Optional[time]:
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except ValueError:
        logger.warning("Ignoring malformed time %r in export", value)
        return None


def occurrence_uid(occurrence: Occurrence) -> str:
    return f"{occurrence.event_id}-{occurrence.date.strftime('%Y%m%d')}@{UID_DOMAIN}"


def build_occurrence_event(occurrence: Occurrence) -> ICalEvent:
    """
    Build a single VEVENT for one resolved occurrence.

    - Full-day occurrences (or ones without usable times) become DATE values
      spanning exactly the occurrence date.
    - Timed occurrences use floating local date-times on the occurrence date;
      an end at or before the start rolls over to the next day.
    """
    vevent = ICalEvent()
    vevent.add("uid", occurrence_uid(occurrence))
    vevent.add("dtstamp", datetime.now(tz=timezone.utc))
    vevent.add("summary", occurrence.title)

    if occurrence.description:
        vevent.add("description", occurrence.description)
    if occurrence.location:
        vevent.add("location", occurrence.location)
    if occurrence.website:
        vevent.add("url", occurrence.website)

    start_time = _parse_wall_clock(occurrence.start_time)
    end_time = _parse_wall_clock(occurrence.end_time)

    if occurrence.is_full_day or start_time is None:
        vevent.add("dtstart", occurrence.date)
        vevent.add("dtend", occurrence.date + timedelta(days=1))
        return vevent

    start = datetime.combine(occurrence.date, start_time)
    end = datetime.combine(occurrence.date, end_time) if end_time else start + timedelta(hours=1)
    if end <= start:
        end += timedelta(days=1)

    vevent.add("dtstart", start)
    vevent.add("dtend", end)
    return vevent


def build_occurrence_ics(occurrence: Occurrence, product_id: str = DEFAULT_PRODUCT_ID) -> str:
    """
    Serialize one occurrence as a complete VCALENDAR document.
    """
    calendar = Calendar()
    calendar.add("prodid", product_id)
    calendar.add("version", "2.0")
    calendar.add("calscale", "GREGORIAN")
    calendar.add("method", "PUBLISH")
    calendar.add_component(build_occurrence_event(occurrence))
    return calendar.to_ical().decode("utf-8")


def ics_filename(occurrence: Occurrence) -> str:
    return f"{occurrence.event_id}-{occurrence.date.isoformat()}.ics"
