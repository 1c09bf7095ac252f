from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List

from schedule_engine.schemas.event import StaticEvent
from schedule_engine.schemas.occurrence import FULL_DAY_TIME
from schedule_engine.schemas.source import CalendarSource, EventFilter

logger = logging.getLogger(__name__)


class EventNormalizationError(ValueError):
    """
    Raised when an external event cannot be mapped to a static event.
    """


def sanitize_source_name(name: str) -> str:
    """
    Lowercase, spaces to hyphens, keep only [a-z0-9-].
    """
    return re.sub(r"[^a-z0-9-]", "", name.lower().replace(" ", "-"))


def should_include_event(event: Dict[str, Any], event_filter: EventFilter) -> bool:
    """
    Keyword filter over summary + description (case-insensitive substring).

    Rules
    -----
    1) Any exclude keyword match           => dropped
    2) No include keywords configured      => kept
    3) Otherwise at least one include hit  => kept, else dropped
    """
    text = f"{event.get('summary') or ''} {event.get('description') or ''}".lower()

    for keyword in event_filter.exclude_keywords:
        if keyword and keyword.lower() in text:
            return False

    if not event_filter.include_keywords:
        return True

    return any(keyword and keyword.lower() in text for keyword in event_filter.include_keywords)


def _parse_event_datetime(value: Dict[str, Any]) -> tuple[date, str]:
    # All-day entries carry `date`, timed ones an RFC 3339 `dateTime`.
    if value.get("date"):
        return date.fromisoformat(value["date"]), FULL_DAY_TIME

    raw = value.get("dateTime")
    if raw:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        # Keep the wall clock of the offset Google returned; no conversion.
        return parsed.date(), parsed.strftime("%H:%M")

    raise EventNormalizationError("event has no date or dateTime")


def normalize_event(event: Dict[str, Any], source: CalendarSource) -> StaticEvent:
    """
    Convert one Google Calendar event into a static schedule event.

    The id is "<sanitized source name>-<google event id>", e.g.
    "hack-club-abc123" for source "Hack Club!". Documents materialized by
    older tooling that used the raw source name ("Hack Club!-abc123") will
    not match these ids, so overrides keyed on such ids must be rewritten.
    """
    try:
        start_date, start_time = _parse_event_datetime(event.get("start") or {})
        end_date, end_time = _parse_event_datetime(event.get("end") or {})
    except ValueError as exc:
        raise EventNormalizationError(f"failed to parse event times: {exc}") from exc

    return StaticEvent(
        id=f"{sanitize_source_name(source.name)}-{event.get('id')}",
        title=event.get("summary") or "",
        description=event.get("description"),
        location=event.get("location"),
        website=source.website,
        color=source.color,
        gcal_link=event.get("htmlLink"),
        visible=True if source.visible is None else source.visible,
        start_date=start_date,
        end_date=end_date,
        start_time=start_time,
        end_time=end_time,
    )


def normalize_events(events: Iterable[Dict[str, Any]], source: CalendarSource) -> List[StaticEvent]:
    """
    Normalize a batch; events that cannot be converted are logged and skipped.
    """
    normalized: List[StaticEvent] = []
    for event in events:
        try:
            normalized.append(normalize_event(event, source))
        except EventNormalizationError as exc:
            logger.warning("Failed to normalize event %s from %s: %s", event.get("id"), source.name, exc)
    return normalized


def filter_events(events: Iterable[Dict[str, Any]], source: CalendarSource) -> List[Dict[str, Any]]:
    """
    Drop cancelled entries, then apply the source's keyword filter.
    """
    return [
        event
        for event in events
        if event.get("status") != "cancelled" and should_include_event(event, source.event_filter)
    ]
