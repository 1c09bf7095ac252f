from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from schedule_engine.core.config import Settings, get_settings
from schedule_engine.schemas.event import StaticEvent
from schedule_engine.schemas.source import SourcesConfig
from schedule_engine.schemas.sync import SourceSyncResult, SyncSummary
from schedule_engine.services.dates import month_aligned_window
from schedule_engine.services.event_normalizer import filter_events, normalize_events
from schedule_engine.services.google_calendar_client import (
    GoogleCalendarClient,
    GoogleCalendarError,
)
from schedule_engine.services.schedule_merger import merge_events

logger = logging.getLogger(__name__)


class CalendarSyncError(RuntimeError):
    """
    Raised when the sync cannot run at all (bad sources file, unwritable output).
    """


def load_sources_config(path: str | Path) -> SourcesConfig:
    try:
        return SourcesConfig.model_validate_json(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValidationError) as exc:
        raise CalendarSyncError(f"Failed to load calendar sources from {path}: {exc}") from exc


def sync_window(today: date, months_back: int, months_ahead: int) -> tuple[date, date]:
    """
    Month-aligned fetch window: the 1st of the month `months_back` before
    `today` through the last day of the month `months_ahead` after it.
    """
    return month_aligned_window(today, months_back, months_ahead=months_ahead)


async def run_calendar_sync(
    settings: Optional[Settings] = None,
    client: Optional[GoogleCalendarClient] = None,
    today: Optional[date] = None,
) -> SyncSummary:
    """
    Import external Google calendars into the materialized schedule document.

    Behavior
    --------
    1) Load the configured calendar sources.
    2) For each source, fetch event instances inside the sync window.
    3) Drop cancelled entries and apply the source's keyword filter.
    4) Normalize the remaining events into static events.
    5) Merge them with the base document and write the output atomically.

    A source that fails to fetch is logged and reported in the summary;
    the remaining sources are still imported.
    """
    settings = settings or get_settings()
    client = client or GoogleCalendarClient(
        api_key=settings.GOOGLE_API_KEY,
        base_url=settings.GOOGLE_CALENDAR_BASE_URL,
    )
    today = today or date.today()

    config = load_sources_config(settings.SYNC_SOURCES_PATH)
    window_start, window_end = sync_window(
        today, settings.SYNC_MONTHS_BACK, settings.SYNC_MONTHS_AHEAD
    )
    time_min = datetime.combine(window_start, time.min, tzinfo=timezone.utc)
    # Inclusive of the whole last day.
    time_max = datetime.combine(window_end, time(23, 59, 59), tzinfo=timezone.utc)

    imported: List[StaticEvent] = []
    results: List[SourceSyncResult] = []

    for source in config.sources:
        try:
            raw_events = await client.get_events(source.calendar_id, time_min, time_max)
        except GoogleCalendarError as exc:
            logger.error("Failed to fetch events for %s: %s", source.name, exc)
            results.append(SourceSyncResult(name=source.name, error=str(exc)))
            continue

        included = filter_events(raw_events, source)
        normalized = normalize_events(included, source)
        imported.extend(normalized)

        logger.info(
            "Source %s: fetched=%d included=%d normalized=%d",
            source.name,
            len(raw_events),
            len(included),
            len(normalized),
        )
        results.append(
            SourceSyncResult(
                name=source.name,
                fetched=len(raw_events),
                included=len(included),
                normalized=len(normalized),
            )
        )

    try:
        total = merge_events(settings.SYNC_BASE_EVENTS_PATH, imported, settings.SYNC_OUTPUT_PATH)
    except (OSError, ValueError) as exc:
        raise CalendarSyncError(f"Failed to write merged events: {exc}") from exc

    return SyncSummary(
        window_start=window_start,
        window_end=window_end,
        output_path=settings.SYNC_OUTPUT_PATH,
        total_events=total,
        sources=results,
    )
