from __future__ import annotations

from datetime import timedelta
from typing import Optional

from schedule_engine.schemas.event import Override, ScheduleDocument
from schedule_engine.schemas.occurrence import (
    CalendarDay,
    MonthGrid,
    Occurrence,
    UpcomingOccurrences,
)
from schedule_engine.services.dates import (
    DateLike,
    month_aligned_window,
    month_grid_start,
    to_calendar_date,
)
from schedule_engine.services.occurrence_resolver import OccurrenceResolver
from schedule_engine.services.override_resolver import OverrideResolver
from schedule_engine.services.range_enumerator import (
    enumerate_occurrences,
    partition_occurrences,
)

GRID_DAYS = 42  # 6 rows x 7 days


class ScheduleEngine:
    """
    Read-only query surface over one loaded ScheduleDocument.

    Every call recomputes from the document; nothing is cached or mutated,
    so a single instance can be shared between concurrent requests.
    """

    def __init__(self, document: ScheduleDocument, show_hidden: bool = False):
        self.document = document
        self.show_hidden = show_hidden
        self._overrides = OverrideResolver(document.overrides)
        self._resolver = OccurrenceResolver(document, self._overrides)

    def _hidden(self, show_hidden: Optional[bool]) -> bool:
        return self.show_hidden if show_hidden is None else show_hidden

    def get_events_for_date(
        self, day: DateLike, show_hidden: Optional[bool] = None
    ) -> list[Occurrence]:
        return self._resolver.get_events_for_date(day, show_hidden=self._hidden(show_hidden))

    def enumerate_occurrences(
        self,
        min_date: DateLike,
        max_date: DateLike,
        show_hidden: Optional[bool] = None,
    ) -> list[Occurrence]:
        return enumerate_occurrences(
            self._resolver, min_date, max_date, show_hidden=self._hidden(show_hidden)
        )

    def get_override(self, event_id: str, date_string: str) -> Optional[Override]:
        return self._overrides.get_override(event_id, date_string)

    def upcoming(
        self,
        today: DateLike,
        months: int = 12,
        show_hidden: Optional[bool] = None,
    ) -> UpcomingOccurrences:
        """
        Month-aligned window around `today`, split into past and upcoming.
        """
        reference = to_calendar_date(today)
        start, end = month_aligned_window(reference, months)
        occurrences = self.enumerate_occurrences(start, end, show_hidden=show_hidden)
        past, upcoming = partition_occurrences(occurrences, reference)
        return UpcomingOccurrences(
            today=reference,
            start_date=start,
            end_date=end,
            past=past,
            upcoming=upcoming,
        )

    def month_grid(
        self, year: int, month: int, show_hidden: Optional[bool] = None
    ) -> MonthGrid:
        """
        42-day grid for a month view, including adjacent-month padding days.
        """
        first_cell = month_grid_start(year, month)
        days: list[CalendarDay] = []
        for offset in range(GRID_DAYS):
            day = first_cell + timedelta(days=offset)
            days.append(
                CalendarDay(
                    date=day,
                    in_month=(day.year == year and day.month == month),
                    occurrences=self.get_events_for_date(day, show_hidden=show_hidden),
                )
            )
        return MonthGrid(year=year, month=month, days=days)
