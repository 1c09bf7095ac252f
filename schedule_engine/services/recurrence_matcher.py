from __future__ import annotations

import logging
from datetime import date as date_type

from schedule_engine.schemas.event import Recurrence, RecurringEvent
from schedule_engine.services.dates import DateLike, last_day_of_month, to_calendar_date
from schedule_engine.services.vocabulary import (
    LAST,
    Weekday,
    normalize_days_of_week,
    parse_ordinal_day,
)

logger = logging.getLogger(__name__)


def get_nth_day_of_month(year: int, month: int, day_of_week: int, n: int) -> int:
    """
    Day-of-month of the n-th `day_of_week` (0=Sunday) in the given month.

    `month` is 1-based. `n` is 1..5, or -1 for the last occurrence.

    The result is not clamped to the month length: asking for the fifth
    Monday of a month with only four yields a day past the month's end,
    which no real date will ever equal.
    """
    if n == LAST:
        last_day = last_day_of_month(year, month)
        last_weekday = Weekday.of(date_type(year, month, last_day))
        diff = (last_weekday - day_of_week + 7) % 7
        return last_day - diff

    first_weekday = Weekday.of(date_type(year, month, 1))
    diff = (day_of_week - first_weekday + 7) % 7
    return 1 + diff + (n - 1) * 7


def _matches_monthly(recurrence: Recurrence, day: date_type) -> bool:
    # Selector precedence: daysOfMonth > ordinalDay > legacy dayOfMonth.
    if recurrence.days_of_month is not None:
        return day.day in recurrence.days_of_month

    if recurrence.ordinal_day:
        parsed = parse_ordinal_day(recurrence.ordinal_day)
        if parsed is None:
            logger.debug("Unparseable ordinalDay %r", recurrence.ordinal_day)
            return False
        nth = get_nth_day_of_month(day.year, day.month, parsed.day_of_week, parsed.ordinal)
        return day.day == nth

    if recurrence.day_of_month is not None:
        return day.day == recurrence.day_of_month

    return False


def is_recurring_event_on_date(event: RecurringEvent, day: DateLike) -> bool:
    """
    Decide whether a recurring event has an occurrence on `day`.

    Bounds and query date are compared as calendar dates only, so a
    daylight-saving transition can never shift a day boundary.
    """
    recurrence = event.recurrence
    target = to_calendar_date(day)

    if target < recurrence.start_date:
        return False
    if recurrence.end_date is not None and target > recurrence.end_date:
        return False

    frequency = (recurrence.frequency or "").lower()

    if frequency == "daily":
        return True
    if frequency == "weekly":
        return Weekday.of(target) in normalize_days_of_week(recurrence.days_of_week)
    if frequency == "monthly":
        return _matches_monthly(recurrence, target)

    return False
