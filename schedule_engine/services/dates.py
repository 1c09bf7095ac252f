from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Union

from dateutil.relativedelta import relativedelta

DateLike = Union[date, datetime, str]


def to_calendar_date(value: DateLike) -> date:
    """
    Reduce a date-like value to a plain calendar date.

    - datetime -> its local .date() (time-of-day discarded, no tz conversion)
    - str      -> parsed from its YYYY-MM-DD components
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])


def format_date(value: DateLike) -> str:
    """
    Canonical YYYY-MM-DD representation.
    """
    return to_calendar_date(value).isoformat()


def iter_days(start: date, end: date) -> Iterator[date]:
    """
    Yield every calendar date from `start` to `end`, both inclusive.
    """
    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_aligned_window(
    today: DateLike,
    months: int = 12,
    months_ahead: Optional[int] = None,
) -> tuple[date, date]:
    """
    Window from the first day of the month `months` before `today` to the
    last day of the month `months_ahead` (default: `months`) after it.
    """
    anchor = to_calendar_date(today).replace(day=1)
    start = anchor - relativedelta(months=months)
    end_month = anchor + relativedelta(months=months if months_ahead is None else months_ahead)
    end = end_month.replace(day=last_day_of_month(end_month.year, end_month.month))
    return start, end


def month_grid_start(year: int, month: int) -> date:
    """
    Sunday on or before the first day of the given month.
    """
    first = date(year, month, 1)
    # date.weekday(): Monday=0 .. Sunday=6
    return first - timedelta(days=(first.weekday() + 1) % 7)
