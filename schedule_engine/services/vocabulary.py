from __future__ import annotations

from datetime import date as date_type
from enum import IntEnum
from typing import Iterable, NamedTuple, Optional, Union


class Weekday(IntEnum):
    """
    Day-of-week codes used throughout schedule documents (0 = Sunday).
    """

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def of(cls, day: date_type) -> "Weekday":
        # date.weekday() is Monday=0; documents use Sunday=0.
        return cls((day.weekday() + 1) % 7)


LAST = -1

_DAY_NAMES: dict[str, Weekday] = {
    "sunday": Weekday.SUNDAY,
    "sun": Weekday.SUNDAY,
    "monday": Weekday.MONDAY,
    "mon": Weekday.MONDAY,
    "tuesday": Weekday.TUESDAY,
    "tue": Weekday.TUESDAY,
    "tues": Weekday.TUESDAY,
    "wednesday": Weekday.WEDNESDAY,
    "wed": Weekday.WEDNESDAY,
    "thursday": Weekday.THURSDAY,
    "thu": Weekday.THURSDAY,
    "thur": Weekday.THURSDAY,
    "thurs": Weekday.THURSDAY,
    "friday": Weekday.FRIDAY,
    "fri": Weekday.FRIDAY,
    "saturday": Weekday.SATURDAY,
    "sat": Weekday.SATURDAY,
}

_ORDINALS: dict[str, int] = {
    "first": 1,
    "1st": 1,
    "second": 2,
    "2nd": 2,
    "third": 3,
    "3rd": 3,
    "fourth": 4,
    "4th": 4,
    "fifth": 5,
    "5th": 5,
    "last": LAST,
}


class OrdinalDay(NamedTuple):
    """
    Parsed '<ordinal> <weekday>' selector. `ordinal` is 1..5, or -1 for "last".
    """

    ordinal: int
    day_of_week: Weekday


def day_name_to_number(name: str) -> Optional[Weekday]:
    """
    Case-insensitive lookup of a full or abbreviated weekday name.

    Returns None for anything unrecognized; callers treat that as a non-match.
    """
    if not isinstance(name, str):
        return None
    return _DAY_NAMES.get(name.strip().lower())


def normalize_days_of_week(days: Optional[Iterable[Union[int, str]]]) -> list[int]:
    """
    Convert a mixed list of day names / numeric codes into numeric codes,
    preserving order. Unknown names are dropped since they can never match.
    """
    if not days:
        return []

    codes: list[int] = []
    for day in days:
        if isinstance(day, str):
            code = day_name_to_number(day)
            if code is not None:
                codes.append(int(code))
        elif isinstance(day, int) and not isinstance(day, bool):
            codes.append(day)
    return codes


def parse_ordinal_day(text: Optional[str]) -> Optional[OrdinalDay]:
    """
    Parse selectors like "third thursday", "2nd tue" or "last friday".

    Exactly two whitespace-separated tokens are required; anything else,
    or an unknown ordinal/day token, yields None.
    """
    if not text or not isinstance(text, str):
        return None

    parts = text.lower().split()
    if len(parts) != 2:
        return None

    ordinal = _ORDINALS.get(parts[0])
    day_of_week = day_name_to_number(parts[1])
    if ordinal is None or day_of_week is None:
        return None

    return OrdinalDay(ordinal=ordinal, day_of_week=day_of_week)
