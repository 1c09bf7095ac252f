from __future__ import annotations

from datetime import date as date_type
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# --------------------------------------------------------------------------
# Recurrence rule (recurring events only)
# --------------------------------------------------------------------------

class Recurrence(BaseModel):
    """
    Series definition of a recurring event.

    Selectors are loosely typed. Schedule documents are hand-edited,
    and a malformed selector must end up as "no match" in the matcher rather
    than a validation failure for the whole event.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    frequency: str = Field(
        ...,
        description="One of daily/weekly/monthly. Unknown values never match.",
        examples=["weekly"],
    )
    start_date: date_type = Field(
        ...,
        alias="startDate",
        description="First calendar date of the series (inclusive).",
    )
    end_date: date_type | None = Field(
        None,
        alias="endDate",
        description="Last calendar date of the series (inclusive), open-ended if omitted.",
    )
    start_time: str | None = Field(None, alias="startTime", examples=["18:00"])
    end_time: str | None = Field(None, alias="endTime", examples=["20:00"])

    days_of_week: list[Union[int, str]] | None = Field(
        None,
        alias="daysOfWeek",
        description="Weekly selector: day names ('mon', 'Tuesday') or numeric codes (0=Sunday).",
    )
    days_of_month: list[int] | None = Field(
        None,
        alias="daysOfMonth",
        description="Monthly selector: explicit days of the month.",
    )
    ordinal_day: str | None = Field(
        None,
        alias="ordinalDay",
        description="Monthly selector: '<ordinal> <weekday>', e.g. 'third thursday' or 'last friday'.",
    )
    day_of_month: int | None = Field(
        None,
        alias="dayOfMonth",
        description="Legacy monthly selector: a single day of the month.",
    )


# --------------------------------------------------------------------------
# Events (tagged union over `type`)
# --------------------------------------------------------------------------

class EventBase(BaseModel):
    """
    Fields shared by static and recurring events.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., description="Stable, unique event identifier.")
    title: str = Field(..., description="Display title.")
    description: str | None = None
    location: str | None = None
    website: str | None = None
    color: str | None = Field(None, description="Display hint, e.g. '#df7020'.")
    gcal_link: str | None = Field(
        None,
        alias="gcalLink",
        description="Link back to the Google Calendar entry for imported events.",
    )
    visible: bool | None = Field(
        True,
        description=(
            "Only an explicit false hides the event (unless the caller enables "
            "show_hidden); null or a missing value means visible."
        ),
    )


class StaticEvent(EventBase):
    """
    One-off event spanning one or more calendar dates.

    An event whose start and end time are both "00:00" is a full-day event
    and its end date is exclusive.
    """

    type: Literal["static"] = "static"
    start_date: date_type = Field(..., alias="startDate")
    end_date: date_type = Field(..., alias="endDate")
    start_time: str | None = Field(None, alias="startTime", examples=["09:00"])
    end_time: str | None = Field(None, alias="endTime", examples=["17:00"])


class RecurringEvent(EventBase):
    """
    Rule-based event; see `Recurrence`.
    """

    type: Literal["recurring"] = "recurring"
    recurrence: Recurrence


Event = Annotated[Union[StaticEvent, RecurringEvent], Field(discriminator="type")]

event_adapter: TypeAdapter[StaticEvent | RecurringEvent] = TypeAdapter(Event)


# --------------------------------------------------------------------------
# Overrides + document
# --------------------------------------------------------------------------

class Override(BaseModel):
    """
    Per-date exception for a single occurrence of a recurring event.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    event_id: str = Field(..., alias="eventId")
    date: str = Field(
        ...,
        description="Canonical YYYY-MM-DD date of the affected occurrence.",
        examples=["2024-06-01"],
    )
    title: str | None = None
    description: str | None = None
    location: str | None = None
    start_time: str | None = Field(None, alias="startTime")
    end_time: str | None = Field(None, alias="endTime")
    cancelled: bool = False
    reason: str | None = None


class ScheduleDocument(BaseModel):
    """
    Loaded schedule: events (document order is kept) plus overrides.

    Treated as immutable for its whole lifetime.
    """

    model_config = ConfigDict(frozen=True)

    events: list[Event] = Field(default_factory=list)
    overrides: list[Override] = Field(default_factory=list)
