from datetime import date as date_type

from pydantic import BaseModel, ConfigDict, Field

FULL_DAY_TIME = "00:00"


class Occurrence(BaseModel):
    """
    One concrete calendar-date materialization of an event, after override
    merge and visibility filtering.

    Occurrences are recomputed on every query and never mutated in place.
    """

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(..., description="Identifier of the originating event.")
    type: str = Field(..., description="'static' or 'recurring'.", examples=["recurring"])
    date: date_type = Field(
        ...,
        description="Calendar date this occurrence falls on.",
        examples=["2024-06-01"],
    )
    title: str
    description: str | None = None
    location: str | None = None
    website: str | None = None
    color: str | None = None
    gcal_link: str | None = None
    visible: bool = True
    start_time: str | None = Field(None, description="Local wall-clock start, HH:MM.")
    end_time: str | None = Field(None, description="Local wall-clock end, HH:MM.")
    start_date: date_type | None = Field(
        None,
        description="First date of a static event (None for recurring events).",
    )
    end_date: date_type | None = Field(
        None,
        description="Last date of a static event (None for recurring events).",
    )
    is_overridden: bool = Field(
        False,
        description="True when a per-date override modified this occurrence.",
    )

    @property
    def is_full_day(self) -> bool:
        return self.start_time == FULL_DAY_TIME and self.end_time == FULL_DAY_TIME


class UpcomingOccurrences(BaseModel):
    """
    Sorted occurrences of a window split around a reference `today`.
    """

    today: date_type
    start_date: date_type
    end_date: date_type
    past: list[Occurrence] = Field(default_factory=list)
    upcoming: list[Occurrence] = Field(default_factory=list)


class CalendarDay(BaseModel):
    """
    One cell of a month grid.
    """

    date: date_type
    in_month: bool = Field(..., description="False for leading/trailing days of adjacent months.")
    occurrences: list[Occurrence] = Field(default_factory=list)


class MonthGrid(BaseModel):
    """
    Six-week (42 day) grid for a month, starting on the Sunday on or before the 1st.
    """

    year: int
    month: int
    days: list[CalendarDay]
