from pydantic import BaseModel, ConfigDict, Field


class EventFilter(BaseModel):
    """
    Keyword filter applied to an external calendar's events before import.
    """

    model_config = ConfigDict(populate_by_name=True)

    include_keywords: list[str] = Field(
        default_factory=list,
        alias="includeKeywords",
        description="If non-empty, an event must mention at least one of these.",
    )
    exclude_keywords: list[str] = Field(
        default_factory=list,
        alias="excludeKeywords",
        description="Events mentioning any of these are dropped (checked first).",
    )


class CalendarSource(BaseModel):
    """
    One external (Google) calendar whose events are imported as static events.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Display name; also used as the event id prefix.")
    contact_email: str | None = Field(None, alias="contactEmail")
    calendar_id: str = Field(..., alias="calendarId", description="Google Calendar ID.")
    color: str | None = None
    website: str | None = None
    visible: bool | None = Field(
        None,
        description="None means visible; an explicit false hides imported events by default.",
    )
    event_filter: EventFilter = Field(default_factory=EventFilter, alias="eventFilter")


class SourcesConfig(BaseModel):
    sources: list[CalendarSource] = Field(default_factory=list)
