from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Environments where /internal endpoints may run without an API key.
LOCAL_ENVIRONMENTS = ("local", "test")


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables (or a local `.env` file)
    at runtime and cover:
    - where the schedule document is loaded from
    - list/range window defaults for the calendar API
    - the internal API key
    - the Google Calendar sync pipeline
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Schedule Engine"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")
    LOG_LEVEL: str = Field("INFO", description="Root log level (DEBUG/INFO/WARNING/ERROR).")

    # --- Schedule document ---
    SCHEDULE_SOURCES: str = Field(
        "events-materialized.json,events.json",
        description=(
            "Comma-separated list of schedule document locations (file paths or "
            "http(s) URLs). The first one that loads successfully is used."
        ),
    )
    SHOW_HIDDEN_DEFAULT: bool = Field(
        default=False,
        description="Whether events with visible=false are shown when the caller does not say.",
    )
    LIST_WINDOW_MONTHS: int = Field(
        default=12,
        description="Months before/after today covered by the upcoming list view.",
    )
    MAX_RANGE_DAYS: int = Field(
        default=800,
        description="Largest date range (in days) accepted by /calendar/range.",
    )

    INTERNAL_API_KEY: str | None = Field(
        default=None,
        description="API key required for hitting /internal endpoints",
    )

    # --- Google Calendar sync ---
    GOOGLE_API_KEY: str | None = Field(
        default=None,
        description="API key used for reading public Google calendars.",
    )
    GOOGLE_CALENDAR_BASE_URL: str = Field(
        "https://www.googleapis.com/calendar/v3",
        description="Base URL of the Google Calendar v3 API.",
    )
    SYNC_SOURCES_PATH: str = Field(
        "calendar-sources.json",
        description="JSON file listing the external calendars to import.",
    )
    SYNC_BASE_EVENTS_PATH: str = Field(
        "events.json",
        description="Hand-maintained schedule document the imported events are merged into.",
    )
    SYNC_OUTPUT_PATH: str = Field(
        "events-materialized.json",
        description="Destination of the merged (materialized) schedule document.",
    )
    SYNC_MONTHS_BACK: int = Field(
        default=12,
        description="Whole months of history fetched per source (matches LIST_WINDOW_MONTHS).",
    )
    SYNC_MONTHS_AHEAD: int = Field(default=12, description="Whole months ahead fetched per source.")

    ICS_PRODUCT_ID: str = Field(
        "-//Schedule Engine//Calendar Export//EN",
        description="PRODID written into exported iCalendar files.",
    )

    @property
    def is_local_env(self) -> bool:
        return (self.APP_ENV or "local").lower() in LOCAL_ENVIRONMENTS

    @property
    def schedule_sources(self) -> list[str]:
        return [s.strip() for s in self.SCHEDULE_SOURCES.split(",") if s.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
