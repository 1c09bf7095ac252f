from datetime import date

from pydantic import BaseModel, Field


class SourceSyncResult(BaseModel):
    """
    Outcome of importing a single external calendar.
    """

    name: str = Field(..., examples=["Makerspace"])
    fetched: int = Field(0, description="Events returned by the Google Calendar API.")
    included: int = Field(0, description="Events left after cancellation/keyword filtering.")
    normalized: int = Field(0, description="Events converted into static schedule events.")
    error: str | None = Field(None, description="Set when the source failed and was skipped.")


class SyncSummary(BaseModel):
    """
    Summary payload returned by the /internal/sync endpoint.
    """

    window_start: date = Field(..., description="First date of the fetched window.")
    window_end: date = Field(..., description="Last date of the fetched window (inclusive).")
    output_path: str = Field(..., description="Where the merged document was written.")
    total_events: int = Field(..., description="Number of events in the merged document.")
    sources: list[SourceSyncResult] = Field(default_factory=list)
