from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from schedule_engine.api.dependencies.schedule import get_store
from schedule_engine.core.config import get_settings
from schedule_engine.services.schedule_store import ScheduleStore


router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """
    Response schema for the health check endpoint.
    """

    status: str = Field(
        ...,
        description="Overall health status of the service.",
        examples=["ok"],
    )
    app_name: str = Field(
        ...,
        description="Human-friendly name of the running application.",
        examples=["Schedule Engine"],
    )
    environment: str = Field(
        ...,
        description="Current deployment environment (local/dev/stage/prod).",
        examples=["local"],
    )
    schedule_loaded: bool = Field(
        ...,
        description="Whether a schedule document is loaded and queries can be answered.",
    )
    schedule_source: str | None = Field(
        None,
        description="Location the current schedule document was loaded from.",
        examples=["events-materialized.json"],
    )
    timestamp_utc: datetime = Field(
        ...,
        description="Server-side timestamp (UTC) at which this health check was generated.",
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check for the schedule engine service",
    description=(
        "Lightweight endpoint to verify that the backend is up and responding.\n\n"
        "`status` is `ok` when a schedule document is loaded and `degraded` "
        "while calendar queries would be refused."
    ),
)
async def health_check(store: ScheduleStore = Depends(get_store)) -> HealthResponse:
    """
    Returns the current health status of the service.
    """
    settings = get_settings()
    return HealthResponse(
        status="ok" if store.is_loaded else "degraded",
        app_name=settings.APP_NAME,
        environment=settings.APP_ENV,
        schedule_loaded=store.is_loaded,
        schedule_source=store.loaded_from,
        timestamp_utc=datetime.now(tz=timezone.utc),
    )
