import logging
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from schedule_engine.api.dependencies.internal_auth import require_internal_api_key
from schedule_engine.api.dependencies.schedule import get_store
from schedule_engine.schemas.sync import SyncSummary
from schedule_engine.services.schedule_store import ScheduleLoadError, ScheduleStore
from schedule_engine.services.sync import CalendarSyncError, run_calendar_sync

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", tags=["Internal"])


class ReloadResponse(BaseModel):
    source: str = Field(..., description="Location the schedule was loaded from.")
    events: int = Field(..., description="Number of events in the loaded document.")
    overrides: int = Field(..., description="Number of overrides in the loaded document.")


async def _reload(store: ScheduleStore) -> ReloadResponse:
    try:
        document = await store.load()
    except ScheduleLoadError as exc:
        logger.error("Schedule reload failed: %s", exc)
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=str(exc)) from exc

    return ReloadResponse(
        source=store.loaded_from or "",
        events=len(document.events),
        overrides=len(document.overrides),
    )


@router.post(
    "/reload",
    response_model=ReloadResponse,
    dependencies=[Depends(require_internal_api_key("reload"))],
    status_code=HTTPStatus.OK,
    summary="Reload the schedule document",
    description=(
        "Re-read the schedule document from SCHEDULE_SOURCES (first working "
        "source wins). On failure the previously loaded document stays active."
    ),
    responses={
        401: {"description": "Missing or invalid internal API key (if configured)."},
        502: {"description": "No source produced a usable schedule document."},
    },
)
async def reload_schedule(store: ScheduleStore = Depends(get_store)) -> ReloadResponse:
    return await _reload(store)


@router.post(
    "/sync",
    response_model=SyncSummary,
    dependencies=[Depends(require_internal_api_key("sync"))],
    status_code=HTTPStatus.OK,
    summary="Import external calendars and reload",
    description=(
        "Fetch the configured Google calendars, merge their events into the "
        "materialized schedule document and reload it.\n\n"
        "Intended to be called from a cron job or scheduler."
    ),
    responses={
        401: {"description": "Missing or invalid internal API key (if configured)."},
        500: {"description": "Sources file unreadable or output not writable."},
    },
)
async def trigger_sync(store: ScheduleStore = Depends(get_store)) -> SyncSummary:
    try:
        summary = await run_calendar_sync()
    except CalendarSyncError as exc:
        logger.error("Calendar sync failed: %s", exc)
        raise HTTPException(status_code=HTTPStatus.INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    await _reload(store)
    return summary
