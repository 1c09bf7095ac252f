from fastapi import Depends, HTTPException, status

from schedule_engine.services.engine import ScheduleEngine
from schedule_engine.services.schedule_store import (
    ScheduleNotLoadedError,
    ScheduleStore,
    get_schedule_store,
)


def get_store() -> ScheduleStore:
    """
    FastAPI dependency returning the process-wide schedule store.

    Tests override this via `app.dependency_overrides`.
    """
    return get_schedule_store()


def get_engine(store: ScheduleStore = Depends(get_store)) -> ScheduleEngine:
    """
    FastAPI dependency providing a query engine over the loaded document.

    Answers 503 while no schedule document is loaded.
    """
    try:
        return store.engine()
    except ScheduleNotLoadedError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
