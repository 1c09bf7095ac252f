import logging

from fastapi import FastAPI

from schedule_engine.api.routes import calendar, health, internal
from schedule_engine.core.config import get_settings
from schedule_engine.core.logging_config import configure_logging
from schedule_engine.services.schedule_store import ScheduleLoadError, get_schedule_store

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Application factory for the Schedule Engine service.
    """
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Resolves a declarative calendar schedule (static events, recurring\n"
            "events and per-date overrides) into the concrete occurrences visible\n"
            "on a date or within a date range, and exports them as iCalendar."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(calendar.router)
    app.include_router(internal.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        try:
            await get_schedule_store().load()
        except ScheduleLoadError as exc:
            # Stay up: /health reports degraded and queries answer 503
            # until /internal/reload succeeds.
            logger.error("Schedule document not loaded at startup: %s", exc)

    return app


app = create_app()
