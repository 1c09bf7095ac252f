from datetime import date as date_type
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response

from schedule_engine.api.dependencies.schedule import get_engine
from schedule_engine.core.config import get_settings
from schedule_engine.schemas.event import Override
from schedule_engine.schemas.occurrence import MonthGrid, Occurrence, UpcomingOccurrences
from schedule_engine.services.engine import ScheduleEngine
from schedule_engine.services.ics_export import build_occurrence_ics, ics_filename

router = APIRouter(prefix="/calendar", tags=["Calendar"])

_SHOW_HIDDEN = Query(
    default=None,
    description=(
        "Include events marked `visible: false`. "
        "If omitted, the server default (SHOW_HIDDEN_DEFAULT) applies."
    ),
)


@router.get(
    "/day/{day}",
    response_model=list[Occurrence],
    summary="Occurrences on a single date",
    description=(
        "Return every visible occurrence on the given date, with per-date "
        "overrides applied and cancelled occurrences removed.\n\n"
        "Order follows the schedule document's event order."
    ),
)
async def get_day(
    day: date_type = Path(..., description="Calendar date (YYYY-MM-DD)."),
    show_hidden: bool | None = _SHOW_HIDDEN,
    engine: ScheduleEngine = Depends(get_engine),
) -> list[Occurrence]:
    return engine.get_events_for_date(day, show_hidden=show_hidden)


@router.get(
    "/range",
    response_model=list[Occurrence],
    summary="Occurrences within a date range",
    description=(
        "Return all occurrences between `start_date` and `end_date` (both "
        "**inclusive**), sorted by date and deduplicated per event and date.\n\n"
        "The span is limited by MAX_RANGE_DAYS."
    ),
    responses={
        422: {"description": "Invalid dates, end before start, or range too large."},
    },
)
async def get_range(
    start_date: date_type = Query(..., description="First date (inclusive), YYYY-MM-DD."),
    end_date: date_type = Query(..., description="Last date (inclusive), YYYY-MM-DD."),
    show_hidden: bool | None = _SHOW_HIDDEN,
    engine: ScheduleEngine = Depends(get_engine),
) -> list[Occurrence]:
    if end_date < start_date:
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail="end_date must be greater than or equal to start_date",
        )

    max_days = get_settings().MAX_RANGE_DAYS
    if (end_date - start_date).days + 1 > max_days:
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail=f"Date range may span at most {max_days} days.",
        )

    return engine.enumerate_occurrences(start_date, end_date, show_hidden=show_hidden)


@router.get(
    "/month/{year}/{month}",
    response_model=MonthGrid,
    summary="Six-week grid for a month view",
    responses={422: {"description": "Invalid month, or a grid outside the supported date range."}},
)
async def get_month(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=1, le=12),
    show_hidden: bool | None = _SHOW_HIDDEN,
    engine: ScheduleEngine = Depends(get_engine),
) -> MonthGrid:
    """
    42 days starting on the Sunday on or before the 1st, each with its
    occurrences; days of adjacent months are flagged `in_month=false`.
    """
    try:
        return engine.month_grid(year, month, show_hidden=show_hidden)
    except OverflowError as exc:
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail=f"The grid for {year}-{month:02d} falls outside the supported date range.",
        ) from exc


@router.get(
    "/upcoming",
    response_model=UpcomingOccurrences,
    summary="List view: past and upcoming occurrences around today",
    description=(
        "Enumerate the month-aligned window of LIST_WINDOW_MONTHS months "
        "before and after `today`, split into `past` (before today) and "
        "`upcoming` (today onwards)."
    ),
)
async def get_upcoming(
    today: date_type | None = Query(
        default=None,
        description="Reference date; defaults to the server's local date.",
    ),
    show_hidden: bool | None = _SHOW_HIDDEN,
    engine: ScheduleEngine = Depends(get_engine),
) -> UpcomingOccurrences:
    reference = today or date_type.today()
    try:
        return engine.upcoming(
            reference,
            months=get_settings().LIST_WINDOW_MONTHS,
            show_hidden=show_hidden,
        )
    except (OverflowError, ValueError) as exc:
        # relativedelta reports an out-of-range year as ValueError.
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail=f"The list window around {reference.isoformat()} falls outside the supported date range.",
        ) from exc


@router.get(
    "/overrides/{event_id}/{day}",
    response_model=Override,
    summary="Override for an event on a date",
    responses={404: {"description": "No override exists for this event and date."}},
)
async def get_override(
    event_id: str,
    day: date_type,
    engine: ScheduleEngine = Depends(get_engine),
) -> Override:
    override = engine.get_override(event_id, day.isoformat())
    if override is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"No override for event '{event_id}' on {day.isoformat()}.",
        )
    return override


@router.get(
    "/export/{event_id}/{day}",
    summary="Export one occurrence as an iCalendar file",
    response_class=Response,
    responses={
        200: {"content": {"text/calendar": {}}},
        404: {"description": "The event has no (visible) occurrence on this date."},
    },
)
async def export_occurrence(
    event_id: str,
    day: date_type,
    show_hidden: bool | None = _SHOW_HIDDEN,
    engine: ScheduleEngine = Depends(get_engine),
) -> Response:
    occurrence = next(
        (
            occ
            for occ in engine.get_events_for_date(day, show_hidden=show_hidden)
            if occ.event_id == event_id
        ),
        None,
    )
    if occurrence is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Event '{event_id}' does not occur on {day.isoformat()}.",
        )

    body = build_occurrence_ics(occurrence, product_id=get_settings().ICS_PRODUCT_ID)
    return Response(
        content=body,
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="{ics_filename(occurrence)}"'},
    )
