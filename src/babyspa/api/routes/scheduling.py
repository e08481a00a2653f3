"""Scheduling API routes — preview bulk slots and list bookable times."""

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from babyspa.api.routes.packages import get_purchase_or_404
from babyspa.config import get_settings
from babyspa.database import get_db
from babyspa.models.appointment import BOOKED_STATUSES, Appointment
from babyspa.scheduling.bulk import (
    BulkSchedulingInput,
    GeneratedSlot,
    calculate_schedule_span,
    generate_bulk_schedule,
    get_available_times_for_day,
    might_have_conflicts,
)
from babyspa.scheduling.conflicts import annotate_conflicts
from babyspa.scheduling.preferences import (
    SchedulePreference,
    format_preferences_text,
    get_day_name,
    parse_schedule_preferences,
)
from babyspa.schemas.scheduling import (
    AvailableTimesRead,
    GeneratedSlotRead,
    SchedulePreviewRequest,
    SchedulePreviewResponse,
    ScheduleSpanRead,
)

router = APIRouter(prefix="/api/scheduling", tags=["scheduling"])


async def _build_preview(
    session: AsyncSession,
    params: BulkSchedulingInput,
    locale: str,
) -> SchedulePreviewResponse:
    slots: list[GeneratedSlot] = generate_bulk_schedule(params)
    await annotate_conflicts(session, slots)
    return SchedulePreviewResponse(
        requested=params.count,
        generated=len(slots),
        is_short=len(slots) < params.count,
        summary=format_preferences_text(params.preferences, locale),
        span=ScheduleSpanRead.model_validate(calculate_schedule_span(slots)),
        slots=[
            GeneratedSlotRead(**asdict(slot), likely_busy=might_have_conflicts(slot))
            for slot in slots
        ],
    )


@router.post("/preview", response_model=SchedulePreviewResponse)
async def preview_schedule(
    body: SchedulePreviewRequest,
    locale: str | None = None,
    session: AsyncSession = Depends(get_db),
) -> SchedulePreviewResponse:
    """Propose slots for the given weekly preferences and flag booked ones.

    Nothing is created. `is_short` is true when the preferences cannot
    produce `count` slots within a year.
    """
    params = BulkSchedulingInput(
        start_date=body.start_date,
        preferences=[
            SchedulePreference(day_of_week=p.day_of_week, time=p.time) for p in body.preferences
        ],
        count=body.count,
        package_duration=body.package_duration,
        exclude_dates=[d.isoformat() for d in body.exclude_dates],
    )
    return await _build_preview(session, params, locale or get_settings().default_locale)


@router.get("/package-purchases/{purchase_id}/preview", response_model=SchedulePreviewResponse)
async def preview_purchase_schedule(
    purchase_id: int,
    start_date: date | None = None,
    locale: str | None = None,
    session: AsyncSession = Depends(get_db),
) -> SchedulePreviewResponse:
    """Preview slots for a purchase's stored preferences.

    Generates one slot per session that is neither used nor already booked.
    """
    purchase = await get_purchase_or_404(session, purchase_id)

    preferences = parse_schedule_preferences(purchase.schedule_preferences)
    if not preferences:
        raise HTTPException(status_code=409, detail="NO_SCHEDULE_PREFERENCES")

    booked = await session.execute(
        select(func.count(Appointment.id)).where(
            Appointment.package_purchase_id == purchase.id,
            Appointment.status.in_(BOOKED_STATUSES),
        )
    )
    params = BulkSchedulingInput(
        start_date=start_date or date.today(),
        preferences=preferences,
        count=purchase.remaining_sessions - booked.scalar_one(),
        package_duration=purchase.session_duration_minutes,
    )
    return await _build_preview(session, params, locale or get_settings().default_locale)


@router.get("/available-times/{day_of_week}", response_model=AvailableTimesRead)
async def get_available_times(
    day_of_week: int = Path(ge=0, le=6),
    locale: str | None = None,
) -> AvailableTimesRead:
    """Bookable start times for a weekday (0=Sunday), 30 minutes apart."""
    return AvailableTimesRead(
        day_of_week=day_of_week,
        day_name=get_day_name(day_of_week, locale or get_settings().default_locale),
        times=get_available_times_for_day(day_of_week),
    )
