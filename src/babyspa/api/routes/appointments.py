"""Appointment API routes — slot conflict checks and bulk booking."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from babyspa.config import get_settings
from babyspa.database import get_db
from babyspa.models.appointment import BOOKED_STATUSES, Appointment
from babyspa.models.package import PackagePurchase
from babyspa.scheduling.conflicts import (
    baby_has_appointment_on,
    count_appointments_at,
    find_conflicts,
)
from babyspa.schemas.appointment import (
    AppointmentRead,
    BulkAppointmentCreate,
    BulkAppointmentResult,
    BulkConflictRead,
    ConflictCheckResponse,
    ConflictRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["appointments"])


def _split_param(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@router.get("/check-conflicts", response_model=ConflictCheckResponse)
async def check_conflicts(
    dates: str | None = None,
    times: str | None = None,
    session: AsyncSession = Depends(get_db),
) -> ConflictCheckResponse:
    """Report existing bookings for every date × time combination.

    `dates` and `times` are comma-separated (YYYY-MM-DD, HH:MM). Unparseable
    dates are ignored.
    """
    if not dates or not times:
        raise HTTPException(status_code=400, detail="Missing dates or times parameter")

    parsed_dates = []
    for raw in _split_param(dates):
        try:
            parsed_dates.append(date.fromisoformat(raw))
        except ValueError:
            continue

    conflicts = await find_conflicts(
        session,
        parsed_dates,
        _split_param(times),
        max_per_slot=get_settings().max_appointments_per_slot,
    )
    return ConflictCheckResponse(conflicts=[ConflictRead.model_validate(c) for c in conflicts])


@router.post("/bulk", response_model=BulkAppointmentResult, status_code=201)
async def create_bulk_appointments(
    body: BulkAppointmentCreate,
    session: AsyncSession = Depends(get_db),
) -> BulkAppointmentResult:
    """Book several appointments against one package purchase.

    Days on which the baby is already booked are skipped and reported.
    Slots that already hold other babies are booked but reported, so staff
    can see which sessions will be shared.
    """
    if not body.appointments:
        raise HTTPException(status_code=400, detail="MISSING_REQUIRED_FIELDS")

    purchase = await session.get(PackagePurchase, body.package_purchase_id)
    if purchase is None:
        raise HTTPException(status_code=404, detail="PACKAGE_PURCHASE_NOT_FOUND")
    if purchase.baby_id != body.baby_id:
        raise HTTPException(status_code=400, detail="PACKAGE_NOT_FOR_THIS_BABY")

    already_booked = await session.execute(
        select(func.count(Appointment.id)).where(
            Appointment.package_purchase_id == purchase.id,
            Appointment.status.in_(BOOKED_STATUSES),
        )
    )
    available = purchase.remaining_sessions - already_booked.scalar_one()
    if len(body.appointments) > available:
        logger.info(
            "Rejected bulk booking for purchase %s: requested %d, available %d",
            purchase.id,
            len(body.appointments),
            available,
        )
        raise HTTPException(status_code=400, detail="NO_SESSIONS_REMAINING")

    max_per_slot = get_settings().max_appointments_per_slot
    created: list[Appointment] = []
    conflicts: list[BulkConflictRead] = []

    for item in body.appointments:
        existing_count = await count_appointments_at(session, item.date, item.start_time)

        if await baby_has_appointment_on(session, body.baby_id, item.date):
            conflicts.append(
                BulkConflictRead(
                    date=item.date, time=item.start_time, reason="BABY_ALREADY_HAS_APPOINTMENT"
                )
            )
            continue

        appointment = Appointment(
            baby_id=body.baby_id,
            package_purchase_id=purchase.id,
            date=item.date,
            start_time=item.start_time,
            end_time=item.end_time,
            status="SCHEDULED",
        )
        session.add(appointment)
        # Flush so a later item on the same day sees this booking
        await session.flush()
        created.append(appointment)

        if 0 < existing_count < max_per_slot:
            conflicts.append(
                BulkConflictRead(date=item.date, time=item.start_time, existing_count=existing_count)
            )

    await session.commit()
    for appointment in created:
        await session.refresh(appointment)

    logger.info(
        "Bulk-booked %d of %d appointment(s) for purchase %s (%d conflict(s))",
        len(created),
        len(body.appointments),
        purchase.id,
        len(conflicts),
    )
    return BulkAppointmentResult(
        created=len(created),
        appointments=[AppointmentRead.model_validate(a) for a in created],
        conflicts=conflicts,
    )
