"""Database queries that check proposed slots against existing appointments."""

from dataclasses import dataclass
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from babyspa.models.appointment import BOOKED_STATUSES, SLOT_OCCUPYING_STATUSES, Appointment
from babyspa.scheduling.bulk import GeneratedSlot


@dataclass
class ConflictInfo:
    date: date
    time: str
    count: int
    available: int


async def count_appointments_at(session: AsyncSession, slot_date: date, start_time: str) -> int:
    """Number of appointments currently holding a place at this date/time."""
    stmt = select(func.count(Appointment.id)).where(
        Appointment.date == slot_date,
        Appointment.start_time == start_time,
        Appointment.status.in_(SLOT_OCCUPYING_STATUSES),
    )
    result = await session.execute(stmt)
    return result.scalar_one()


async def find_conflicts(
    session: AsyncSession,
    dates: list[date],
    times: list[str],
    max_per_slot: int,
) -> list[ConflictInfo]:
    """Report every date/time combination that already has appointments."""
    conflicts = []
    for slot_date in dates:
        for time in times:
            count = await count_appointments_at(session, slot_date, time)
            if count > 0:
                conflicts.append(
                    ConflictInfo(
                        date=slot_date,
                        time=time,
                        count=count,
                        available=max(0, max_per_slot - count),
                    )
                )
    return conflicts


async def annotate_conflicts(session: AsyncSession, slots: list[GeneratedSlot]) -> list[GeneratedSlot]:
    """Fill `has_conflict`/`conflict_count` on generated slots in place."""
    for slot in slots:
        slot.conflict_count = await count_appointments_at(session, slot.date, slot.start_time)
        slot.has_conflict = slot.conflict_count > 0
    return slots


async def baby_has_appointment_on(session: AsyncSession, baby_id: int, slot_date: date) -> bool:
    stmt = select(Appointment.id).where(
        Appointment.baby_id == baby_id,
        Appointment.date == slot_date,
        Appointment.status.in_(BOOKED_STATUSES),
    )
    result = await session.execute(stmt.limit(1))
    return result.scalar_one_or_none() is not None
