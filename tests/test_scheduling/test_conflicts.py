"""Tests for appointment conflict queries."""

from datetime import date

from babyspa.models.appointment import Appointment
from babyspa.models.baby import Baby
from babyspa.scheduling.bulk import GeneratedSlot
from babyspa.scheduling.conflicts import (
    annotate_conflicts,
    baby_has_appointment_on,
    count_appointments_at,
    find_conflicts,
)
from tests.conftest import test_session

DAY = date(2024, 3, 5)


async def _seed(statuses: list[str], time: str = "10:00") -> int:
    async with test_session() as session:
        baby = Baby(name="Lucas")
        session.add(baby)
        await session.flush()
        for status in statuses:
            session.add(
                Appointment(
                    baby_id=baby.id, date=DAY, start_time=time, end_time="11:00", status=status
                )
            )
        await session.commit()
        return baby.id


class TestCountAppointmentsAt:
    async def test_counts_only_occupying_statuses(self) -> None:
        await _seed(["SCHEDULED", "IN_PROGRESS", "CANCELLED", "COMPLETED", "PENDING_PAYMENT"])
        async with test_session() as session:
            assert await count_appointments_at(session, DAY, "10:00") == 2

    async def test_other_time(self) -> None:
        await _seed(["SCHEDULED"])
        async with test_session() as session:
            assert await count_appointments_at(session, DAY, "11:00") == 0


class TestFindConflicts:
    async def test_reports_capacity(self) -> None:
        await _seed(["SCHEDULED", "SCHEDULED"])
        async with test_session() as session:
            conflicts = await find_conflicts(
                session, [DAY, date(2024, 3, 6)], ["10:00", "15:00"], max_per_slot=5
            )
        assert len(conflicts) == 1
        assert conflicts[0].date == DAY
        assert conflicts[0].time == "10:00"
        assert conflicts[0].count == 2
        assert conflicts[0].available == 3

    async def test_available_never_negative(self) -> None:
        await _seed(["SCHEDULED"] * 3)
        async with test_session() as session:
            conflicts = await find_conflicts(session, [DAY], ["10:00"], max_per_slot=2)
        assert conflicts[0].available == 0


async def test_annotate_conflicts() -> None:
    await _seed(["SCHEDULED"])
    slots = [
        GeneratedSlot(date=DAY, start_time="10:00", end_time="11:00", day_of_week=2, preference_index=0),
        GeneratedSlot(date=DAY, start_time="15:00", end_time="16:00", day_of_week=2, preference_index=0),
    ]
    async with test_session() as session:
        await annotate_conflicts(session, slots)
    assert slots[0].has_conflict is True
    assert slots[0].conflict_count == 1
    assert slots[1].has_conflict is False
    assert slots[1].conflict_count == 0


async def test_baby_has_appointment_on() -> None:
    baby_id = await _seed(["PENDING_PAYMENT"])
    async with test_session() as session:
        assert await baby_has_appointment_on(session, baby_id, DAY) is True
        assert await baby_has_appointment_on(session, baby_id, date(2024, 3, 6)) is False
        assert await baby_has_appointment_on(session, baby_id + 1, DAY) is False


async def test_cancelled_appointment_does_not_block_baby() -> None:
    baby_id = await _seed(["CANCELLED"])
    async with test_session() as session:
        assert await baby_has_appointment_on(session, baby_id, DAY) is False
