"""Bulk appointment slot generation from weekly schedule preferences.

The generator only proposes slots. Whether a slot is actually free is decided
afterwards against existing appointments (see `babyspa.scheduling.conflicts`).
"""

import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

from babyspa.scheduling.business_hours import (
    DEFAULT_BUSINESS_HOURS,
    BusinessHours,
    calculate_end_time,
    is_within_business_hours,
    minutes_to_time,
    time_to_minutes,
)
from babyspa.scheduling.preferences import SchedulePreference

logger = logging.getLogger(__name__)

AVAILABLE_TIME_STEP_MINUTES = 30

# Often-busy start times, used as a hint before the real availability check.
POPULAR_TIMES = frozenset({"09:00", "10:00", "15:00", "16:00"})


@dataclass
class GeneratedSlot:
    date: date
    start_time: str
    end_time: str
    day_of_week: int  # 0=Sunday, 6=Saturday
    preference_index: int  # Index into the Sunday-last sorted preferences
    has_conflict: bool = False
    conflict_count: int = 0


@dataclass
class BulkSchedulingInput:
    start_date: date
    preferences: list[SchedulePreference]
    count: int
    package_duration: int  # minutes
    exclude_dates: Iterable[str] = field(default_factory=tuple)  # ISO "YYYY-MM-DD"


@dataclass
class ScheduleSpan:
    weeks: int
    start_date: date | None
    end_date: date | None


def day_of_week(d: date) -> int:
    """Weekday with 0=Sunday, matching the stored preference format."""
    return d.isoweekday() % 7


def _sunday_last(pref: SchedulePreference) -> int:
    return 7 if pref.day_of_week == 0 else pref.day_of_week


def _one_year_after(d: date) -> date:
    try:
        return d.replace(year=d.year + 1)
    except ValueError:
        # Feb 29 → Mar 1 of the following year
        return date(d.year + 1, 3, 1)


def generate_bulk_schedule(
    params: BulkSchedulingInput,
    business_hours: BusinessHours | None = None,
) -> list[GeneratedSlot]:
    """Walk forward day by day from `start_date` and emit preferred slots.

    Stops after `count` slots or one year past `start_date`, whichever comes
    first. A short result means the preferences could not fill `count` in
    that horizon; it is not an error.
    """
    if not params.preferences or params.count <= 0:
        return []

    sorted_prefs = sorted(params.preferences, key=_sunday_last)
    excluded = set(params.exclude_dates)
    max_date = _one_year_after(params.start_date)

    slots: list[GeneratedSlot] = []
    current = params.start_date

    while len(slots) < params.count and current < max_date:
        weekday = day_of_week(current)
        pref_index = next(
            (i for i, p in enumerate(sorted_prefs) if p.day_of_week == weekday), None
        )

        if pref_index is not None:
            pref = sorted_prefs[pref_index]
            if (
                is_within_business_hours(weekday, pref.time, business_hours)
                and current.isoformat() not in excluded
            ):
                try:
                    end_time = calculate_end_time(pref.time, params.package_duration)
                except ValueError:
                    logger.debug(
                        "Skipping %s %s: %d min session runs past midnight",
                        current,
                        pref.time,
                        params.package_duration,
                    )
                else:
                    slots.append(
                        GeneratedSlot(
                            date=current,
                            start_time=pref.time,
                            end_time=end_time,
                            day_of_week=weekday,
                            preference_index=pref_index,
                        )
                    )

        current += timedelta(days=1)

    if len(slots) < params.count:
        logger.info(
            "Generated %d of %d requested slots within one year of %s",
            len(slots),
            params.count,
            params.start_date,
        )
    return slots


def get_available_times_for_day(
    day: int, business_hours: BusinessHours | None = None
) -> list[str]:
    """Bookable start times for a weekday in 30-minute steps, breaks excluded."""
    table = DEFAULT_BUSINESS_HOURS if business_hours is None else business_hours
    hours = table.get(day)
    if hours is None:
        return []

    times = []
    for minutes in range(
        time_to_minutes(hours.start), time_to_minutes(hours.end), AVAILABLE_TIME_STEP_MINUTES
    ):
        candidate = minutes_to_time(minutes)
        if is_within_business_hours(day, candidate, table):
            times.append(candidate)
    return times


def might_have_conflicts(
    slot: GeneratedSlot,
    is_busy: Callable[[GeneratedSlot], bool] | None = None,
) -> bool:
    """Cheap pre-check hint. Not authoritative; pass `is_busy` to override."""
    if is_busy is not None:
        return is_busy(slot)
    return slot.start_time in POPULAR_TIMES


def calculate_schedule_span(slots: list[GeneratedSlot]) -> ScheduleSpan:
    """Calendar weeks between the first and last slot of a sorted list."""
    if not slots:
        return ScheduleSpan(weeks=0, start_date=None, end_date=None)

    start_date = slots[0].date
    end_date = slots[-1].date
    diff_days = (end_date - start_date).days
    return ScheduleSpan(weeks=math.ceil(diff_days / 7), start_date=start_date, end_date=end_date)
