"""Business-hours table and HH:MM minute arithmetic.

Days are numbered 0=Sunday … 6=Saturday throughout the scheduling package.
Times are venue wall-clock "HH:MM" strings; no timezone handling happens here.
"""

from dataclasses import dataclass, field

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class TimeWindow:
    """Half-open window [start, end) of wall-clock times."""

    start: str
    end: str

    def contains(self, time: str) -> bool:
        minutes = time_to_minutes(time)
        return time_to_minutes(self.start) <= minutes < time_to_minutes(self.end)


@dataclass(frozen=True)
class DayHours:
    start: str
    end: str
    breaks: tuple[TimeWindow, ...] = field(default_factory=tuple)


# A missing or None entry means the venue is closed that day.
BusinessHours = dict[int, DayHours | None]

_LUNCH_BREAK = (TimeWindow("12:00", "14:30"),)

DEFAULT_BUSINESS_HOURS: BusinessHours = {
    0: None,
    1: DayHours("09:00", "17:00"),
    2: DayHours("09:00", "18:30", _LUNCH_BREAK),
    3: DayHours("09:00", "18:30", _LUNCH_BREAK),
    4: DayHours("09:00", "18:30", _LUNCH_BREAK),
    5: DayHours("09:00", "18:30", _LUNCH_BREAK),
    6: DayHours("09:00", "18:30", _LUNCH_BREAK),
}


def time_to_minutes(time: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hour, minute = time.split(":")
    return int(hour) * 60 + int(minute)


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to zero-padded "HH:MM".

    Raises:
        ValueError: If `minutes` is outside a single day.
    """
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"{minutes} minutes is outside a single day")
    hour, minute = divmod(minutes, 60)
    return f"{hour:02d}:{minute:02d}"


def calculate_end_time(start_time: str, duration_minutes: int) -> str:
    """Add a duration to a start time.

    The end must fall on the same day, at 23:59 at the latest.

    Raises:
        ValueError: If the session would run past the end of the day.
    """
    end_minutes = time_to_minutes(start_time) + duration_minutes
    if end_minutes >= MINUTES_PER_DAY:
        raise ValueError(
            f"Session starting at {start_time} for {duration_minutes} min ends past midnight"
        )
    return minutes_to_time(end_minutes)


def is_within_business_hours(
    day_of_week: int,
    time: str,
    business_hours: BusinessHours | None = None,
) -> bool:
    """Check whether `time` is a bookable start time on `day_of_week`.

    Open from `start` (inclusive) to `end` (exclusive), minus any break window.
    """
    table = DEFAULT_BUSINESS_HOURS if business_hours is None else business_hours
    hours = table.get(day_of_week)
    if hours is None:
        return False

    try:
        time_to_minutes(time)
    except ValueError:
        return False

    if not TimeWindow(hours.start, hours.end).contains(time):
        return False

    return not any(window.contains(time) for window in hours.breaks)
