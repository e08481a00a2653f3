"""Weekly schedule preferences: value type, JSON storage format, display helpers.

Preferences are persisted as a JSON array of ``{"dayOfWeek": int, "time": "HH:MM"}``
objects on the package purchase row.
"""

import json
import logging
import re
from dataclasses import dataclass, field

from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError

from babyspa.scheduling.business_hours import BusinessHours, is_within_business_hours

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")

DAY_NAMES: dict[str, list[str]] = {
    "es": ["Domingo", "Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado"],
    "pt-BR": ["Domingo", "Segunda", "Terça", "Quarta", "Quinta", "Sexta", "Sábado"],
}
DEFAULT_LOCALE = "es"

# Offered by the preference selector; every entry is legal Tuesday–Saturday.
DEFAULT_AVAILABLE_TIMES = [
    "09:00",
    "09:30",
    "10:00",
    "10:30",
    "11:00",
    "11:30",
    "14:30",
    "15:00",
    "15:30",
    "16:00",
    "16:30",
    "17:00",
    "17:30",
    "18:00",
]


@dataclass(frozen=True)
class SchedulePreference:
    """A recurring weekly request: this weekday (0=Sunday) at this time."""

    day_of_week: int
    time: str

    def to_dict(self) -> dict[str, int | str]:
        return {"dayOfWeek": self.day_of_week, "time": self.time}


@dataclass
class PreferenceParseResult:
    """Outcome of parsing stored preferences.

    `error` is set when the payload itself is unreadable; `dropped` counts
    individual entries that were discarded.
    """

    preferences: list[SchedulePreference] = field(default_factory=list)
    dropped: int = 0
    error: str | None = None

    @property
    def is_clean(self) -> bool:
        return self.error is None and self.dropped == 0


class StoredPreference(BaseModel):
    """One entry of the persisted preferences array."""

    # Strict: a stored `true` or `"2"` is not a weekday
    day_of_week: StrictInt = Field(ge=0, le=6, alias="dayOfWeek")
    time: StrictStr


def parse_schedule_preferences_result(payload: str | None) -> PreferenceParseResult:
    """Parse stored preferences, reporting what was wrong with the payload."""
    if not payload:
        return PreferenceParseResult()

    try:
        data = json.loads(payload)
    except (ValueError, TypeError, RecursionError) as e:
        return PreferenceParseResult(error=f"Invalid JSON: {e}")

    if not isinstance(data, list):
        return PreferenceParseResult(error=f"Expected a JSON array, got {type(data).__name__}")

    result = PreferenceParseResult()
    for raw in data:
        try:
            entry = StoredPreference.model_validate(raw)
        except ValidationError:
            result.dropped += 1
            continue
        result.preferences.append(
            SchedulePreference(day_of_week=entry.day_of_week, time=entry.time)
        )

    if result.dropped:
        logger.debug("Dropped %d malformed schedule preference(s)", result.dropped)
    return result


def parse_schedule_preferences(payload: str | None) -> list[SchedulePreference]:
    """Parse stored preferences. Never raises; malformed input yields ``[]``."""
    return parse_schedule_preferences_result(payload).preferences


def stringify_schedule_preferences(preferences: list[SchedulePreference]) -> str:
    return json.dumps([p.to_dict() for p in preferences], separators=(",", ":"), ensure_ascii=False)


def normalize_time(time: str) -> str | None:
    """Zero-pad a well-formed time ("9:30" -> "09:30"); None if malformed."""
    if not TIME_PATTERN.fullmatch(time):
        return None
    hour, minute = time.split(":")
    return f"{int(hour):02d}:{minute}"


def is_valid_preference(
    pref: SchedulePreference, business_hours: BusinessHours | None = None
) -> bool:
    """Stricter than the hours check: Monday–Saturday only, well-formed time."""
    if not 1 <= pref.day_of_week <= 6:
        return False
    if not TIME_PATTERN.fullmatch(pref.time):
        return False
    return is_within_business_hours(pref.day_of_week, pref.time, business_hours)


def get_available_days() -> list[int]:
    return [1, 2, 3, 4, 5, 6]


def get_day_name(day_of_week: int, locale: str = DEFAULT_LOCALE) -> str:
    names = DAY_NAMES["pt-BR"] if locale == "pt-BR" else DAY_NAMES["es"]
    if not 0 <= day_of_week < len(names):
        return ""
    return names[day_of_week]


def get_day_name_short(day_of_week: int, locale: str = DEFAULT_LOCALE) -> str:
    return get_day_name(day_of_week, locale)[:3]


def format_preferences_text(
    preferences: list[SchedulePreference], locale: str = DEFAULT_LOCALE
) -> str:
    """Render preferences for display, e.g. ``"Lunes 09:00, Jueves 15:00"``."""
    return ", ".join(f"{get_day_name(p.day_of_week, locale)} {p.time}" for p in preferences)
