from babyspa.scheduling.bulk import (
    BulkSchedulingInput,
    GeneratedSlot,
    ScheduleSpan,
    calculate_schedule_span,
    generate_bulk_schedule,
    get_available_times_for_day,
    might_have_conflicts,
)
from babyspa.scheduling.business_hours import (
    DEFAULT_BUSINESS_HOURS,
    BusinessHours,
    DayHours,
    TimeWindow,
    calculate_end_time,
    is_within_business_hours,
    minutes_to_time,
    time_to_minutes,
)
from babyspa.scheduling.preferences import (
    PreferenceParseResult,
    SchedulePreference,
    format_preferences_text,
    get_day_name,
    get_day_name_short,
    is_valid_preference,
    normalize_time,
    parse_schedule_preferences,
    parse_schedule_preferences_result,
    stringify_schedule_preferences,
)

__all__ = [
    "DEFAULT_BUSINESS_HOURS",
    "BulkSchedulingInput",
    "BusinessHours",
    "DayHours",
    "GeneratedSlot",
    "PreferenceParseResult",
    "SchedulePreference",
    "ScheduleSpan",
    "TimeWindow",
    "calculate_end_time",
    "calculate_schedule_span",
    "format_preferences_text",
    "generate_bulk_schedule",
    "get_available_times_for_day",
    "get_day_name",
    "get_day_name_short",
    "is_valid_preference",
    "is_within_business_hours",
    "might_have_conflicts",
    "minutes_to_time",
    "normalize_time",
    "parse_schedule_preferences",
    "parse_schedule_preferences_result",
    "stringify_schedule_preferences",
    "time_to_minutes",
]
