from datetime import date

from pydantic import BaseModel, Field

TIME_PATTERN = r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$"


class SchedulePreferenceSchema(BaseModel):
    day_of_week: int = Field(ge=0, le=6)  # 0=Sunday
    time: str = Field(pattern=TIME_PATTERN)


class SchedulePreviewRequest(BaseModel):
    start_date: date
    preferences: list[SchedulePreferenceSchema]
    count: int
    package_duration: int = Field(default=60, gt=0)
    exclude_dates: list[date] = Field(default_factory=list)


class GeneratedSlotRead(BaseModel):
    date: date
    start_time: str
    end_time: str
    day_of_week: int
    preference_index: int
    has_conflict: bool
    conflict_count: int
    likely_busy: bool = False

    model_config = {"from_attributes": True}


class ScheduleSpanRead(BaseModel):
    weeks: int
    start_date: date | None = None
    end_date: date | None = None

    model_config = {"from_attributes": True}


class SchedulePreviewResponse(BaseModel):
    requested: int
    generated: int
    is_short: bool
    summary: str
    span: ScheduleSpanRead
    slots: list[GeneratedSlotRead]


class AvailableTimesRead(BaseModel):
    day_of_week: int
    day_name: str
    times: list[str]
