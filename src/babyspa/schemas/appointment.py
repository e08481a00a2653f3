from datetime import date, datetime

from pydantic import BaseModel, Field

from babyspa.schemas.scheduling import TIME_PATTERN


class BulkAppointmentItem(BaseModel):
    date: date
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)


class BulkAppointmentCreate(BaseModel):
    baby_id: int
    package_purchase_id: int
    appointments: list[BulkAppointmentItem] = Field(default_factory=list)


class AppointmentRead(BaseModel):
    id: int
    baby_id: int
    package_purchase_id: int | None = None
    date: date
    start_time: str
    end_time: str
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class BulkConflictRead(BaseModel):
    date: date
    time: str
    reason: str | None = None
    existing_count: int | None = None


class BulkAppointmentResult(BaseModel):
    created: int
    appointments: list[AppointmentRead]
    conflicts: list[BulkConflictRead]


class ConflictRead(BaseModel):
    date: date
    time: str
    count: int
    available: int

    model_config = {"from_attributes": True}


class ConflictCheckResponse(BaseModel):
    conflicts: list[ConflictRead]
