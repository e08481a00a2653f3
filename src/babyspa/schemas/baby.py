from datetime import date, datetime

from pydantic import BaseModel, Field


class BabyBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    birth_date: date | None = None


class BabyCreate(BabyBase):
    pass


class BabyRead(BabyBase):
    id: int
    created_at: datetime

    model_config = {"from_attributes": True}
