from datetime import date, datetime

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from babyspa.database import Base

# Statuses that hold a place in a time slot
SLOT_OCCUPYING_STATUSES = ("SCHEDULED", "IN_PROGRESS")
# Statuses that count against a package's remaining sessions
BOOKED_STATUSES = ("SCHEDULED", "PENDING_PAYMENT", "IN_PROGRESS")


class Appointment(Base):
    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(primary_key=True)
    baby_id: Mapped[int] = mapped_column(ForeignKey("babies.id"))
    package_purchase_id: Mapped[int | None] = mapped_column(
        ForeignKey("package_purchases.id"), default=None
    )
    date: Mapped[date]
    start_time: Mapped[str] = mapped_column(String(5))  # "HH:MM"
    end_time: Mapped[str] = mapped_column(String(5))
    status: Mapped[str] = mapped_column(
        String(20), default="SCHEDULED"
    )  # SCHEDULED, PENDING_PAYMENT, IN_PROGRESS, COMPLETED, CANCELLED
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
