from datetime import datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from babyspa.database import Base


class PackagePurchase(Base):
    __tablename__ = "package_purchases"

    id: Mapped[int] = mapped_column(primary_key=True)
    baby_id: Mapped[int] = mapped_column(ForeignKey("babies.id"))
    package_name: Mapped[str] = mapped_column(String(100))
    total_sessions: Mapped[int]
    used_sessions: Mapped[int] = mapped_column(default=0)
    remaining_sessions: Mapped[int]
    session_duration_minutes: Mapped[int] = mapped_column(default=60)
    payment_plan: Mapped[str] = mapped_column(String(20), default="SINGLE")  # SINGLE, INSTALLMENTS
    installments: Mapped[int] = mapped_column(default=1)
    installment_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    total_price: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2), default=None
    )  # Price under the installment plan; null on legacy rows
    final_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    paid_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    installments_pay_on_sessions: Mapped[str | None] = mapped_column(
        Text, default=None
    )  # JSON list of session numbers, e.g. "[1,4,7]"
    schedule_preferences: Mapped[str | None] = mapped_column(
        Text, default=None
    )  # JSON list of {"dayOfWeek", "time"}
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)


class PackagePayment(Base):
    __tablename__ = "package_payments"

    id: Mapped[int] = mapped_column(primary_key=True)
    package_purchase_id: Mapped[int] = mapped_column(ForeignKey("package_purchases.id"))
    installment_number: Mapped[int]
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    payment_method: Mapped[str] = mapped_column(String(20), default="CASH")  # CASH, CARD, TRANSFER, QR
    reference: Mapped[str | None] = mapped_column(String(100), default=None)
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    paid_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
