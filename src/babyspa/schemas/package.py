from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from babyspa.payments.installments import InstallmentStatus, parse_pay_on_sessions
from babyspa.scheduling.preferences import normalize_time, parse_schedule_preferences
from babyspa.schemas.scheduling import SchedulePreferenceSchema


class PackagePurchaseBase(BaseModel):
    baby_id: int
    package_name: str = Field(min_length=1, max_length=100)
    total_sessions: int = Field(gt=0)
    session_duration_minutes: int = Field(default=60, gt=0)
    payment_plan: str = Field(default="SINGLE", pattern=r"^(SINGLE|INSTALLMENTS)$")
    installments: int = Field(default=1, ge=1)
    installment_amount: Decimal | None = Field(default=None, ge=0)
    total_price: Decimal | None = Field(default=None, ge=0)
    final_price: Decimal = Field(ge=0)


class PackagePurchaseCreate(PackagePurchaseBase):
    pay_on_sessions: list[int] | None = None
    schedule_preferences: list[SchedulePreferenceSchema] | None = None


class PackagePurchaseRead(PackagePurchaseBase):
    id: int
    used_sessions: int
    remaining_sessions: int
    paid_amount: Decimal
    pay_on_sessions: list[int] = Field(
        default_factory=list, validation_alias="installments_pay_on_sessions"
    )
    schedule_preferences: list[SchedulePreferenceSchema] = Field(default_factory=list)
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("pay_on_sessions", mode="before")
    @classmethod
    def _parse_pay_on_sessions(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return parse_pay_on_sessions(value)
        return value

    @field_validator("schedule_preferences", mode="before")
    @classmethod
    def _parse_schedule_preferences(cls, value: object) -> object:
        # Stored rows may hold entries the API would reject (e.g. "9:30");
        # pad what can be padded and drop the rest rather than failing the read.
        if value is None or isinstance(value, str):
            entries = []
            for p in parse_schedule_preferences(value):
                time = normalize_time(p.time)
                if time is not None:
                    entries.append({"day_of_week": p.day_of_week, "time": time})
            return entries
        return value


class SchedulePreferencesUpdate(BaseModel):
    preferences: list[SchedulePreferenceSchema]


class InstallmentDetailRead(BaseModel):
    number: int
    amount: Decimal
    status: InstallmentStatus
    pay_on_session: int | None = None
    paid_amount: Decimal
    paid_at: datetime | None = None

    model_config = {"from_attributes": True}


class PaymentSummaryRead(BaseModel):
    paid_installments: int
    total_installments: int
    paid_amount: Decimal
    total_amount: Decimal
    remaining_amount: Decimal
    percentage_paid: int

    model_config = {"from_attributes": True}


class PaymentStatusRead(BaseModel):
    is_up_to_date: bool
    is_paid_in_full: bool
    expected_amount: Decimal
    paid_amount: Decimal
    pending_amount: Decimal
    overdue_amount: Decimal
    next_payment_session: int | None = None
    next_payment_amount: Decimal
    message: str | None = None
    overdue_installments: list[int]

    model_config = {"from_attributes": True}


class InstallmentsOverviewRead(BaseModel):
    package_purchase_id: int
    has_pending: bool
    next_installment: int | None = None
    summary: PaymentSummaryRead
    payment_status: PaymentStatusRead
    installments: list[InstallmentDetailRead]


class PackagePaymentCreate(BaseModel):
    package_purchase_id: int
    installment_number: int
    amount: Decimal = Field(gt=0, decimal_places=2)
    payment_method: str = Field(default="CASH", pattern=r"^(CASH|CARD|TRANSFER|QR)$")
    reference: str | None = Field(default=None, max_length=100)
    notes: str | None = None


class PackagePaymentRead(BaseModel):
    id: int
    package_purchase_id: int
    installment_number: int
    amount: Decimal
    payment_method: str
    reference: str | None = None
    notes: str | None = None
    paid_at: datetime

    model_config = {"from_attributes": True}
