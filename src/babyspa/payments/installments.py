"""Installment calculations for package purchases.

Installments are configured per package and may be due "on session N": the
installment must be paid before the client uses that session. Statuses are
recomputed from the purchase and its payments on every call; nothing here
is stored.

Overdue installments only produce warnings. Using a session is never blocked
for payment reasons, only when no sessions remain.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

# Absorbs cent-level drift from decimal serialization and even splits.
MONEY_TOLERANCE = Decimal("0.01")
CENTS = Decimal("0.01")

Money = Decimal | int | float | str | None


class InstallmentStatus(StrEnum):
    PAID = "PAID"
    PENDING = "PENDING"
    OVERDUE = "OVERDUE"


@dataclass
class PurchaseForPayment:
    """The subset of a package purchase the calculations read."""

    total_sessions: int
    used_sessions: int
    remaining_sessions: int
    installments: int
    final_price: Money
    paid_amount: Money = 0
    total_price: Money = None
    installment_amount: Money = None
    payment_plan: str = "SINGLE"
    installments_pay_on_sessions: str | None = None

    @classmethod
    def from_model(cls, purchase: Any) -> "PurchaseForPayment":
        """Build from a `PackagePurchase` row (or anything with the same attributes)."""
        return cls(
            total_sessions=purchase.total_sessions,
            used_sessions=purchase.used_sessions,
            remaining_sessions=purchase.remaining_sessions,
            installments=purchase.installments,
            final_price=purchase.final_price,
            paid_amount=purchase.paid_amount,
            total_price=purchase.total_price,
            installment_amount=purchase.installment_amount,
            payment_plan=purchase.payment_plan,
            installments_pay_on_sessions=purchase.installments_pay_on_sessions,
        )


@dataclass
class InstallmentPaymentRecord:
    installment_number: int
    amount: Money
    paid_at: datetime | None = None


@dataclass
class InstallmentDetail:
    number: int
    amount: Decimal
    status: InstallmentStatus
    pay_on_session: int | None = None
    paid_amount: Decimal = Decimal("0")
    paid_at: datetime | None = None


@dataclass
class PaymentSummary:
    paid_installments: int
    total_installments: int
    paid_amount: Decimal
    total_amount: Decimal
    remaining_amount: Decimal
    percentage_paid: int


@dataclass
class PaymentStatus:
    is_up_to_date: bool
    is_paid_in_full: bool
    expected_amount: Decimal
    paid_amount: Decimal
    pending_amount: Decimal
    overdue_amount: Decimal
    next_payment_session: int | None
    next_payment_amount: Decimal
    message: str | None = None
    overdue_installments: list[int] = field(default_factory=list)


@dataclass
class CanUseSessionResult:
    allowed: bool
    has_warning: bool
    warning_message: str | None
    overdue_amount: Decimal
    payment_status: PaymentStatus


# ── Helpers ──────────────────────────────────────────────────────────


def to_decimal(value: Money) -> Decimal:
    """Coerce a money value to Decimal; None and unparseable values become 0."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() first so floats keep their shortest repr instead of binary noise
            result = Decimal(str(value))
        except InvalidOperation:
            return Decimal("0")
    return result if result.is_finite() else Decimal("0")


def _round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _total_price(purchase: PurchaseForPayment) -> Decimal:
    # total_price is null for legacy purchases
    return to_decimal(purchase.total_price) or to_decimal(purchase.final_price)


def _installment_amount(purchase: PurchaseForPayment) -> Decimal:
    return to_decimal(purchase.installment_amount) or calculate_installment_amount(
        _total_price(purchase), purchase.installments
    )


def parse_pay_on_sessions(value: str | None) -> list[int]:
    """Parse "1,3,5" or "[1,3,5]" into session numbers.

    Tokens that are not positive integers are dropped. Never raises.
    """
    if not value:
        return []

    cleaned = "".join(ch for ch in value if ch not in "[] \t\r\n")
    sessions = []
    for token in cleaned.split(","):
        try:
            number = int(token)
        except ValueError:
            continue
        if number > 0:
            sessions.append(number)
    return sessions


def calculate_installment_amount(total_price: Money, installments_count: int) -> Decimal:
    total = to_decimal(total_price)
    if installments_count <= 0:
        return total
    return _round_cents(total / installments_count)


def get_expected_paid_amount(
    current_session: int, pay_on_sessions: list[int], installment_amount: Money
) -> Decimal:
    """Amount that should be paid by the time `current_session` (1-based) is used."""
    due = sum(1 for session in pay_on_sessions if session <= current_session)
    return due * to_decimal(installment_amount)


def get_remaining_balance(purchase: PurchaseForPayment) -> Decimal:
    return max(Decimal("0"), _total_price(purchase) - to_decimal(purchase.paid_amount))


def get_paid_installments_count(purchase: PurchaseForPayment) -> int:
    """Installments fully covered by the paid amount, within tolerance."""
    installment_amount = _installment_amount(purchase)
    if installment_amount <= 0:
        return 0

    if get_remaining_balance(purchase) <= MONEY_TOLERANCE:
        return purchase.installments

    paid = to_decimal(purchase.paid_amount) + MONEY_TOLERANCE
    return min(purchase.installments, int(paid // installment_amount))


def get_sessions_per_installment(total_sessions: int, installments: int) -> int:
    if installments <= 0:
        return total_sessions
    return math.ceil(total_sessions / installments)


def suggest_pay_on_sessions(total_sessions: int, installments_count: int) -> list[int]:
    """Spread installment due sessions evenly, starting at session 1."""
    if installments_count <= 0 or total_sessions <= 0:
        return []
    if installments_count >= total_sessions:
        return list(range(1, total_sessions + 1))

    step = max(1, total_sessions // installments_count)
    suggested = [
        1 + i * step for i in range(installments_count) if 1 + i * step <= total_sessions
    ]

    while len(suggested) < installments_count and suggested[-1] < total_sessions:
        suggested.append(suggested[-1] + 1)

    return suggested[:installments_count]


# ── Status ───────────────────────────────────────────────────────────


def get_installments_detail(
    purchase: PurchaseForPayment,
    payments: list[InstallmentPaymentRecord] | None = None,
) -> list[InstallmentDetail]:
    """One entry per installment, numbered from 1.

    An installment is PAID when a payment is recorded against its number.
    Otherwise it is OVERDUE once its due session is the one about to be used
    (or already used), and PENDING before that.
    """
    payments = payments or []
    installment_amount = _installment_amount(purchase)
    pay_on_sessions = parse_pay_on_sessions(purchase.installments_pay_on_sessions)
    current_session = purchase.used_sessions + 1

    by_number: dict[int, list[InstallmentPaymentRecord]] = {}
    for payment in payments:
        by_number.setdefault(payment.installment_number, []).append(payment)

    details = []
    for number in range(1, purchase.installments + 1):
        pay_on_session = pay_on_sessions[number - 1] if number <= len(pay_on_sessions) else None
        matching = by_number.get(number, [])

        if matching:
            status = InstallmentStatus.PAID
        elif pay_on_session is not None and pay_on_session <= current_session:
            status = InstallmentStatus.OVERDUE
        else:
            status = InstallmentStatus.PENDING

        paid_dates = [p.paid_at for p in matching if p.paid_at is not None]
        details.append(
            InstallmentDetail(
                number=number,
                amount=installment_amount,
                status=status,
                pay_on_session=pay_on_session,
                paid_amount=sum((to_decimal(p.amount) for p in matching), Decimal("0")),
                paid_at=max(paid_dates) if paid_dates else None,
            )
        )
    return details


def get_payment_status(purchase: PurchaseForPayment) -> PaymentStatus:
    """Whether the client is up to date with installments due so far."""
    paid_amount = to_decimal(purchase.paid_amount)
    total_price = _total_price(purchase)
    pending_amount = max(Decimal("0"), total_price - paid_amount)
    is_paid_in_full = pending_amount <= MONEY_TOLERANCE

    if purchase.payment_plan == "SINGLE" or purchase.installments <= 1 or is_paid_in_full:
        return PaymentStatus(
            is_up_to_date=is_paid_in_full or purchase.payment_plan == "SINGLE",
            is_paid_in_full=is_paid_in_full,
            expected_amount=total_price,
            paid_amount=paid_amount,
            pending_amount=pending_amount,
            overdue_amount=Decimal("0"),
            next_payment_session=None,
            next_payment_amount=pending_amount,
        )

    installment_amount = _installment_amount(purchase)
    pay_on_sessions = parse_pay_on_sessions(purchase.installments_pay_on_sessions)
    current_session = purchase.used_sessions + 1

    expected_amount = get_expected_paid_amount(current_session, pay_on_sessions, installment_amount)
    overdue_amount = max(Decimal("0"), expected_amount - paid_amount)
    if overdue_amount <= MONEY_TOLERANCE:
        overdue_amount = Decimal("0")

    overdue_installments = []
    accumulated = Decimal("0")
    for number, session in enumerate(pay_on_sessions, start=1):
        if session <= current_session:
            accumulated += installment_amount
            if paid_amount < accumulated - MONEY_TOLERANCE:
                overdue_installments.append(number)

    next_payment_session = next((s for s in pay_on_sessions if s > purchase.used_sessions), None)

    message = None
    if overdue_amount > 0:
        if len(overdue_installments) == 1:
            message = f"installmentOverdue:{overdue_installments[0]}:{overdue_amount:.2f}"
        else:
            message = f"installmentsOverdue:{len(overdue_installments)}:{overdue_amount:.2f}"

    return PaymentStatus(
        is_up_to_date=overdue_amount == 0,
        is_paid_in_full=False,
        expected_amount=expected_amount,
        paid_amount=paid_amount,
        pending_amount=pending_amount,
        overdue_amount=overdue_amount,
        next_payment_session=next_payment_session,
        next_payment_amount=installment_amount,
        message=message,
        overdue_installments=overdue_installments,
    )


def can_use_next_session(purchase: PurchaseForPayment) -> CanUseSessionResult:
    """Alert on overdue payments; only block when the package is used up."""
    payment_status = get_payment_status(purchase)

    if purchase.remaining_sessions <= 0:
        return CanUseSessionResult(
            allowed=False,
            has_warning=False,
            warning_message="noSessionsRemaining",
            overdue_amount=Decimal("0"),
            payment_status=payment_status,
        )

    if not payment_status.is_up_to_date:
        logger.info(
            "Session allowed with overdue balance %s (%s)",
            payment_status.overdue_amount,
            payment_status.message,
        )
    return CanUseSessionResult(
        allowed=True,
        has_warning=not payment_status.is_up_to_date,
        warning_message=payment_status.message,
        overdue_amount=payment_status.overdue_amount,
        payment_status=payment_status,
    )


def has_pending_installments(purchase: PurchaseForPayment) -> bool:
    return get_remaining_balance(purchase) > MONEY_TOLERANCE


def get_next_installment_to_pay(purchase: PurchaseForPayment) -> int | None:
    """Lowest unpaid installment number, or None when fully paid."""
    paid_count = get_paid_installments_count(purchase)
    if paid_count >= purchase.installments:
        return None
    return paid_count + 1


def get_payment_summary(purchase: PurchaseForPayment) -> PaymentSummary:
    total_price = _total_price(purchase)
    paid_amount = to_decimal(purchase.paid_amount)

    percentage = Decimal("0")
    if total_price > 0:
        percentage = (paid_amount / total_price * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)

    return PaymentSummary(
        paid_installments=get_paid_installments_count(purchase),
        total_installments=purchase.installments,
        paid_amount=paid_amount,
        total_amount=total_price,
        remaining_amount=get_remaining_balance(purchase),
        percentage_paid=int(percentage),
    )
