"""Tests for installment status and payment summary calculations."""

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

from babyspa.payments.installments import (
    InstallmentPaymentRecord,
    InstallmentStatus,
    PurchaseForPayment,
    calculate_installment_amount,
    can_use_next_session,
    get_expected_paid_amount,
    get_installments_detail,
    get_next_installment_to_pay,
    get_paid_installments_count,
    get_payment_status,
    get_payment_summary,
    get_remaining_balance,
    get_sessions_per_installment,
    has_pending_installments,
    parse_pay_on_sessions,
    suggest_pay_on_sessions,
    to_decimal,
)


def _purchase(**overrides: object) -> PurchaseForPayment:
    defaults: dict[str, object] = {
        "total_sessions": 10,
        "used_sessions": 0,
        "remaining_sessions": 10,
        "installments": 3,
        "installment_amount": Decimal("100"),
        "total_price": Decimal("300"),
        "final_price": Decimal("270"),
        "paid_amount": Decimal("0"),
        "payment_plan": "INSTALLMENTS",
        "installments_pay_on_sessions": "[1,3,5]",
    }
    defaults.update(overrides)
    return PurchaseForPayment(**defaults)  # type: ignore[arg-type]


class TestParsePayOnSessions:
    def test_comma_separated(self) -> None:
        assert parse_pay_on_sessions("1,3,5") == [1, 3, 5]

    def test_json_array_with_spaces(self) -> None:
        assert parse_pay_on_sessions("[1, 3, 5]") == [1, 3, 5]

    def test_empty(self) -> None:
        assert parse_pay_on_sessions(None) == []
        assert parse_pay_on_sessions("") == []
        assert parse_pay_on_sessions("[]") == []

    def test_drops_invalid_tokens(self) -> None:
        assert parse_pay_on_sessions("1,x,0,-2,4") == [1, 4]
        assert parse_pay_on_sessions("1.5,2") == [2]

    def test_garbage(self) -> None:
        assert parse_pay_on_sessions('{"a": 1}') == []


class TestMoneyHelpers:
    def test_to_decimal(self) -> None:
        assert to_decimal(None) == Decimal("0")
        assert to_decimal("120.50") == Decimal("120.50")
        assert to_decimal(12.5) == Decimal("12.5")
        assert to_decimal(7) == Decimal("7")
        assert to_decimal("abc") == Decimal("0")
        assert to_decimal("NaN") == Decimal("0")
        assert to_decimal(Decimal("NaN")) == Decimal("0")
        assert to_decimal(Decimal("-Infinity")) == Decimal("0")

    def test_calculate_installment_amount(self) -> None:
        assert calculate_installment_amount(Decimal("100"), 3) == Decimal("33.33")
        assert calculate_installment_amount("200", 4) == Decimal("50.00")
        assert calculate_installment_amount(Decimal("90"), 0) == Decimal("90")

    def test_expected_paid_amount(self) -> None:
        assert get_expected_paid_amount(3, [1, 3, 5], "50") == Decimal("100")
        assert get_expected_paid_amount(3, [], "50") == Decimal("0")

    def test_sessions_per_installment(self) -> None:
        assert get_sessions_per_installment(10, 3) == 4
        assert get_sessions_per_installment(10, 0) == 10


class TestInstallmentsDetail:
    def test_paid_pending_overdue(self) -> None:
        purchase = _purchase(used_sessions=2)
        payments = [InstallmentPaymentRecord(installment_number=1, amount="100")]
        details = get_installments_detail(purchase, payments)

        assert [d.number for d in details] == [1, 2, 3]
        assert [d.status for d in details] == [
            InstallmentStatus.PAID,
            InstallmentStatus.OVERDUE,  # due on session 3, which is next
            InstallmentStatus.PENDING,  # due on session 5
        ]
        assert [d.pay_on_session for d in details] == [1, 3, 5]
        assert all(d.amount == Decimal("100") for d in details)
        assert details[0].paid_amount == Decimal("100")
        assert details[1].paid_amount == Decimal("0")

    def test_nothing_overdue_before_due_session(self) -> None:
        details = get_installments_detail(
            _purchase(used_sessions=0, installments_pay_on_sessions="[2,4,6]"), []
        )
        assert all(d.status == InstallmentStatus.PENDING for d in details)

    def test_first_installment_due_immediately(self) -> None:
        details = get_installments_detail(_purchase(used_sessions=0), [])
        assert details[0].status == InstallmentStatus.OVERDUE
        assert details[1].status == InstallmentStatus.PENDING

    def test_without_due_sessions_everything_unpaid_is_pending(self) -> None:
        details = get_installments_detail(
            _purchase(used_sessions=9, installments_pay_on_sessions=None), []
        )
        assert all(d.status == InstallmentStatus.PENDING for d in details)
        assert all(d.pay_on_session is None for d in details)

    def test_fewer_due_sessions_than_installments(self) -> None:
        details = get_installments_detail(_purchase(installments_pay_on_sessions="1"), [])
        assert [d.pay_on_session for d in details] == [1, None, None]

    def test_amount_falls_back_to_even_split_of_total(self) -> None:
        details = get_installments_detail(_purchase(installment_amount=None), [])
        assert all(d.amount == Decimal("100.00") for d in details)

    def test_amount_falls_back_to_final_price(self) -> None:
        details = get_installments_detail(
            _purchase(installment_amount=None, total_price=None, final_price="90"), []
        )
        assert all(d.amount == Decimal("30.00") for d in details)

    def test_paid_at_uses_latest_payment(self) -> None:
        first = datetime(2024, 1, 5, 10, 0)
        second = datetime(2024, 1, 6, 10, 0)
        payments = [
            InstallmentPaymentRecord(installment_number=2, amount="50", paid_at=first),
            InstallmentPaymentRecord(installment_number=2, amount="50", paid_at=second),
        ]
        details = get_installments_detail(_purchase(), payments)
        assert details[1].status == InstallmentStatus.PAID
        assert details[1].paid_amount == Decimal("100")
        assert details[1].paid_at == second

    def test_payments_for_unknown_installments_ignored(self) -> None:
        payments = [InstallmentPaymentRecord(installment_number=7, amount="100")]
        details = get_installments_detail(_purchase(), payments)
        assert len(details) == 3
        assert InstallmentStatus.PAID not in [d.status for d in details]

    def test_no_payments_argument(self) -> None:
        assert len(get_installments_detail(_purchase())) == 3


class TestSummary:
    def test_partial(self) -> None:
        summary = get_payment_summary(_purchase(paid_amount=Decimal("100")))
        assert summary.paid_installments == 1
        assert summary.total_installments == 3
        assert summary.paid_amount == Decimal("100")
        assert summary.total_amount == Decimal("300")
        assert summary.remaining_amount == Decimal("200")
        assert summary.percentage_paid == 33

    def test_percentage_rounds_half_up(self) -> None:
        summary = get_payment_summary(
            _purchase(total_price=Decimal("80"), paid_amount=Decimal("10"))
        )
        assert summary.percentage_paid == 13

    def test_zero_total(self) -> None:
        summary = get_payment_summary(_purchase(total_price=None, final_price=0))
        assert summary.percentage_paid == 0

    def test_overpayment_has_no_negative_remaining(self) -> None:
        assert get_remaining_balance(_purchase(paid_amount="350")) == Decimal("0")


class TestPendingAndNext:
    def test_next_installment(self) -> None:
        assert get_next_installment_to_pay(_purchase()) == 1
        assert get_next_installment_to_pay(_purchase(paid_amount="100")) == 2
        assert get_next_installment_to_pay(_purchase(paid_amount="200")) == 3

    def test_fully_paid(self) -> None:
        purchase = _purchase(paid_amount="300")
        assert has_pending_installments(purchase) is False
        assert get_next_installment_to_pay(purchase) is None

    def test_fully_paid_within_tolerance(self) -> None:
        purchase = _purchase(
            installment_amount=Decimal("33.33"), total_price=Decimal("100"), paid_amount="99.99"
        )
        assert has_pending_installments(purchase) is False
        assert get_next_installment_to_pay(purchase) is None
        assert get_paid_installments_count(purchase) == 3

    def test_pending(self) -> None:
        assert has_pending_installments(_purchase(paid_amount="299")) is True


class TestPaymentStatus:
    def test_single_payment_plan_is_up_to_date(self) -> None:
        status = get_payment_status(
            _purchase(payment_plan="SINGLE", installments=1, paid_amount="0")
        )
        assert status.is_up_to_date is True
        assert status.is_paid_in_full is False
        assert status.overdue_amount == Decimal("0")
        assert status.next_payment_amount == Decimal("300")

    def test_one_installment_overdue(self) -> None:
        status = get_payment_status(_purchase(used_sessions=2, paid_amount="100"))
        assert status.is_up_to_date is False
        assert status.expected_amount == Decimal("200")
        assert status.overdue_amount == Decimal("100")
        assert status.overdue_installments == [2]
        assert status.message == "installmentOverdue:2:100.00"
        assert status.next_payment_session == 3

    def test_several_installments_overdue(self) -> None:
        status = get_payment_status(_purchase(used_sessions=2, paid_amount="0"))
        assert status.overdue_installments == [1, 2]
        assert status.message == "installmentsOverdue:2:200.00"

    def test_up_to_date(self) -> None:
        status = get_payment_status(_purchase(used_sessions=1, paid_amount="100"))
        assert status.is_up_to_date is True
        assert status.message is None
        assert status.pending_amount == Decimal("200")
        assert status.next_payment_session == 3
        assert status.next_payment_amount == Decimal("100")

    def test_paid_in_full(self) -> None:
        status = get_payment_status(_purchase(used_sessions=8, paid_amount="300"))
        assert status.is_paid_in_full is True
        assert status.is_up_to_date is True
        assert status.next_payment_session is None


class TestCanUseNextSession:
    def test_blocked_when_no_sessions_remain(self) -> None:
        result = can_use_next_session(_purchase(remaining_sessions=0))
        assert result.allowed is False
        assert result.warning_message == "noSessionsRemaining"

    def test_allowed_with_warning_when_overdue(self) -> None:
        result = can_use_next_session(_purchase(used_sessions=2, paid_amount="100"))
        assert result.allowed is True
        assert result.has_warning is True
        assert result.overdue_amount == Decimal("100")

    def test_allowed_without_warning(self) -> None:
        result = can_use_next_session(_purchase(paid_amount="100"))
        assert result.allowed is True
        assert result.has_warning is False


class TestSuggestPayOnSessions:
    def test_evenly_spread(self) -> None:
        assert suggest_pay_on_sessions(10, 3) == [1, 4, 7]
        assert suggest_pay_on_sessions(10, 4) == [1, 3, 5, 7]

    def test_more_installments_than_sessions(self) -> None:
        assert suggest_pay_on_sessions(3, 5) == [1, 2, 3]

    def test_invalid(self) -> None:
        assert suggest_pay_on_sessions(0, 3) == []
        assert suggest_pay_on_sessions(10, 0) == []


def test_from_model() -> None:
    row = SimpleNamespace(
        total_sessions=8,
        used_sessions=1,
        remaining_sessions=7,
        installments=2,
        final_price=Decimal("400"),
        paid_amount=Decimal("200"),
        total_price=None,
        installment_amount=Decimal("200"),
        payment_plan="INSTALLMENTS",
        installments_pay_on_sessions="[1,5]",
    )
    purchase = PurchaseForPayment.from_model(row)
    assert purchase.total_sessions == 8
    assert get_next_installment_to_pay(purchase) == 2


def test_non_finite_stored_amount_does_not_break_status() -> None:
    purchase = _purchase(paid_amount=Decimal("NaN"))
    assert has_pending_installments(purchase) is True
    assert get_next_installment_to_pay(purchase) == 1
