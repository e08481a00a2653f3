from babyspa.payments.installments import (
    MONEY_TOLERANCE,
    InstallmentDetail,
    InstallmentPaymentRecord,
    InstallmentStatus,
    PaymentStatus,
    PaymentSummary,
    PurchaseForPayment,
    can_use_next_session,
    get_installments_detail,
    get_next_installment_to_pay,
    get_payment_status,
    get_payment_summary,
    has_pending_installments,
    parse_pay_on_sessions,
)

__all__ = [
    "MONEY_TOLERANCE",
    "InstallmentDetail",
    "InstallmentPaymentRecord",
    "InstallmentStatus",
    "PaymentStatus",
    "PaymentSummary",
    "PurchaseForPayment",
    "can_use_next_session",
    "get_installments_detail",
    "get_next_installment_to_pay",
    "get_payment_status",
    "get_payment_summary",
    "has_pending_installments",
    "parse_pay_on_sessions",
]
