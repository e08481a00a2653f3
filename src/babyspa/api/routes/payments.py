"""Package payment API routes — register installment payments."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from babyspa.api.routes.packages import get_purchase_or_404
from babyspa.database import get_db
from babyspa.models.package import PackagePayment
from babyspa.payments.installments import (
    MONEY_TOLERANCE,
    PurchaseForPayment,
    get_next_installment_to_pay,
    to_decimal,
)
from babyspa.schemas.package import PackagePaymentCreate, PackagePaymentRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/package-payments", tags=["payments"])


@router.post("", response_model=PackagePaymentRead, status_code=201)
async def register_installment_payment(
    body: PackagePaymentCreate,
    session: AsyncSession = Depends(get_db),
) -> PackagePayment:
    """Register a payment against one installment of a package purchase.

    Installments are paid in order, once each, for the configured amount.
    """
    purchase = await get_purchase_or_404(session, body.package_purchase_id)

    if not 1 <= body.installment_number <= purchase.installments:
        raise HTTPException(status_code=400, detail="INVALID_INSTALLMENT_NUMBER")

    existing = await session.execute(
        select(PackagePayment.id).where(
            PackagePayment.package_purchase_id == purchase.id,
            PackagePayment.installment_number == body.installment_number,
        )
    )
    if existing.first() is not None:
        raise HTTPException(status_code=400, detail="INSTALLMENT_ALREADY_PAID")

    next_to_pay = get_next_installment_to_pay(PurchaseForPayment.from_model(purchase))
    if next_to_pay is not None and body.installment_number != next_to_pay:
        raise HTTPException(status_code=400, detail="INVALID_INSTALLMENT_NUMBER")

    if purchase.installment_amount is not None:
        expected = to_decimal(purchase.installment_amount)
        if abs(body.amount - expected) > MONEY_TOLERANCE:
            raise HTTPException(status_code=400, detail="INVALID_INSTALLMENT_AMOUNT")

    payment = PackagePayment(
        package_purchase_id=purchase.id,
        installment_number=body.installment_number,
        amount=body.amount,
        payment_method=body.payment_method,
        reference=body.reference,
        notes=body.notes,
    )
    session.add(payment)
    purchase.paid_amount = to_decimal(purchase.paid_amount) + body.amount
    await session.commit()
    await session.refresh(payment)

    logger.info(
        "Registered installment %d/%d for purchase %s (%s via %s)",
        payment.installment_number,
        purchase.installments,
        purchase.id,
        payment.amount,
        payment.payment_method,
    )
    return payment
