"""Package purchase API routes — purchases, stored schedule preferences, installment status."""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from babyspa.database import get_db
from babyspa.models.baby import Baby
from babyspa.models.package import PackagePayment, PackagePurchase
from babyspa.payments.installments import (
    InstallmentPaymentRecord,
    PurchaseForPayment,
    get_installments_detail,
    get_next_installment_to_pay,
    get_payment_status,
    get_payment_summary,
    has_pending_installments,
    suggest_pay_on_sessions,
)
from babyspa.scheduling.preferences import (
    SchedulePreference,
    is_valid_preference,
    stringify_schedule_preferences,
)
from babyspa.schemas.package import (
    InstallmentDetailRead,
    InstallmentsOverviewRead,
    PackagePurchaseCreate,
    PackagePurchaseRead,
    PaymentStatusRead,
    PaymentSummaryRead,
    SchedulePreferencesUpdate,
)
from babyspa.schemas.scheduling import SchedulePreferenceSchema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/package-purchases", tags=["packages"])


async def get_purchase_or_404(session: AsyncSession, purchase_id: int) -> PackagePurchase:
    purchase = await session.get(PackagePurchase, purchase_id)
    if purchase is None:
        raise HTTPException(status_code=404, detail="PACKAGE_PURCHASE_NOT_FOUND")
    return purchase


def _validated_preferences(items: list[SchedulePreferenceSchema]) -> list[SchedulePreference]:
    """Convert request preferences, rejecting any outside Mon–Sat business hours."""
    preferences = [SchedulePreference(day_of_week=p.day_of_week, time=p.time) for p in items]
    invalid = [p for p in preferences if not is_valid_preference(p)]
    if invalid:
        raise HTTPException(
            status_code=422,
            detail=f"INVALID_SCHEDULE_PREFERENCE: {invalid[0].day_of_week} {invalid[0].time}",
        )
    return preferences


@router.post("", response_model=PackagePurchaseRead, status_code=201)
async def create_purchase(
    body: PackagePurchaseCreate,
    session: AsyncSession = Depends(get_db),
) -> PackagePurchase:
    """Record a package purchase for a baby.

    For installment plans without explicit due sessions, due sessions are
    spread evenly across the package.
    """
    if await session.get(Baby, body.baby_id) is None:
        raise HTTPException(status_code=404, detail="BABY_NOT_FOUND")

    pay_on_sessions = body.pay_on_sessions
    if body.payment_plan == "INSTALLMENTS":
        if pay_on_sessions is None:
            pay_on_sessions = suggest_pay_on_sessions(body.total_sessions, body.installments)
        elif len(pay_on_sessions) > body.installments or any(
            s < 1 or s > body.total_sessions for s in pay_on_sessions
        ):
            raise HTTPException(status_code=422, detail="INVALID_PAY_ON_SESSIONS")

    preferences = _validated_preferences(body.schedule_preferences or [])

    purchase = PackagePurchase(
        baby_id=body.baby_id,
        package_name=body.package_name,
        total_sessions=body.total_sessions,
        used_sessions=0,
        remaining_sessions=body.total_sessions,
        session_duration_minutes=body.session_duration_minutes,
        payment_plan=body.payment_plan,
        installments=body.installments,
        installment_amount=body.installment_amount,
        total_price=body.total_price,
        final_price=body.final_price,
        installments_pay_on_sessions=(
            json.dumps(pay_on_sessions, separators=(",", ":")) if pay_on_sessions else None
        ),
        schedule_preferences=stringify_schedule_preferences(preferences) if preferences else None,
    )
    session.add(purchase)
    await session.commit()
    await session.refresh(purchase)
    logger.info(
        "Created package purchase %s for baby %s (%s, %d installment(s))",
        purchase.id,
        purchase.baby_id,
        purchase.payment_plan,
        purchase.installments,
    )
    return purchase


@router.get("/{purchase_id}", response_model=PackagePurchaseRead)
async def get_purchase(
    purchase_id: int,
    session: AsyncSession = Depends(get_db),
) -> PackagePurchase:
    return await get_purchase_or_404(session, purchase_id)


@router.put("/{purchase_id}/schedule-preferences", response_model=PackagePurchaseRead)
async def update_schedule_preferences(
    purchase_id: int,
    body: SchedulePreferencesUpdate,
    session: AsyncSession = Depends(get_db),
) -> PackagePurchase:
    """Replace the weekly schedule preferences stored on a purchase."""
    purchase = await get_purchase_or_404(session, purchase_id)
    preferences = _validated_preferences(body.preferences)
    purchase.schedule_preferences = (
        stringify_schedule_preferences(preferences) if preferences else None
    )
    await session.commit()
    await session.refresh(purchase)
    return purchase


@router.get("/{purchase_id}/installments", response_model=InstallmentsOverviewRead)
async def get_installments(
    purchase_id: int,
    session: AsyncSession = Depends(get_db),
) -> InstallmentsOverviewRead:
    """Per-installment status plus the aggregate payment picture."""
    purchase = await get_purchase_or_404(session, purchase_id)

    stmt = (
        select(PackagePayment)
        .where(PackagePayment.package_purchase_id == purchase_id)
        .order_by(PackagePayment.installment_number, PackagePayment.paid_at)
    )
    result = await session.execute(stmt)
    payments = [
        InstallmentPaymentRecord(
            installment_number=p.installment_number, amount=p.amount, paid_at=p.paid_at
        )
        for p in result.scalars().all()
    ]

    calc = PurchaseForPayment.from_model(purchase)
    return InstallmentsOverviewRead(
        package_purchase_id=purchase.id,
        has_pending=has_pending_installments(calc),
        next_installment=get_next_installment_to_pay(calc),
        summary=PaymentSummaryRead.model_validate(get_payment_summary(calc)),
        payment_status=PaymentStatusRead.model_validate(get_payment_status(calc)),
        installments=[
            InstallmentDetailRead.model_validate(d) for d in get_installments_detail(calc, payments)
        ],
    )
