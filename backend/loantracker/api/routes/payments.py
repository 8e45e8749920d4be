"""Payment Routes — authenticated CRUD plus the derived monthly status summary.

Invariants:
    - Every route requires a verified Identity (get_current_identity)
    - Listing and summary only ever see the caller's own payments
    - PUT/DELETE/GET-by-id go through PaymentGuard: 404 before 403, never a write on 403
    - Non-integer path ids are rejected by FastAPI as 400 before any store access

Design Decisions:
    - Statuses computed on read with today's UTC date; nothing derived is persisted
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, Response, status

from loantracker.api.dependencies import (
    get_current_identity, get_payment_guard, get_payment_repository,
)
from loantracker.core.domain_types import Identity, PaymentId
from loantracker.core.payment_status import classify_payments, summarize_months
from loantracker.schemas.payment import (
    MonthSummaryResponse, PaymentResponse, PaymentSummaryResponse, PaymentWrite,
)
from loantracker.services.payment_guard import PaymentGuard
from loantracker.services.payment_repository import SqlPaymentRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.get("", response_model=list[PaymentResponse])
async def list_payments(
    identity: Identity = Depends(get_current_identity),
    repository: SqlPaymentRepository = Depends(get_payment_repository),
):
    """Caller's payments, newest first."""
    payments = await repository.find_all(owner_id=identity.user_id)
    logger.info(
        f"Returning {len(payments)} payments", extra={"user_id": identity.user_id},
    )
    return payments


@router.get("/summary", response_model=PaymentSummaryResponse)
async def payment_summary(
    goal: float = Query(..., ge=0, allow_inf_nan=False),
    identity: Identity = Depends(get_current_identity),
    repository: SqlPaymentRepository = Depends(get_payment_repository),
):
    """Per-payment and per-month status against a monthly goal."""
    payments = await repository.find_all(owner_id=identity.user_id)
    today = datetime.now(timezone.utc).date()
    statuses = classify_payments(payments, goal, today)
    return PaymentSummaryResponse(
        goal=goal,
        statuses={str(pid): label for pid, label in statuses.items()},
        months=[
            MonthSummaryResponse(
                month=m.month, total=m.total,
                payment_count=m.payment_count, status=m.status,
            )
            for m in summarize_months(payments, goal, today)
        ],
    )


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: int,
    identity: Identity = Depends(get_current_identity),
    guard: PaymentGuard = Depends(get_payment_guard),
):
    return await guard.authorize(PaymentId(payment_id), identity)


@router.post(
    "", response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_payment(
    body: PaymentWrite,
    identity: Identity = Depends(get_current_identity),
    repository: SqlPaymentRepository = Depends(get_payment_repository),
):
    return await repository.create(body.date, body.amount, identity)


@router.put("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: int,
    body: PaymentWrite,
    identity: Identity = Depends(get_current_identity),
    guard: PaymentGuard = Depends(get_payment_guard),
):
    return await guard.update(
        PaymentId(payment_id), identity, body.date, body.amount,
    )


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: int,
    identity: Identity = Depends(get_current_identity),
    guard: PaymentGuard = Depends(get_payment_guard),
):
    await guard.delete(PaymentId(payment_id), identity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
