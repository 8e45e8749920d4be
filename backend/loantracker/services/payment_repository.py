"""Payment Repository — SQL implementation of the PaymentRepository protocol.

Invariants:
    - create/update validate date and amount BEFORE any store access
    - find_all returns newest first (created_at desc, id desc as tie-break)
    - update touches only date and amount; id, owner and created_at are immutable
    - update/delete with owner_id are conditional writes on (id AND owner_id):
      zero matched rows -> ResourceNotFoundError
    - ids outside the primary key range are NotFound without a store round trip

Design Decisions:
    - Conditional write instead of a transaction around check-then-act: the store
      serializes single-row writes, so a concurrent delete shows up as a benign NotFound
"""

import logging
from typing import Sequence

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from loantracker.core.domain_types import (
    Identity, PaymentId, UserId, is_storable_id,
)
from loantracker.core.errors import ErrorContext, ResourceNotFoundError
from loantracker.core.payment_validation import validate_payment_fields
from loantracker.models.payment import Payment

logger = logging.getLogger(__name__)


def _not_found(payment_id: PaymentId) -> ResourceNotFoundError:
    return ResourceNotFoundError(
        "Payment", payment_id, ErrorContext(payment_id=payment_id),
    )


class SqlPaymentRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def create(
        self, payment_date: str, amount: float, owner: Identity,
    ) -> Payment:
        payment_date, amount = validate_payment_fields(payment_date, amount)
        payment = Payment(
            date=payment_date,
            amount=amount,
            owner_id=owner.user_id,
            owner_username=owner.username,
        )
        self._db.add(payment)
        await self._db.commit()
        await self._db.refresh(payment)
        logger.info(
            "Payment created",
            extra={"payment_id": payment.id, "user_id": owner.user_id},
        )
        return payment

    async def find_all(self, owner_id: UserId | None = None) -> Sequence[Payment]:
        query = select(Payment).order_by(
            Payment.created_at.desc(), Payment.id.desc(),
        )
        if owner_id is not None:
            query = query.where(Payment.owner_id == owner_id)
        result = await self._db.execute(query)
        return result.scalars().all()

    async def find_by_id(self, payment_id: PaymentId) -> Payment:
        if not is_storable_id(payment_id):
            raise _not_found(payment_id)
        result = await self._db.execute(
            select(Payment)
            .where(Payment.id == payment_id)
            .execution_options(populate_existing=True),
        )
        payment = result.scalar_one_or_none()
        if payment is None:
            raise _not_found(payment_id)
        return payment

    async def update(
        self,
        payment_id: PaymentId,
        payment_date: str,
        amount: float,
        owner_id: UserId | None = None,
    ) -> Payment:
        payment_date, amount = validate_payment_fields(payment_date, amount)
        if not is_storable_id(payment_id):
            raise _not_found(payment_id)
        stmt = (
            update(Payment)
            .where(Payment.id == payment_id)
            .values(date=payment_date, amount=amount)
        )
        if owner_id is not None:
            stmt = stmt.where(Payment.owner_id == owner_id)
        result = await self._db.execute(stmt)
        if result.rowcount == 0:
            await self._db.rollback()
            raise _not_found(payment_id)
        await self._db.commit()
        logger.info("Payment updated", extra={"payment_id": payment_id})
        return await self.find_by_id(payment_id)

    async def delete(
        self, payment_id: PaymentId, owner_id: UserId | None = None,
    ) -> None:
        if not is_storable_id(payment_id):
            raise _not_found(payment_id)
        stmt = delete(Payment).where(Payment.id == payment_id)
        if owner_id is not None:
            stmt = stmt.where(Payment.owner_id == owner_id)
        result = await self._db.execute(stmt)
        if result.rowcount == 0:
            await self._db.rollback()
            raise _not_found(payment_id)
        await self._db.commit()
        logger.info("Payment deleted", extra={"payment_id": payment_id})
