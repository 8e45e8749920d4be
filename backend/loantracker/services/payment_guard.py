"""Ownership Authorization Guard — authorizes payment mutations, then delegates them.

Invariants:
    - update() validates date and amount before the lookup (InvalidInputError, no IO)
    - Lookup first: unknown id -> ResourceNotFoundError, before any ownership check
    - Owner mismatch -> ForbiddenError and the repository write is never attempted
    - The guard itself never mutates state; writes go through the repository
    - Writes are conditional on the acting owner, so a row deleted between check
      and write surfaces as ResourceNotFoundError (benign race outcome)
"""

import logging

from loantracker.core.domain_types import Identity, PaymentId
from loantracker.core.errors import ForbiddenError
from loantracker.core.ownership import check_owner
from loantracker.core.payment_validation import validate_payment_fields
from loantracker.core.repository_protocols import PaymentLike, PaymentRepository

logger = logging.getLogger(__name__)


class PaymentGuard:
    def __init__(self, repository: PaymentRepository):
        self._repository = repository

    async def authorize(
        self, payment_id: PaymentId, identity: Identity,
    ) -> PaymentLike:
        """Return the payment if identity owns it. Raises NotFound / Forbidden."""
        payment = await self._repository.find_by_id(payment_id)
        try:
            check_owner(payment, identity)
        except ForbiddenError:
            logger.warning(
                "Ownership check failed",
                extra={"payment_id": payment_id, "user_id": identity.user_id},
            )
            raise
        return payment

    async def update(
        self,
        payment_id: PaymentId,
        identity: Identity,
        payment_date: str,
        amount: float,
    ) -> PaymentLike:
        payment_date, amount = validate_payment_fields(payment_date, amount)
        await self.authorize(payment_id, identity)
        return await self._repository.update(
            payment_id, payment_date, amount, owner_id=identity.user_id,
        )

    async def delete(self, payment_id: PaymentId, identity: Identity) -> None:
        await self.authorize(payment_id, identity)
        await self._repository.delete(payment_id, owner_id=identity.user_id)
