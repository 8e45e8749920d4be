"""Ownership Check — pure single-owner rule for payment mutations.

Invariants:
    - Exact equality of payment.owner_id and identity.user_id; no roles, no hierarchy
    - Rows without an owner (pre-auth schema) are owned by nobody
    - Never mutates anything
"""

from loantracker.core.domain_types import Identity
from loantracker.core.errors import ErrorContext, ForbiddenError
from loantracker.core.repository_protocols import PaymentLike


def is_owner(payment: PaymentLike, identity: Identity) -> bool:
    return payment.owner_id is not None and payment.owner_id == identity.user_id


def check_owner(payment: PaymentLike, identity: Identity) -> None:
    """Raise ForbiddenError unless identity owns payment."""
    if not is_owner(payment, identity):
        raise ForbiddenError(
            "You can only modify your own payments",
            ErrorContext(user_id=identity.user_id, payment_id=payment.id),
        )
