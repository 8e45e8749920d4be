"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE the returned records are never async themselves
"""

from datetime import datetime
from typing import Protocol, Sequence

from loantracker.core.domain_types import Identity, PaymentId, UserId


class UserLike(Protocol):
    """Structural contract for stored users (ORM model or test double)."""
    id: int
    username: str
    password_hash: str
    created_at: datetime


class PaymentLike(Protocol):
    """Structural contract for stored payments, read by the status classifier."""
    id: int
    date: str
    amount: float
    owner_id: int | None


class UserRepository(Protocol):
    """Credential store — implemented by shell."""
    async def get_by_username(self, username: str) -> UserLike | None: ...
    async def create(self, username: str, password_hash: str) -> UserLike: ...


class PaymentRepository(Protocol):
    """Contract for payment persistence — implemented by shell."""
    async def create(
        self, payment_date: str, amount: float, owner: Identity,
    ) -> PaymentLike: ...
    async def find_all(
        self, owner_id: UserId | None = None,
    ) -> Sequence[PaymentLike]: ...
    async def find_by_id(self, payment_id: PaymentId) -> PaymentLike: ...
    async def update(
        self,
        payment_id: PaymentId,
        payment_date: str,
        amount: float,
        owner_id: UserId | None = None,
    ) -> PaymentLike: ...
    async def delete(
        self, payment_id: PaymentId, owner_id: UserId | None = None,
    ) -> None: ...
