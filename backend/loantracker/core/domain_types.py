"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId and PaymentId wrap store-assigned integers — never client-generated
    - Identity is immutable once built from verified token claims
    - All payment states encoded as an Enum — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers for ids: zero runtime cost, full type-checker support
    - str Enum for PaymentStatus: serializes to JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
PaymentId = NewType("PaymentId", int)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, as carried by a bearer token."""
    user_id: UserId
    username: str


# ─── Enums ───────────────────────────────────────────────────────

class PaymentStatus(str, Enum):
    """Derived per-payment label. Never persisted."""
    PENDING = "pending"
    MET = "met"
    MISSED = "missed"


# ─── Store Limits ────────────────────────────────────────────────

MAX_STORE_ID = 2**31 - 1    # INTEGER primary key on PostgreSQL


def is_storable_id(value: int) -> bool:
    """Ids outside the primary key range can never match a stored row."""
    return 1 <= value <= MAX_STORE_ID
