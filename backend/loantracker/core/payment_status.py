"""Payment Status — derives met / missed / pending labels from monthly totals.

Invariants:
    - Pure and deterministic: same payments + goal + today -> same labels
    - Months not strictly before today's month are always pending
    - A past month is met when its total >= goal (ties count as met), else missed
    - Unparseable dates are pending and never contribute to any month total
    - Raising the goal can only move a month from met to missed

Design Decisions:
    - today is a parameter, not read from the clock: callers pass the UTC date so
      timezone boundaries never shift a payment between months
    - One bad record degrades to pending instead of failing the whole computation
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from loantracker.core.domain_types import PaymentId, PaymentStatus
from loantracker.core.payment_validation import parse_payment_date
from loantracker.core.repository_protocols import PaymentLike


@dataclass(frozen=True)
class MonthSummary:
    month: str
    total: float
    payment_count: int
    status: PaymentStatus


def month_key(payment_date: object) -> str | None:
    """'2024-03-15' -> '2024-03'. None for anything that is not a calendar date."""
    parsed = parse_payment_date(payment_date)
    if parsed is None:
        return None
    return f"{parsed.year:04d}-{parsed.month:02d}"


def monthly_totals(payments: Iterable[PaymentLike]) -> dict[str, float]:
    totals: dict[str, float] = defaultdict(float)
    for payment in payments:
        key = month_key(payment.date)
        if key is not None:
            totals[key] += payment.amount
    return dict(totals)


def month_status(month: str, total: float, goal: float, today: date) -> PaymentStatus:
    """Status of a whole month. month is a 'YYYY-MM' key."""
    current = f"{today.year:04d}-{today.month:02d}"
    # zero-padded keys compare chronologically as strings
    if month >= current:
        return PaymentStatus.PENDING
    return PaymentStatus.MET if total >= goal else PaymentStatus.MISSED


def classify_payments(
    payments: Iterable[PaymentLike], goal: float, today: date,
) -> dict[PaymentId, PaymentStatus]:
    """Label every payment from its month's total against goal."""
    payments = list(payments)
    totals = monthly_totals(payments)
    statuses: dict[PaymentId, PaymentStatus] = {}
    for payment in payments:
        key = month_key(payment.date)
        if key is None:
            statuses[payment.id] = PaymentStatus.PENDING
            continue
        statuses[payment.id] = month_status(key, totals[key], goal, today)
    return statuses


def summarize_months(
    payments: Iterable[PaymentLike], goal: float, today: date,
) -> list[MonthSummary]:
    """Per-month totals and statuses, newest month first."""
    payments = list(payments)
    totals = monthly_totals(payments)
    counts: dict[str, int] = defaultdict(int)
    for payment in payments:
        key = month_key(payment.date)
        if key is not None:
            counts[key] += 1
    return [
        MonthSummary(
            month=key,
            total=totals[key],
            payment_count=counts[key],
            status=month_status(key, totals[key], goal, today),
        )
        for key in sorted(totals, reverse=True)
    ]
