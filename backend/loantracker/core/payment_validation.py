"""Payment Validation — pure checks applied before any store access.

Invariants:
    - amount is a real number (bool rejected), finite, strictly positive
    - date is an ISO calendar date string YYYY-MM-DD that actually exists
    - Raises InvalidInputError naming the offending field; never touches IO
"""

import math
import re
from datetime import date

from loantracker.core.errors import InvalidInputError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_amount(amount: object) -> float:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise InvalidInputError("amount must be a number", field="amount")
    value = float(amount)
    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError("amount must be a positive number", field="amount")
    return value


def parse_payment_date(value: object) -> date | None:
    """Parse YYYY-MM-DD into a date, or None when it is not a real calendar date."""
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def validate_date(value: object) -> str:
    if parse_payment_date(value) is None:
        raise InvalidInputError(
            "date must be a calendar date in YYYY-MM-DD format", field="date",
        )
    return value  # type: ignore[return-value]


def validate_payment_fields(payment_date: object, amount: object) -> tuple[str, float]:
    """Validate both mutable payment fields. Returns (date, amount)."""
    return validate_date(payment_date), validate_amount(amount)
