"""Payment Schemas — strict request bodies and camelCase responses.

Invariants:
    - PaymentWrite.amount must be a JSON number > 0 (strings and booleans rejected)
    - PaymentWrite.date must be a JSON string; calendar validity checked in core/
    - Responses serialize ownerId / ownerUsername / createdAt in camelCase
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from loantracker.core.domain_types import PaymentStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


class PaymentWrite(BaseModel):
    """Body of POST and PUT /api/payments."""
    model_config = ConfigDict(strict=True)

    date: str = Field(max_length=10)
    amount: float = Field(gt=0, allow_inf_nan=False)


class PaymentResponse(_CamelModel):
    id: int
    date: str
    amount: float
    owner_id: int | None = None
    owner_username: str | None = None
    created_at: datetime


class MonthSummaryResponse(_CamelModel):
    month: str
    total: float
    payment_count: int
    status: PaymentStatus


class PaymentSummaryResponse(_CamelModel):
    goal: float
    statuses: dict[str, PaymentStatus]
    months: list[MonthSummaryResponse]
