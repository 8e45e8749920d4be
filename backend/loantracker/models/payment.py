"""Payment ORM — one loan payment owned by one user.

Invariants:
    - id is an autoincrement integer assigned by the store (never client-generated)
    - date is stored as the validated 'YYYY-MM-DD' string the client sent
    - owner_id is NULL only for rows written before authentication existed
    - id, owner_id, owner_username and created_at never change after insert

Design Decisions:
    - owner_username denormalized: list responses need no JOIN to users
    - No FK cascade: users are never deleted
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from loantracker.db.base import Base


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    owner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True, index=True,
    )
    owner_username: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
