"""ORM Models — SQLAlchemy declarative models for users and payments.

Invariants:
    - All models inherit from Base (db/base.py)
    - Payment rows reference users.id through owner_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all / alembic
"""

from loantracker.models.user import User  # noqa: F401
from loantracker.models.payment import Payment  # noqa: F401
