"""Add users table and payment ownership columns.

Revision ID: 002_users_ownership
Revises: 001_initial
Create Date: 2026-03-09

owner_id stays nullable: payments written before authentication have no owner
and can no longer be modified by anyone.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '002_users_ownership'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(50), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column(
            'created_at', sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )
    with op.batch_alter_table('payments') as batch:
        batch.add_column(sa.Column('owner_id', sa.Integer, nullable=True))
        batch.add_column(sa.Column('owner_username', sa.String(50), nullable=True))
        batch.create_foreign_key(
            'fk_payments_owner_id_users', 'users', ['owner_id'], ['id'],
        )
        batch.create_index('ix_payments_owner_id', ['owner_id'])


def downgrade() -> None:
    with op.batch_alter_table('payments') as batch:
        batch.drop_index('ix_payments_owner_id')
        batch.drop_constraint('fk_payments_owner_id_users', type_='foreignkey')
        batch.drop_column('owner_username')
        batch.drop_column('owner_id')
    op.drop_table('users')
