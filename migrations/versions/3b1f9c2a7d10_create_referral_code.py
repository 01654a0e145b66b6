"""create_referral_code

Revision ID: 3b1f9c2a7d10
Revises: 
Create Date: 2025-06-02 12:14:07.318254

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1f9c2a7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'referral_code',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=100), nullable=False),
        sa.Column('owner_name', sa.String(length=100), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('usage_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.Integer(), nullable=False),
        sa.CheckConstraint('usage_count >= 0', name='usage_count_nonnegative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_referral_code_id'), 'referral_code', ['id'], unique=False)
    # уникальность кода страхует проверку в сервисе от гонки
    op.create_index(op.f('ix_referral_code_code'), 'referral_code', ['code'], unique=True)
    op.create_index(op.f('ix_referral_code_is_active'), 'referral_code', ['is_active'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_referral_code_is_active'), table_name='referral_code')
    op.drop_index(op.f('ix_referral_code_code'), table_name='referral_code')
    op.drop_index(op.f('ix_referral_code_id'), table_name='referral_code')
    op.drop_table('referral_code')
