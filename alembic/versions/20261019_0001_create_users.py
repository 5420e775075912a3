"""Create users table

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:01:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20261019_0001'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create users table."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(100), nullable=True),
        sa.Column('phone_number', sa.String(20), nullable=True),
        sa.Column('gender', sa.String(20), nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='client'),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('other_city', sa.String(100), nullable=True),
        sa.Column('address', sa.Text, nullable=True),
        sa.Column('client_type', sa.String(20), nullable=True),
        sa.Column('cleaner_type', sa.String(20), nullable=True),
        sa.Column('company_name', sa.String(100), nullable=True),
        sa.Column('company_address', sa.Text, nullable=True),
        sa.Column('experience', sa.Integer, nullable=True),
        sa.Column('services', sa.JSON, nullable=True),
        sa.Column('bio', sa.Text, nullable=True),
        sa.Column('charge_hourly', sa.Numeric(10, 2), nullable=True),
        sa.Column('charge_daily', sa.Numeric(10, 2), nullable=True),
        sa.Column('charge_per_contract', sa.Numeric(10, 2), nullable=True),
        sa.Column('charge_per_contract_negotiable', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('bank_name', sa.String(100), nullable=True),
        sa.Column('account_number', sa.String(20), nullable=True),
        sa.Column('profile_photo', sa.Text, nullable=True),
        sa.Column('government_id', sa.Text, nullable=True),
        sa.Column('business_reg_doc', sa.Text, nullable=True),
        sa.Column('subscription_tier', sa.String(20), nullable=False, server_default='Free'),
        sa.Column('pending_subscription', sa.String(20), nullable=True),
        sa.Column('subscription_receipt', sa.JSON, nullable=True),
        sa.Column('subscription_end_date', sa.Date, nullable=True),
        sa.Column('is_admin', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('admin_role', sa.String(50), nullable=True),
        sa.Column('is_suspended', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('reset_password_token', sa.String(64), nullable=True),
        sa.Column('reset_password_expires', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_index('idx_users_role', 'users', ['role', 'is_suspended'])
    op.create_index('idx_users_reset_token', 'users', ['reset_password_token'])


def downgrade() -> None:
    """Drop users table."""
    op.drop_index('idx_users_reset_token', table_name='users')
    op.drop_index('idx_users_role', table_name='users')
    op.drop_table('users')
