"""Create bookings table

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:02:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20261019_0002'
down_revision: str | None = '20261019_0001'
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create bookings table."""
    op.create_table(
        'bookings',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('client_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('cleaner_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('client_name', sa.String(100), nullable=True),
        sa.Column('cleaner_name', sa.String(100), nullable=True),
        sa.Column('service', sa.String(100), nullable=False),
        sa.Column('date', sa.String(50), nullable=True),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='Upcoming'),
        sa.Column('payment_method', sa.String(20), nullable=False, server_default='Escrow'),
        sa.Column('payment_status', sa.String(50), nullable=False, server_default='Pending Payment'),
        sa.Column('payment_receipt', sa.JSON, nullable=True),
        sa.Column('job_approved_by_client', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('review_submitted', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("status IN ('Upcoming', 'Completed', 'Cancelled')", name='bookings_status_check'),
        sa.CheckConstraint("payment_method IN ('Escrow', 'Direct')", name='bookings_payment_method_check'),
    )

    op.create_index('idx_bookings_client', 'bookings', ['client_id', 'created_at'])
    op.create_index('idx_bookings_cleaner', 'bookings', ['cleaner_id', 'created_at'])


def downgrade() -> None:
    """Drop bookings table."""
    op.drop_index('idx_bookings_cleaner', table_name='bookings')
    op.drop_index('idx_bookings_client', table_name='bookings')
    op.drop_table('bookings')
