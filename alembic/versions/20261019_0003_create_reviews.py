"""Create reviews table

Revision ID: 20261019_0003
Revises: 20261019_0002
Create Date: 2026-10-19 00:03:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20261019_0003'
down_revision: str | None = '20261019_0002'
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create reviews table."""
    op.create_table(
        'reviews',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('booking_id', sa.Uuid, sa.ForeignKey('bookings.id', ondelete='CASCADE'), nullable=False),
        sa.Column('cleaner_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('reviewer_name', sa.String(100), nullable=True),
        sa.Column('rating', sa.Numeric(3, 1), nullable=False),
        sa.Column('timeliness', sa.Numeric(3, 1), nullable=True),
        sa.Column('thoroughness', sa.Numeric(3, 1), nullable=True),
        sa.Column('conduct', sa.Numeric(3, 1), nullable=True),
        sa.Column('comment', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='reviews_rating_check'),
    )

    op.create_index('idx_reviews_cleaner', 'reviews', ['cleaner_id', 'created_at'])


def downgrade() -> None:
    """Drop reviews table."""
    op.drop_index('idx_reviews_cleaner', table_name='reviews')
    op.drop_table('reviews')
