"""Create support_tickets table

Revision ID: 20261019_0006
Revises: 20261019_0005
Create Date: 2026-10-19 00:06:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20261019_0006'
down_revision: str | None = '20261019_0005'
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create support_tickets table."""
    op.create_table(
        'support_tickets',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True),
        sa.Column('contact_name', sa.String(100), nullable=True),
        sa.Column('contact_email', sa.String(255), nullable=True),
        sa.Column('category', sa.String(100), nullable=False, server_default='Other'),
        sa.Column('subject', sa.String(255), nullable=False),
        sa.Column('message', sa.Text, nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='Open'),
        sa.Column('admin_response', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("status IN ('Open', 'Resolved')", name='support_tickets_status_check'),
    )

    op.create_index('idx_support_user', 'support_tickets', ['user_id', 'created_at'])


def downgrade() -> None:
    """Drop support_tickets table."""
    op.drop_index('idx_support_user', table_name='support_tickets')
    op.drop_table('support_tickets')
