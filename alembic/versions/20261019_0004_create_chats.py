"""Create chats table

Revision ID: 20261019_0004
Revises: 20261019_0003
Create Date: 2026-10-19 00:04:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20261019_0004'
down_revision: str | None = '20261019_0003'
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create chats table."""
    op.create_table(
        'chats',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('participant_one', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('participant_two', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_index('idx_chats_participant_one', 'chats', ['participant_one'])
    op.create_index('idx_chats_participant_two', 'chats', ['participant_two'])


def downgrade() -> None:
    """Drop chats table."""
    op.drop_index('idx_chats_participant_two', table_name='chats')
    op.drop_index('idx_chats_participant_one', table_name='chats')
    op.drop_table('chats')
