"""Create messages table

Revision ID: 20261019_0005
Revises: 20261019_0004
Create Date: 2026-10-19 00:05:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20261019_0005'
down_revision: str | None = '20261019_0004'
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create messages table."""
    op.create_table(
        'messages',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('chat_id', sa.Uuid, sa.ForeignKey('chats.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sender_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('text', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # Create index for chat_id and created_at
    op.create_index('idx_chat_messages', 'messages', ['chat_id', 'created_at'])


def downgrade() -> None:
    """Drop messages table."""
    op.drop_index('idx_chat_messages', table_name='messages')
    op.drop_table('messages')
