"""Create jobs and job_applications tables

Revision ID: 20261019_0007
Revises: 20261019_0006
Create Date: 2026-10-19 00:07:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20261019_0007'
down_revision: str | None = '20261019_0006'
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create jobs and job_applications tables."""
    op.create_table(
        'jobs',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('client_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('client_name', sa.String(100), nullable=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('service', sa.String(100), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('budget', sa.Numeric(12, 2), nullable=False),
        sa.Column('budget_type', sa.String(20), nullable=False, server_default='Fixed'),
        sa.Column('start_date', sa.String(50), nullable=True),
        sa.Column('end_date', sa.String(50), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='Open'),
        sa.Column('requirements', sa.JSON, nullable=True),
        sa.Column('visibility', sa.String(20), nullable=False, server_default='Subscribers Only'),
        sa.Column(
            'selected_worker_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True
        ),
        sa.Column('posted_date', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "status IN ('Open', 'In Progress', 'Completed', 'Cancelled')", name='jobs_status_check'
        ),
        sa.CheckConstraint('budget >= 0', name='jobs_budget_check'),
    )

    op.create_index('idx_jobs_status_posted', 'jobs', ['status', 'posted_date'])
    op.create_index('idx_jobs_client', 'jobs', ['client_id', 'posted_date'])

    op.create_table(
        'job_applications',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('job_id', sa.Uuid, sa.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('worker_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('proposal', sa.Text, nullable=True),
        sa.Column('proposed_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('applied_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('job_id', 'worker_id', name='uq_job_applications_job_worker'),
    )

    op.create_index('idx_job_applications_job', 'job_applications', ['job_id', 'applied_at'])


def downgrade() -> None:
    """Drop job_applications and jobs tables."""
    op.drop_index('idx_job_applications_job', table_name='job_applications')
    op.drop_table('job_applications')
    op.drop_index('idx_jobs_client', table_name='jobs')
    op.drop_index('idx_jobs_status_posted', table_name='jobs')
    op.drop_table('jobs')
