"""initial_waitlist_schema

Revision ID: 3f1a9c2d7b40
Revises:
Create Date: 2026-10-16 09:12:31.204518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create applications and waitlist_entries."""

    op.create_table('applications',
        sa.Column('application_id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('application_name', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('application_id'),
        comment='Applications own waitlists; created out-of-band'
    )
    op.create_index('ix_applications_application_name', 'applications', ['application_name'], unique=False)

    op.create_table('waitlist_entries',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('application_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('source_url', sa.Text(), nullable=False),
        sa.Column('country', sa.String(length=3), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('referrer', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['application_id'], ['applications.application_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        # Duplicate detection relies on this constraint, not on application code
        sa.UniqueConstraint('application_id', 'email', name='uq_waitlist_entries_application_email'),
    )
    op.create_index('ix_waitlist_entries_created_at', 'waitlist_entries', ['created_at'], unique=False)
    op.create_index('ix_waitlist_entries_country', 'waitlist_entries', ['country'], unique=False)
    op.create_index('ix_waitlist_entries_application_id', 'waitlist_entries', ['application_id'], unique=False)

    op.create_check_constraint(
        'valid_email_format',
        'waitlist_entries',
        "email ~* '^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\\.[A-Za-z]{2,}$'",
    )


def downgrade() -> None:
    """Drop waitlist_entries and applications."""
    op.drop_constraint('valid_email_format', 'waitlist_entries', type_='check')
    op.drop_index('ix_waitlist_entries_application_id', table_name='waitlist_entries')
    op.drop_index('ix_waitlist_entries_country', table_name='waitlist_entries')
    op.drop_index('ix_waitlist_entries_created_at', table_name='waitlist_entries')
    op.drop_table('waitlist_entries')
    op.drop_index('ix_applications_application_name', table_name='applications')
    op.drop_table('applications')
