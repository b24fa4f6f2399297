"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the snippets table:
    - id: UUID primary key
    - path: unique lookup key
    - expires_at: indexed for expiry sweeps
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    # Tables may already exist when the service created them on startup
    if 'snippets' in existing_tables:
        return

    op.create_table(
        'snippets',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('path', sa.String(length=128), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('ttl_seconds', sa.Integer(), nullable=False),
        sa.Column('is_one_time', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_consumed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index('ix_snippets_path', 'snippets', ['path'], unique=True)
    op.create_index('ix_snippets_expires_at', 'snippets', ['expires_at'])


def downgrade() -> None:
    """Drop the snippets table and its indexes."""
    op.drop_index('ix_snippets_expires_at', table_name='snippets')
    op.drop_index('ix_snippets_path', table_name='snippets')
    op.drop_table('snippets')
