"""add_sector_snapshots

Revision ID: c4d5e6f7a8b9
Revises:
Create Date: 2026-10-19 09:12:31.408112

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c4d5e6f7a8b9'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema: add sector_snapshots table."""
    op.create_table('sector_snapshots',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('sector_id', sa.Integer(), nullable=False),
    sa.Column('payload', sa.JSON(), nullable=False),
    sa.Column('fetched_at', sa.DateTime(), nullable=False),
    sa.Column('expires_at', sa.DateTime(), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sector_snapshots_sector_id'), 'sector_snapshots', ['sector_id'], unique=True)
    op.create_index(op.f('ix_sector_snapshots_expires_at'), 'sector_snapshots', ['expires_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema: drop sector_snapshots table."""
    op.drop_index(op.f('ix_sector_snapshots_expires_at'), table_name='sector_snapshots')
    op.drop_index(op.f('ix_sector_snapshots_sector_id'), table_name='sector_snapshots')
    op.drop_table('sector_snapshots')
