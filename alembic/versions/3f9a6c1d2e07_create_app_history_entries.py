"""Create app_history_entries table

Revision ID: 3f9a6c1d2e07
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a6c1d2e07'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('app_history_entries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('package_name', sa.Text(), nullable=False),
        sa.Column('process', sa.Text(), nullable=False),
        sa.Column('installed', sa.Boolean(), nullable=False),
        sa.Column('count', sa.Integer(), nullable=False),
        sa.Column('last_access', sa.BigInteger(), nullable=False),
        sa.Column('decay_score', sa.Float(), nullable=False),
        sa.Column('last_update', sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('package_name', 'process', name='uq_app_history_package_process'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('app_history_entries')
