"""Create plants table

Revision ID: 001
Revises: 
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create plants table"""

    # Timestamps are epoch milliseconds (UTC)
    op.create_table('plants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('last_watered_at', sa.BigInteger(), nullable=False),
        sa.Column('photo_ref', sa.Text(), nullable=True),
        sa.Column('reminder_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reminder_hour', sa.Integer(), nullable=False, server_default='9'),
        sa.Column('reminder_minute', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reminder_handle', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.BigInteger(), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('reminder_hour BETWEEN 0 AND 23', name='ck_plants_reminder_hour'),
        sa.CheckConstraint('reminder_minute BETWEEN 0 AND 59', name='ck_plants_reminder_minute'),
    )

    op.create_index('ix_plants_created_at', 'plants', ['created_at'])
    op.create_index('ix_plants_reminder_enabled', 'plants', ['reminder_enabled'])


def downgrade() -> None:
    """Drop plants table"""
    op.drop_index('ix_plants_reminder_enabled', table_name='plants')
    op.drop_index('ix_plants_created_at', table_name='plants')
    op.drop_table('plants')
