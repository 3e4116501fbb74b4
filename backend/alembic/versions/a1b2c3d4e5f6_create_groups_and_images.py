"""create_groups_and_images

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the groups and images tables."""
    op.create_table(
        'groups',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=False),
        sa.Column('name', sa.String(255), nullable=False),
    )

    # group_id references groups.id without a foreign key
    op.create_table(
        'images',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('filename', sa.String(255), nullable=False),
        sa.Column('file_id', sa.String(255), nullable=False),
        sa.Column('sender', sa.String(255), nullable=False, server_default=''),
        sa.Column('chat_id', sa.BigInteger(), nullable=False),
        sa.Column('group_id', sa.BigInteger(), nullable=False),
        sa.Column('caption', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_index('ix_images_created_at', 'images', ['created_at'])
    op.create_index('ix_images_group_created', 'images', ['group_id', 'created_at'])


def downgrade() -> None:
    """Drop the groups and images tables."""
    op.drop_index('ix_images_group_created', table_name='images')
    op.drop_index('ix_images_created_at', table_name='images')
    op.drop_table('images')
    op.drop_table('groups')
