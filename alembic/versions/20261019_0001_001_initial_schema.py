"""Initial schema - bots, files and settings

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-19

Same tables init_db() creates, plus the default settings rows.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'bots',
        sa.Column('id', sa.String(32), primary_key=True),
        sa.Column('token', sa.String(255), unique=True, nullable=False),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('client_name', sa.String(100), nullable=False),
        sa.Column('channel_id', sa.String(64), nullable=False),
        sa.Column('channel_name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('is_active', sa.Boolean, server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('last_active', sa.DateTime, nullable=False),
    )
    op.create_index('ix_bots_created_at', 'bots', ['created_at'])

    op.create_table(
        'files',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('bot_id', sa.String(32), sa.ForeignKey('bots.id'), nullable=False),
        sa.Column('file_id', sa.String(255), nullable=False),
        sa.Column('file_name', sa.String(500), nullable=False),
        sa.Column('file_size', sa.BigInteger, nullable=False),
        sa.Column('file_type', sa.String(100), nullable=False),
        sa.Column('download_url', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('expires_at', sa.DateTime, nullable=True),
        sa.Column('download_count', sa.Integer, server_default='0', nullable=False),
    )
    op.create_index('ix_files_bot_id', 'files', ['bot_id'])
    op.create_index('ix_files_created_at', 'files', ['created_at'])
    op.create_index('ix_files_expires_at', 'files', ['expires_at'])

    settings_table = op.create_table(
        'settings',
        sa.Column('key', sa.String(100), primary_key=True),
        sa.Column('value', sa.Text, nullable=False),
    )
    op.bulk_insert(settings_table, [
        {'key': 'cache_time_minutes', 'value': '15'},
        {'key': 'max_cache_size_gb', 'value': '10'},
        {'key': 'max_file_size_mb', 'value': '100'},
    ])


def downgrade() -> None:
    op.drop_table('settings')
    op.drop_index('ix_files_expires_at', table_name='files')
    op.drop_index('ix_files_created_at', table_name='files')
    op.drop_index('ix_files_bot_id', table_name='files')
    op.drop_table('files')
    op.drop_index('ix_bots_created_at', table_name='bots')
    op.drop_table('bots')
