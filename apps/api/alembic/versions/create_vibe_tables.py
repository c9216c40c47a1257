"""create vibe time rules and speaker settings tables

Revision ID: create_vibe_tables
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision: str = 'create_vibe_tables'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JsonList = sa.JSON().with_variant(JSONB(), 'postgresql')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'vibe_time_rules',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('household_name', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('start_hour', sa.Integer(), nullable=False),
        sa.Column('end_hour', sa.Integer(), nullable=False),
        sa.Column('allowed_vibes', JsonList, nullable=False),
        sa.Column('days', JsonList, nullable=True),
        sa.Column('rule_type', sa.String(), nullable=False, server_default='base'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.CheckConstraint('start_hour >= 0 AND start_hour <= 23', name='ck_vibe_time_rules_start_hour'),
        sa.CheckConstraint('end_hour >= 0 AND end_hour <= 23', name='ck_vibe_time_rules_end_hour'),
        sa.CheckConstraint("rule_type IN ('base', 'override')", name='ck_vibe_time_rules_rule_type'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_vibe_time_rules_household_name'), 'vibe_time_rules', ['household_name'], unique=False)

    op.create_table(
        'playlist_vibes',
        sa.Column('playlist_id', sa.String(), nullable=False),
        sa.Column('vibe', sa.String(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('playlist_id'),
    )

    op.create_table(
        'hidden_favorites',
        sa.Column('favorite_id', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('favorite_id'),
    )

    op.create_table(
        'speaker_volumes',
        sa.Column('player_id', sa.String(), nullable=False),
        sa.Column('volume', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.CheckConstraint('volume >= 0 AND volume <= 100', name='ck_speaker_volumes_volume'),
        sa.PrimaryKeyConstraint('player_id'),
    )

    op.create_table(
        'device_tokens',
        sa.Column('device_id', sa.String(), nullable=False),
        sa.Column('access_token', sa.String(), nullable=True),
        sa.Column('refresh_token', sa.String(), nullable=True),
        sa.Column('expires_at', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('device_id'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('device_tokens')
    op.drop_table('speaker_volumes')
    op.drop_table('hidden_favorites')
    op.drop_table('playlist_vibes')
    op.drop_index(op.f('ix_vibe_time_rules_household_name'), table_name='vibe_time_rules')
    op.drop_table('vibe_time_rules')
