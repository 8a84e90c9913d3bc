"""create game_events

Revision ID: 4b7c9d2e1f30
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4b7c9d2e1f30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'game_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('socket_id', sa.String(length=64), nullable=False),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('room_code', sa.String(length=16), nullable=True),
        sa.Column('event_type', sa.String(length=32), nullable=False),
        sa.Column('player_mark', sa.String(length=1), nullable=True),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('game_events') as batch_op:
        batch_op.create_index('ix_game_events_created_at', ['created_at'])
        batch_op.create_index('ix_game_events_event_type', ['event_type'])


def downgrade():
    with op.batch_alter_table('game_events') as batch_op:
        batch_op.drop_index('ix_game_events_event_type')
        batch_op.drop_index('ix_game_events_created_at')
    op.drop_table('game_events')
