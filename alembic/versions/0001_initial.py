"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Create contests table
    op.create_table('contests',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=64), nullable=True),
        sa.Column('current_round', sa.String(length=128), nullable=True),
        sa.Column('active_showdown_id', sa.String(length=64), nullable=True),
        sa.Column('judging_model', sa.String(length=64), nullable=True),
        sa.Column('judge_panel_size', sa.Integer(), nullable=True),
        sa.Column('event_id', sa.String(length=64), nullable=True),
        sa.Column('results_visibility', sa.String(length=32), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    # Create showdowns table
    op.create_table('showdowns',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('contest_id', sa.String(length=64), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=64), nullable=True),
        sa.Column('round', sa.String(length=128), nullable=True),
        sa.Column('match_number', sa.Integer(), nullable=True),
        sa.Column('vote_open_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('vote_close_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('red_couple_id', sa.String(length=64), nullable=True),
        sa.Column('blue_couple_id', sa.String(length=64), nullable=True),
        sa.Column('red_audience_votes', sa.Integer(), nullable=True),
        sa.Column('blue_audience_votes', sa.Integer(), nullable=True),
        sa.Column('winner', sa.String(length=8), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_showdowns_contest_id', 'showdowns', ['contest_id'])

    # Create couples table
    op.create_table('couples',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('contest_id', sa.String(length=64), nullable=True),
        sa.Column('lead_id', sa.String(length=64), nullable=True),
        sa.Column('follow_id', sa.String(length=64), nullable=True),
        sa.Column('lead_name', sa.String(length=255), nullable=True),
        sa.Column('follow_name', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_couples_contest_id', 'couples', ['contest_id'])

    # Create dancers table
    op.create_table('dancers',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    # Create audience_users table
    op.create_table('audience_users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    # Create votes table
    op.create_table('votes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('showdown_id', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('choice', sa.String(length=8), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('showdown_id', 'user_id', name='uq_vote_showdown_user')
    )

    # Create app_state table with its single row
    op.create_table('app_state',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('active_contest_id', sa.String(length=64), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.execute("INSERT INTO app_state (id, active_contest_id) VALUES (1, NULL)")

    # Create raw_snapshots table
    op.create_table('raw_snapshots',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('contest_id', sa.String(length=64), nullable=True),
        sa.Column('received_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_raw_snapshots_contest_received', 'raw_snapshots', ['contest_id', 'received_at'])


def downgrade() -> None:
    op.drop_index('idx_raw_snapshots_contest_received', table_name='raw_snapshots')
    op.drop_table('raw_snapshots')
    op.drop_table('app_state')
    op.drop_table('votes')
    op.drop_table('audience_users')
    op.drop_table('dancers')
    op.drop_index('idx_couples_contest_id', table_name='couples')
    op.drop_table('couples')
    op.drop_index('idx_showdowns_contest_id', table_name='showdowns')
    op.drop_table('showdowns')
    op.drop_table('contests')
