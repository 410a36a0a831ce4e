"""create game, moment and vote tables

Revision ID: 4c7d2e9a1b30
Revises:
Create Date: 2025-09-06 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c7d2e9a1b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'game',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.String(length=32), nullable=False),
        sa.Column('opponents', sa.String(length=128), nullable=False),
        sa.Column('team_name', sa.String(length=128), nullable=False),
        sa.Column('club_name', sa.String(length=128), nullable=False),
        sa.Column('team_sheet', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='open'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'moment',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('game_id', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['game_id'], ['game.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_moment_game_id', 'moment', ['game_id'])
    op.create_table(
        'vote',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('game_id', sa.Integer(), nullable=False),
        sa.Column('voter_name', sa.String(length=128), nullable=False),
        sa.Column('voter_token', sa.String(length=128), nullable=False),
        sa.Column('mom_player', sa.String(length=128), nullable=True),
        sa.Column('mom_comment', sa.Text(), nullable=True),
        sa.Column('dod_player', sa.String(length=128), nullable=True),
        sa.Column('dod_comment', sa.Text(), nullable=True),
        sa.Column('moment_id', sa.Integer(), nullable=True),
        sa.Column('moment_comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['game_id'], ['game.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('game_id', 'voter_token', name='uq_vote_game_voter'),
    )
    op.create_index('ix_vote_game_id', 'vote', ['game_id'])


def downgrade():
    op.drop_index('ix_vote_game_id', table_name='vote')
    op.drop_table('vote')
    op.drop_index('ix_moment_game_id', table_name='moment')
    op.drop_table('moment')
    op.drop_table('game')
