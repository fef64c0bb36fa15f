"""create room, participant, round, participation and score tables

Revision ID: 3a7c1e9d2b40
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3a7c1e9d2b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'room' not in existing_tables:
        op.create_table(
            'room',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('current_round_id', sa.String(length=36), nullable=True),
            sa.Column('current_participation_id', sa.String(length=36), nullable=True),
        )
        op.create_index('ix_room_created_at', 'room', ['created_at'])

    if 'participant' not in existing_tables:
        op.create_table(
            'participant',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('pronouns', sa.String(length=64), nullable=True),
            sa.Column('room_id', sa.String(length=36), sa.ForeignKey('room.id'), nullable=False),
        )
        op.create_index('ix_participant_name', 'participant', ['name'])
        op.create_index('ix_participant_room_id', 'participant', ['room_id'])

    if 'round' not in existing_tables:
        op.create_table(
            'round',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('round_number', sa.Integer(), nullable=False),
            sa.Column('room_id', sa.String(length=36), nullable=False),
            sa.UniqueConstraint('room_id', 'round_number', name='uq_round_room_round_number'),
        )
        op.create_index('ix_round_room_id', 'round', ['room_id'])

    if 'participation' not in existing_tables:
        op.create_table(
            'participation',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('round_id', sa.String(length=36), sa.ForeignKey('round.id'), nullable=False),
            sa.Column('participant_id', sa.String(length=36), nullable=False),
            sa.Column('performance_order', sa.Integer(), nullable=False),
            sa.Column('performance_length_in_seconds', sa.Integer(), nullable=True),
            sa.Column('performance_notes', sa.Text(), nullable=True),
            sa.Column('deduction', sa.Float(), nullable=True),
            sa.Column('score', sa.Float(), nullable=True),
        )
        op.create_index('ix_participation_round_id', 'participation', ['round_id'])
        op.create_index('ix_participation_participant_id', 'participation', ['participant_id'])

    if 'score' not in existing_tables:
        op.create_table(
            'score',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('participation_id', sa.String(length=36), sa.ForeignKey('participation.id'), nullable=False),
            sa.Column('submitter_id', sa.String(length=64), nullable=True),
            sa.Column('value', sa.Float(), nullable=False),
        )
        op.create_index('ix_score_participation_id', 'score', ['participation_id'])


def downgrade():
    op.drop_table('score')
    op.drop_table('participation')
    op.drop_table('round')
    op.drop_table('participant')
    op.drop_table('room')
