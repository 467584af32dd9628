"""candidates, profiles and user_interactions

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-09-01 10:00:00

"""
from alembic import op
import sqlalchemy as sa


revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

CATEGORIES = ('presidente', 'camara_diputados', 'camara_senadores_nacional',
              'camara_senadores_regional', 'parlamento_andino')
ORIENTATIONS = ('izquierda', 'derecha', 'centro')


def upgrade():
    op.create_table(
        'candidates',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('photo_url', sa.String(length=500), nullable=False),
        sa.Column('party', sa.String(length=200), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('orientation', sa.Enum(*ORIENTATIONS, name='political_orientation'), nullable=False),
        sa.Column('category', sa.Enum(*CATEGORIES, name='political_category'), nullable=False),
        sa.Column('party_background', sa.Text(), nullable=True),
        sa.Column('proposals_2026', sa.Text(), nullable=True),
        sa.Column('criminal_record', sa.Text(), nullable=True),
        sa.Column('recent_news', sa.JSON(), nullable=True),
        sa.Column('projects', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('age > 0', name='ck_candidates_age_positive'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('dni', sa.String(length=20), nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('voting_location', sa.String(length=255), nullable=True),
        sa.Column('is_poll_worker', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'user_interactions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('candidate_id', sa.String(length=36), nullable=False),
        sa.Column('interaction_type', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidates.id']),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'candidate_id', name='uq_user_interactions_user_candidate'),
    )
    op.create_index('ix_user_interactions_user_id', 'user_interactions', ['user_id'])


def downgrade():
    op.drop_index('ix_user_interactions_user_id', table_name='user_interactions')
    op.drop_table('user_interactions')
    op.drop_table('profiles')
    op.drop_table('candidates')
    sa.Enum(name='political_category').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='political_orientation').drop(op.get_bind(), checkfirst=True)
