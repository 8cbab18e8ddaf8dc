"""initial review schema

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2026-10-19 10:12:44.301223

"""

# revision identifiers, used by Alembic.
revision = '3f1c2a7d9b10'
down_revision = None

from alembic import op
import sqlalchemy as sa


def upgrade():
    op.create_table('user',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('email', sa.String(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('created', sa.DateTime(), nullable=False),
    sa.Column('picture', sa.String(), nullable=True),
    sa.Column('bio', sa.String(), nullable=True),
    sa.Column('company', sa.String(), nullable=True),
    sa.Column('address', sa.String(), nullable=True),
    sa.Column('references', sa.String(), nullable=True),
    sa.Column('socials', sa.JSON(), nullable=False),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_user'))
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)
    op.create_index(op.f('ix_user_name'), 'user', ['name'], unique=False)
    op.create_index('ix_user_email_lower', 'user', [sa.text('lower(email)')], unique=True)

    op.create_table('team',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('slug', sa.String(), nullable=False),
    sa.Column('invitation_code', sa.String(), nullable=False),
    sa.Column('created', sa.DateTime(), nullable=False),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_team')),
    sa.UniqueConstraint('invitation_code', name=op.f('uq_team_invitation_code'))
    )
    op.create_index(op.f('ix_team_slug'), 'team', ['slug'], unique=True)

    op.create_table('team_member',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('member_id', sa.Integer(), nullable=False),
    sa.Column('team_id', sa.Integer(), nullable=False),
    sa.Column('role', sa.String(), nullable=False),
    sa.Column('created', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['member_id'], ['user.id'], name=op.f('fk_team_member_member_id_user')),
    sa.ForeignKeyConstraint(['team_id'], ['team.id'], name=op.f('fk_team_member_team_id_team')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_team_member')),
    sa.UniqueConstraint('member_id', 'team_id', name='_team_member_uniq')
    )

    op.create_table('event',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('team_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('slug', sa.String(), nullable=False),
    sa.Column('type', sa.String(), nullable=False),
    sa.Column('created', sa.DateTime(), nullable=False),
    sa.Column('display_proposals_speakers', sa.Boolean(), nullable=False),
    sa.Column('display_proposals_reviews', sa.Boolean(), nullable=False),
    sa.Column('review_enabled', sa.Boolean(), nullable=False),
    sa.ForeignKeyConstraint(['team_id'], ['team.id'], name=op.f('fk_event_team_id_team')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_event'))
    )
    op.create_index(op.f('ix_event_slug'), 'event', ['slug'], unique=True)

    for table in ('event_category', 'event_format'):
        op.create_table(table,
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['event_id'], ['event.id'], name=op.f(f'fk_{table}_event_id_event')),
        sa.PrimaryKeyConstraint('id', name=op.f(f'pk_{table}'))
        )

    op.create_table('talk',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('creator_id', sa.Integer(), nullable=False),
    sa.Column('created', sa.DateTime(), nullable=False),
    sa.Column('modified', sa.DateTime(), nullable=False),
    sa.Column('title', sa.String(), nullable=False),
    sa.Column('abstract', sa.String(), nullable=False),
    sa.Column('references', sa.String(), nullable=True),
    sa.Column('level', sa.String(), nullable=True),
    sa.Column('languages', sa.JSON(), nullable=False),
    sa.Column('archived', sa.Boolean(), nullable=False),
    sa.ForeignKeyConstraint(['creator_id'], ['user.id'], name=op.f('fk_talk_creator_id_user')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_talk'))
    )

    op.create_table('talk_speaker',
    sa.Column('talk_id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['talk_id'], ['talk.id'], name=op.f('fk_talk_speaker_talk_id_talk')),
    sa.ForeignKeyConstraint(['user_id'], ['user.id'], name=op.f('fk_talk_speaker_user_id_user')),
    sa.PrimaryKeyConstraint('talk_id', 'user_id', name=op.f('pk_talk_speaker'))
    )
    op.create_index(op.f('ix_talk_speaker_user_id'), 'talk_speaker', ['user_id'], unique=False)

    op.create_table('proposal',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('talk_id', sa.Integer(), nullable=True),
    sa.Column('event_id', sa.Integer(), nullable=False),
    sa.Column('created', sa.DateTime(), nullable=False),
    sa.Column('modified', sa.DateTime(), nullable=False),
    sa.Column('title', sa.String(), nullable=False),
    sa.Column('abstract', sa.String(), nullable=False),
    sa.Column('references', sa.String(), nullable=True),
    sa.Column('comments', sa.String(), nullable=True),
    sa.Column('level', sa.String(), nullable=True),
    sa.Column('languages', sa.JSON(), nullable=False),
    sa.Column('deliberation_status', sa.String(), nullable=False),
    sa.Column('confirmation_status', sa.String(), nullable=True),
    sa.Column('publication_status', sa.String(), nullable=False),
    sa.Column('invitation_code', sa.String(), nullable=False),
    sa.ForeignKeyConstraint(['event_id'], ['event.id'], name=op.f('fk_proposal_event_id_event')),
    sa.ForeignKeyConstraint(['talk_id'], ['talk.id'], name=op.f('fk_proposal_talk_id_talk')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_proposal')),
    sa.UniqueConstraint('invitation_code', name=op.f('uq_proposal_invitation_code'))
    )
    op.create_index(op.f('ix_proposal_event_id'), 'proposal', ['event_id'], unique=False)

    op.create_table('proposal_speaker',
    sa.Column('proposal_id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['proposal_id'], ['proposal.id'], name=op.f('fk_proposal_speaker_proposal_id_proposal')),
    sa.ForeignKeyConstraint(['user_id'], ['user.id'], name=op.f('fk_proposal_speaker_user_id_user')),
    sa.PrimaryKeyConstraint('proposal_id', 'user_id', name=op.f('pk_proposal_speaker'))
    )
    op.create_index(op.f('ix_proposal_speaker_user_id'), 'proposal_speaker', ['user_id'], unique=False)

    op.create_table('proposal_category',
    sa.Column('proposal_id', sa.Integer(), nullable=False),
    sa.Column('category_id', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['category_id'], ['event_category.id'], name=op.f('fk_proposal_category_category_id_event_category')),
    sa.ForeignKeyConstraint(['proposal_id'], ['proposal.id'], name=op.f('fk_proposal_category_proposal_id_proposal')),
    sa.PrimaryKeyConstraint('proposal_id', 'category_id', name=op.f('pk_proposal_category'))
    )

    op.create_table('proposal_format',
    sa.Column('proposal_id', sa.Integer(), nullable=False),
    sa.Column('format_id', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['format_id'], ['event_format.id'], name=op.f('fk_proposal_format_format_id_event_format')),
    sa.ForeignKeyConstraint(['proposal_id'], ['proposal.id'], name=op.f('fk_proposal_format_proposal_id_proposal')),
    sa.PrimaryKeyConstraint('proposal_id', 'format_id', name=op.f('pk_proposal_format'))
    )

    op.create_table('review',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('proposal_id', sa.Integer(), nullable=False),
    sa.Column('created', sa.DateTime(), nullable=False),
    sa.Column('modified', sa.DateTime(), nullable=False),
    sa.Column('feeling', sa.String(), nullable=False),
    sa.Column('note', sa.Integer(), nullable=True),
    sa.Column('comment', sa.String(), nullable=True),
    sa.ForeignKeyConstraint(['proposal_id'], ['proposal.id'], name=op.f('fk_review_proposal_id_proposal')),
    sa.ForeignKeyConstraint(['user_id'], ['user.id'], name=op.f('fk_review_user_id_user')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_review'))
    )
    op.create_index('ix_review_user_id_proposal_id', 'review', ['user_id', 'proposal_id'], unique=True)


def downgrade():
    op.drop_index('ix_review_user_id_proposal_id', table_name='review')
    op.drop_table('review')
    op.drop_table('proposal_format')
    op.drop_table('proposal_category')
    op.drop_index(op.f('ix_proposal_speaker_user_id'), table_name='proposal_speaker')
    op.drop_table('proposal_speaker')
    op.drop_index(op.f('ix_proposal_event_id'), table_name='proposal')
    op.drop_table('proposal')
    op.drop_index(op.f('ix_talk_speaker_user_id'), table_name='talk_speaker')
    op.drop_table('talk_speaker')
    op.drop_table('talk')
    op.drop_table('event_format')
    op.drop_table('event_category')
    op.drop_index(op.f('ix_event_slug'), table_name='event')
    op.drop_table('event')
    op.drop_table('team_member')
    op.drop_index(op.f('ix_team_slug'), table_name='team')
    op.drop_table('team')
    op.drop_index('ix_user_email_lower', table_name='user')
    op.drop_index(op.f('ix_user_name'), table_name='user')
    op.drop_index(op.f('ix_user_email'), table_name='user')
    op.drop_table('user')
