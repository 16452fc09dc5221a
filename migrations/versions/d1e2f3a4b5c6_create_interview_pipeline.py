"""create core and interview pipeline tables, seed default stages

Revision ID: d1e2f3a4b5c6
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
import uuid


revision = 'd1e2f3a4b5c6'
down_revision = None
branch_labels = None
depends_on = None

DEFAULT_STAGES = [
    ('Resume Screening', 1, True),
    ('AI Phone Interview', 2, True),
    ('Technical Assessment', 3, False),
    ('HR Round', 4, False),
    ('Viva', 5, False),
    ('Final Review', 6, False),
    ('Offer Stage', 7, False),
]


def upgrade():
    conn = op.get_bind()
    insp = sa.inspect(conn)
    tables = insp.get_table_names()

    if 'users' not in tables:
        op.create_table(
            'users',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('email', sa.String(255), nullable=False),
            sa.Column('password_hash', sa.String(255), nullable=False),
            sa.Column('first_name', sa.String(100), nullable=False),
            sa.Column('last_name', sa.String(100), nullable=False),
            sa.Column('company_name', sa.String(255)),
            sa.Column('role', sa.String(20), nullable=False, server_default='employer'),
            sa.Column('created_at', sa.DateTime()),
            sa.Column('updated_at', sa.DateTime()),
            sa.Column('last_login_at', sa.DateTime()),
        )
        op.create_index('ix_users_email', 'users', ['email'], unique=True)

    if 'candidates' not in tables:
        op.create_table(
            'candidates',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('full_name', sa.String(255), nullable=False),
            sa.Column('email', sa.String(255)),
            sa.Column('phone', sa.String(50)),
            sa.Column('location', sa.String(255)),
            sa.Column('experience_level', sa.String(100)),
            sa.Column('preferred_role', sa.String(255)),
            sa.Column('education', sa.Text()),
            sa.Column('skills', sa.JSON()),
            sa.Column('created_at', sa.DateTime()),
            sa.Column('updated_at', sa.DateTime()),
        )
        op.create_index('ix_candidates_email', 'candidates', ['email'])

    if 'job_postings' not in tables:
        op.create_table(
            'job_postings',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
            sa.Column('title', sa.String(255), nullable=False),
            sa.Column('company_name', sa.String(255)),
            sa.Column('location', sa.String(255)),
            sa.Column('experience_required', sa.String(100)),
            sa.Column('description', sa.Text()),
            sa.Column('requirements', sa.Text()),
            sa.Column('skills', sa.JSON()),
            sa.Column('status', sa.String(50), server_default='published'),
            sa.Column('created_at', sa.DateTime()),
            sa.Column('updated_at', sa.DateTime()),
        )
        op.create_index('ix_job_postings_user_id', 'job_postings', ['user_id'])
        op.create_index('ix_job_postings_status', 'job_postings', ['status'])

    if 'audit_logs' not in tables:
        op.create_table(
            'audit_logs',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL')),
            sa.Column('action', sa.String(100), nullable=False),
            sa.Column('resource_type', sa.String(50)),
            sa.Column('resource_id', sa.String(36)),
            sa.Column('details', sa.Text()),
            sa.Column('ip_address', sa.String(50)),
            sa.Column('user_agent', sa.String(255)),
            sa.Column('created_at', sa.DateTime()),
        )
        op.create_index('ix_audit_logs_user_id', 'audit_logs', ['user_id'])
        op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])
        op.create_index('idx_audit_user_action', 'audit_logs', ['user_id', 'action'])

    if 'interview_stages' not in tables:
        op.create_table(
            'interview_stages',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('name', sa.String(128), nullable=False, unique=True),
            sa.Column('stage_order', sa.Integer(), nullable=False, unique=True),
            sa.Column('is_ai_automated', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('description', sa.Text()),
        )
        op.create_index('ix_interview_stages_stage_order', 'interview_stages', ['stage_order'], unique=True)

    if 'interview_candidates' not in tables:
        op.create_table(
            'interview_candidates',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('job_posting_id', sa.String(36), sa.ForeignKey('job_postings.id', ondelete='CASCADE'), nullable=False),
            sa.Column('candidate_id', sa.String(36), sa.ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False),
            sa.Column('current_stage_id', sa.String(36), sa.ForeignKey('interview_stages.id', ondelete='SET NULL')),
            sa.Column('ai_score', sa.Integer()),
            sa.Column('ai_analysis', sa.JSON()),
            sa.Column('status', sa.String(20), nullable=False, server_default='active'),
            sa.Column('resume_url', sa.String(500)),
            sa.Column('applied_at', sa.DateTime()),
            sa.Column('updated_at', sa.DateTime()),
            sa.UniqueConstraint('job_posting_id', 'candidate_id', name='uq_interview_candidates_job_candidate'),
        )
        op.create_index('ix_interview_candidates_job_posting_id', 'interview_candidates', ['job_posting_id'])
        op.create_index('ix_interview_candidates_candidate_id', 'interview_candidates', ['candidate_id'])
        op.create_index('ix_interview_candidates_status', 'interview_candidates', ['status'])

    if 'interview_events' not in tables:
        op.create_table(
            'interview_events',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('interview_candidate_id', sa.String(36),
                      sa.ForeignKey('interview_candidates.id', ondelete='CASCADE'), nullable=False),
            sa.Column('stage_id', sa.String(36), sa.ForeignKey('interview_stages.id', ondelete='CASCADE'), nullable=False),
            sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
            sa.Column('ai_score', sa.Integer()),
            sa.Column('ai_feedback', sa.JSON()),
            sa.Column('notes', sa.Text()),
            sa.Column('scheduled_at', sa.DateTime()),
            sa.Column('completed_at', sa.DateTime()),
            sa.Column('created_at', sa.DateTime()),
            sa.Column('updated_at', sa.DateTime()),
        )
        op.create_index('ix_interview_events_interview_candidate_id', 'interview_events', ['interview_candidate_id'])
        op.create_index('ix_interview_events_stage_id', 'interview_events', ['stage_id'])
        op.create_index('idx_interview_events_record_stage', 'interview_events', ['interview_candidate_id', 'stage_id'])

    if 'interview_invitations' not in tables:
        op.create_table(
            'interview_invitations',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('interview_event_id', sa.String(36),
                      sa.ForeignKey('interview_events.id', ondelete='CASCADE'), nullable=False),
            sa.Column('invitation_token', sa.String(64), nullable=False),
            sa.Column('meeting_link', sa.String(500)),
            sa.Column('email_status', sa.String(20), server_default='pending'),
            sa.Column('email_sent_at', sa.DateTime()),
            sa.Column('created_at', sa.DateTime()),
            sa.Column('expires_at', sa.DateTime(), nullable=False),
            sa.Column('used_at', sa.DateTime()),
        )
        op.create_index('ix_interview_invitations_interview_event_id', 'interview_invitations', ['interview_event_id'])
        op.create_index('ix_interview_invitations_invitation_token', 'interview_invitations',
                        ['invitation_token'], unique=True)

    if 'interview_responses' not in tables:
        op.create_table(
            'interview_responses',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('interview_event_id', sa.String(36),
                      sa.ForeignKey('interview_events.id', ondelete='CASCADE'), nullable=False),
            sa.Column('questions', sa.JSON()),
            sa.Column('answers', sa.JSON()),
            sa.Column('total_questions', sa.Integer(), server_default=sa.text('0')),
            sa.Column('correct_answers', sa.Integer()),
            sa.Column('score', sa.Integer()),
            sa.Column('time_taken_seconds', sa.Integer()),
            sa.Column('recording_url', sa.String(500)),
            sa.Column('created_at', sa.DateTime()),
            sa.Column('completed_at', sa.DateTime()),
        )
        op.create_index('ix_interview_responses_interview_event_id', 'interview_responses', ['interview_event_id'])

    for name, order_val, is_ai in DEFAULT_STAGES:
        exists = conn.execute(
            sa.text('SELECT 1 FROM interview_stages WHERE name = :name LIMIT 1'), {'name': name}
        ).fetchone()
        if exists:
            continue
        conn.execute(
            sa.text(
                'INSERT INTO interview_stages (id, name, stage_order, is_ai_automated) '
                'VALUES (:id, :name, :ord, :is_ai)'
            ),
            {'id': str(uuid.uuid4()), 'name': name, 'ord': order_val, 'is_ai': is_ai},
        )


def downgrade():
    op.drop_table('interview_responses')
    op.drop_table('interview_invitations')
    op.drop_table('interview_events')
    op.drop_table('interview_candidates')
    op.drop_table('interview_stages')
    op.drop_table('audit_logs')
    op.drop_table('job_postings')
    op.drop_table('candidates')
    op.drop_table('users')
