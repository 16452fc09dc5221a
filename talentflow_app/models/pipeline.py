"""
Interview pipeline models: stage catalog, per-application records and the
stage event log.
"""
from datetime import datetime
from talentflow_app.models.base import db, generate_uuid

RECORD_ACTIVE = 'active'
RECORD_REJECTED = 'rejected'
RECORD_HIRED = 'hired'
RECORD_STATUSES = (RECORD_ACTIVE, RECORD_REJECTED, RECORD_HIRED)

EVENT_PENDING = 'pending'
EVENT_SCHEDULED = 'scheduled'
EVENT_IN_PROGRESS = 'in_progress'
EVENT_COMPLETED = 'completed'
EVENT_PASSED = 'passed'
EVENT_FAILED = 'failed'
EVENT_STATUSES = (
    EVENT_PENDING, EVENT_SCHEDULED, EVENT_IN_PROGRESS,
    EVENT_COMPLETED, EVENT_PASSED, EVENT_FAILED,
)


class InterviewStage(db.Model):
    """One named step in the fixed interview sequence."""
    __tablename__ = 'interview_stages'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    name = db.Column(db.String(128), nullable=False, unique=True)
    stage_order = db.Column(db.Integer, nullable=False, unique=True, index=True)
    is_ai_automated = db.Column(db.Boolean, nullable=False, default=False)
    description = db.Column(db.Text)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'stage_order': self.stage_order,
            'is_ai_automated': self.is_ai_automated,
            'description': self.description,
        }


class InterviewCandidate(db.Model):
    """A candidate's progress through the pipeline for one job posting."""
    __tablename__ = 'interview_candidates'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    job_posting_id = db.Column(
        db.String(36),
        db.ForeignKey('job_postings.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    candidate_id = db.Column(
        db.String(36),
        db.ForeignKey('candidates.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    # NULL means the record has not been placed yet and sits at stage 1
    current_stage_id = db.Column(
        db.String(36), db.ForeignKey('interview_stages.id', ondelete='SET NULL')
    )

    ai_score = db.Column(db.Integer)
    ai_analysis = db.Column(db.JSON)
    status = db.Column(db.String(20), nullable=False, default=RECORD_ACTIVE, index=True)
    resume_url = db.Column(db.String(500))

    applied_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    candidate = db.relationship('Candidate', backref=db.backref('pipeline_records', lazy='dynamic'))
    current_stage = db.relationship('InterviewStage')
    events = db.relationship(
        'InterviewEvent',
        backref='interview_candidate',
        lazy='dynamic',
        cascade='all, delete-orphan',
        order_by='InterviewEvent.created_at',
    )

    __table_args__ = (
        db.UniqueConstraint('job_posting_id', 'candidate_id', name='uq_interview_candidates_job_candidate'),
    )

    @property
    def is_active(self):
        return self.status == RECORD_ACTIVE

    def to_dict(self):
        return {
            'id': self.id,
            'job_posting_id': self.job_posting_id,
            'candidate_id': self.candidate_id,
            'current_stage_id': self.current_stage_id,
            'current_stage': self.current_stage.name if self.current_stage else None,
            'ai_score': self.ai_score,
            'ai_analysis': self.ai_analysis or {},
            'status': self.status,
            'resume_url': self.resume_url,
            'applied_at': self.applied_at.isoformat() if self.applied_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class InterviewEvent(db.Model):
    """Logged outcome of a pipeline record at one stage."""
    __tablename__ = 'interview_events'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    interview_candidate_id = db.Column(
        db.String(36),
        db.ForeignKey('interview_candidates.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    stage_id = db.Column(
        db.String(36),
        db.ForeignKey('interview_stages.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )

    status = db.Column(db.String(20), nullable=False, default=EVENT_PENDING)
    ai_score = db.Column(db.Integer)
    ai_feedback = db.Column(db.JSON)
    notes = db.Column(db.Text)

    scheduled_at = db.Column(db.DateTime)
    completed_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    stage = db.relationship('InterviewStage')

    __table_args__ = (
        db.Index('idx_interview_events_record_stage', 'interview_candidate_id', 'stage_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'interview_candidate_id': self.interview_candidate_id,
            'stage_id': self.stage_id,
            'stage': self.stage.name if self.stage else None,
            'status': self.status,
            'ai_score': self.ai_score,
            'ai_feedback': self.ai_feedback,
            'notes': self.notes,
            'scheduled_at': self.scheduled_at.isoformat() if self.scheduled_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
