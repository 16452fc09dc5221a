"""
Invitation and assessment response models.
"""
from datetime import datetime
from talentflow_app.models.base import db, generate_uuid, generate_token

EMAIL_PENDING = 'pending'
EMAIL_SENT = 'sent'
EMAIL_FAILED = 'failed'


class InterviewInvitation(db.Model):
    """Single-use, time-boxed link that opens one stage's assessment."""
    __tablename__ = 'interview_invitations'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    interview_event_id = db.Column(
        db.String(36),
        db.ForeignKey('interview_events.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )

    # Secure token for URL
    invitation_token = db.Column(db.String(64), unique=True, nullable=False, index=True,
                                 default=generate_token)
    meeting_link = db.Column(db.String(500))

    # Email delivery: pending, sent, failed
    email_status = db.Column(db.String(20), default=EMAIL_PENDING)
    email_sent_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    expires_at = db.Column(db.DateTime, nullable=False)
    used_at = db.Column(db.DateTime)

    interview_event = db.relationship(
        'InterviewEvent',
        backref=db.backref('invitations', lazy='dynamic', cascade='all, delete-orphan'),
    )

    def is_expired(self, now=None):
        return (now or datetime.utcnow()) > self.expires_at

    def is_valid(self, now=None):
        """Check if invitation can still open an assessment (not expired, not used)."""
        if self.used_at is not None:
            return False
        return not self.is_expired(now)

    def to_dict(self):
        return {
            'id': self.id,
            'interview_event_id': self.interview_event_id,
            'invitation_token': self.invitation_token,
            'meeting_link': self.meeting_link,
            'email_status': self.email_status,
            'email_sent_at': self.email_sent_at.isoformat() if self.email_sent_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'expires_at': self.expires_at.isoformat() if self.expires_at else None,
            'used_at': self.used_at.isoformat() if self.used_at else None,
        }


class InterviewResponse(db.Model):
    """A candidate's answers to one AI-scored assessment."""
    __tablename__ = 'interview_responses'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    interview_event_id = db.Column(
        db.String(36),
        db.ForeignKey('interview_events.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )

    questions = db.Column(db.JSON, default=list)
    answers = db.Column(db.JSON)
    total_questions = db.Column(db.Integer, default=0)
    correct_answers = db.Column(db.Integer)
    score = db.Column(db.Integer)
    time_taken_seconds = db.Column(db.Integer)
    recording_url = db.Column(db.String(500))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    completed_at = db.Column(db.DateTime)

    interview_event = db.relationship(
        'InterviewEvent',
        backref=db.backref('responses', lazy='dynamic', cascade='all, delete-orphan'),
    )

    @property
    def is_completed(self):
        return self.completed_at is not None

    def to_dict(self):
        return {
            'id': self.id,
            'interview_event_id': self.interview_event_id,
            'total_questions': self.total_questions,
            'correct_answers': self.correct_answers,
            'score': self.score,
            'time_taken_seconds': self.time_taken_seconds,
            'recording_url': self.recording_url,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
        }
