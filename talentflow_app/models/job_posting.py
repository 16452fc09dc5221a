"""
JobPosting model.
"""
from datetime import datetime
from talentflow_app.models.base import db, generate_uuid


class JobPosting(db.Model):
    """Job postings owned by an employer."""
    __tablename__ = 'job_postings'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    user_id = db.Column(
        db.String(36),
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )

    # Core metadata
    title = db.Column(db.String(255), nullable=False)
    company_name = db.Column(db.String(255))
    location = db.Column(db.String(255))
    experience_required = db.Column(db.String(100))

    # Description / requirements used by the AI prompts
    description = db.Column(db.Text)
    requirements = db.Column(db.Text)
    skills = db.Column(db.JSON, default=list)

    # Status: draft, published, closed
    status = db.Column(db.String(50), default='published', index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    pipeline_records = db.relationship(
        'InterviewCandidate',
        backref='job_posting',
        lazy='dynamic',
        cascade='all, delete-orphan',
    )

    @property
    def display_company_name(self):
        if self.company_name:
            return self.company_name
        employer = self.employer
        if employer is not None:
            return employer.company_name or employer.full_name
        return 'TalentFlow'

    def to_dict(self, include_description=False):
        return {
            'id': self.id,
            'title': self.title,
            'company_name': self.display_company_name,
            'location': self.location,
            'experience_required': self.experience_required,
            'skills': self.skills or [],
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            **(
                {
                    'description': self.description,
                    'requirements': self.requirements,
                }
                if include_description
                else {}
            ),
        }
