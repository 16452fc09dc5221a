"""
Candidate profile model.
"""
from datetime import datetime
from sqlalchemy import Index
from talentflow_app.models.base import db, generate_uuid


class Candidate(db.Model):
    """A person applying to job postings."""
    __tablename__ = 'candidates'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)

    # Basic info
    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), index=True)
    phone = db.Column(db.String(50))
    location = db.Column(db.String(255))

    # Profile data used for screening prompts
    experience_level = db.Column(db.String(100))
    preferred_role = db.Column(db.String(255))
    education = db.Column(db.Text)
    skills = db.Column(db.JSON, default=list)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('idx_candidate_email_name', 'email', 'full_name'),
    )

    @property
    def first_name(self):
        return (self.full_name or 'Candidate').split()[0]

    def to_dict(self):
        return {
            'id': self.id,
            'full_name': self.full_name,
            'email': self.email,
            'phone': self.phone,
            'location': self.location,
            'experience_level': self.experience_level,
            'preferred_role': self.preferred_role,
            'education': self.education,
            'skills': self.skills or [],
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
