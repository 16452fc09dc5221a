"""
User model for employer authentication.
"""
import uuid
from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from talentflow_app.models.base import db

ROLE_EMPLOYER = 'employer'
ROLE_ADMIN = 'admin'
ROLE_CANDIDATE = 'candidate'
ROLES = (ROLE_EMPLOYER, ROLE_ADMIN, ROLE_CANDIDATE)
EMPLOYER_ROLES = (ROLE_EMPLOYER, ROLE_ADMIN)


class User(UserMixin, db.Model):
    """Employer or admin account."""
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    company_name = db.Column(db.String(255))
    role = db.Column(db.String(20), nullable=False, default=ROLE_EMPLOYER)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login_at = db.Column(db.DateTime)

    # Relationships
    job_postings = db.relationship('JobPosting', backref='employer', lazy='dynamic',
                                   cascade='all, delete-orphan')

    def set_password(self, password):
        # Use pbkdf2 instead of scrypt for compatibility with LibreSSL
        self.password_hash = generate_password_hash(password, method='pbkdf2:sha256')

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'company_name': self.company_name,
            'role': self.role,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
