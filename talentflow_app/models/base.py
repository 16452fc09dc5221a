"""
Base database setup for TalentFlow.
"""
from flask_sqlalchemy import SQLAlchemy
import secrets
import uuid

db = SQLAlchemy()


def generate_uuid():
    """Generate a UUID string for primary keys."""
    return str(uuid.uuid4())


def generate_token():
    """Generate an unguessable URL-safe token for invitation links."""
    return secrets.token_urlsafe(32)
