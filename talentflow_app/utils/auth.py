"""
Authentication and authorization utilities for TalentFlow.
Session auth for employer endpoints, ownership checks and audit logging.
"""
import re
import json
import logging
from functools import wraps
from flask import request, jsonify, has_request_context
from flask_login import current_user
from talentflow_app.models import db, AuditLog
from talentflow_app.models.user import EMPLOYER_ROLES

logger = logging.getLogger(__name__)


def validate_email(email):
    """Validate email format."""
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email or ''))


def log_audit(user_id, action, resource_type=None, resource_id=None, details=None):
    """Create an audit log entry."""
    ip_address = None
    user_agent = None
    if has_request_context():
        ip_address = request.remote_addr
        user_agent = request.user_agent.string[:255] if request.user_agent else None

    try:
        log = AuditLog(
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            details=json.dumps(details, default=str) if details else None,
            ip_address=ip_address,
            user_agent=user_agent
        )
        db.session.add(log)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.exception(f"Audit log error: {e}")


def api_login_required(f):
    """Decorator for API endpoints that require authentication."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            logger.warning(f"Unauthenticated API request to {request.path}")
            return jsonify({'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function


def employer_required(f):
    """Authenticated employer or admin; other roles get 403."""
    @wraps(f)
    @api_login_required
    def decorated_function(*args, **kwargs):
        if current_user.role not in EMPLOYER_ROLES:
            log_audit(current_user.id, 'unauthorized_access_attempt', details={'path': request.path})
            return jsonify({'error': 'Employer access required'}), 403
        return f(*args, **kwargs)
    return decorated_function


def get_current_user_id():
    """Get the current authenticated user's ID."""
    if current_user.is_authenticated:
        return current_user.id
    return None


def can_manage_job(job_posting, user=None):
    """
    True when the user owns the job posting or is an admin.
    """
    user = user or current_user
    if not user or not user.is_authenticated or job_posting is None:
        return False
    if user.is_admin:
        return True
    return job_posting.user_id == user.id


def can_manage_record(record, user=None):
    """Ownership check for a pipeline record, through its job posting."""
    if record is None:
        return False
    return can_manage_job(record.job_posting, user)
