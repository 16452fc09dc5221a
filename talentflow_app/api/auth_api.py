"""
Session authentication API routes.
"""
from datetime import datetime
from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, current_user
from talentflow_app.models import db, User
from talentflow_app.utils.auth import api_login_required, validate_email, log_audit

bp = Blueprint('auth_api', __name__, url_prefix='/api/auth')


@bp.route('/login', methods=['POST'])
def login():
    """Log in with email and password."""
    data = request.json or {}
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''
    remember = bool(data.get('remember'))

    if not email or not validate_email(email) or not password:
        return jsonify({'error': 'Valid email and password are required'}), 400

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        log_audit(None, 'failed_login', details={'email': email})
        return jsonify({'error': 'Invalid email or password'}), 401

    user.last_login_at = datetime.utcnow()
    db.session.commit()

    login_user(user, remember=remember)
    log_audit(user.id, 'user_login')
    return jsonify({'success': True, 'user': user.to_dict()})


@bp.route('/logout', methods=['POST'])
@api_login_required
def logout():
    """Log out the current user."""
    log_audit(current_user.id, 'user_logout')
    logout_user()
    return jsonify({'success': True})
