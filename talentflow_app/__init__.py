"""
Flask application factory for TalentFlow.
"""
import logging
import os
from flask import Flask, jsonify


def create_app(config_name='default'):
    """Create and configure the Flask application."""
    # Import these inside the function to avoid import-time side effects
    from talentflow_app.config import config
    from talentflow_app.extensions import login_manager, migrate
    from talentflow_app.models import db, User
    from talentflow_app.utils.errors import register_error_handlers

    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])

    logging.basicConfig(
        level=getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    logger = logging.getLogger(__name__)

    # Class attributes are evaluated at import time; prefer the runtime value
    database_url = os.environ.get('DATABASE_URL')
    if database_url and not app.config.get('TESTING'):
        app.config['SQLALCHEMY_DATABASE_URI'] = database_url

    # Handle PostgreSQL URL format from Heroku/Railway
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('postgres://'):
        app.config['SQLALCHEMY_DATABASE_URI'] = app.config['SQLALCHEMY_DATABASE_URI'].replace(
            'postgres://', 'postgresql://', 1
        )

    db_uri = app.config['SQLALCHEMY_DATABASE_URI']
    db_type = 'postgresql' if 'postgresql' in db_uri else 'sqlite' if 'sqlite' in db_uri else 'unknown'
    logger.info(f"Starting TalentFlow ({config_name}), database: {db_type}")

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Authentication required'}), 401

    # Register blueprints
    from talentflow_app.api import auth_api, pipeline_api, interview_api

    app.register_blueprint(auth_api.bp)
    app.register_blueprint(pipeline_api.bp)
    app.register_blueprint(interview_api.bp)

    register_error_handlers(app)

    from talentflow_app.cli import register_commands
    register_commands(app)

    # Database initialization
    @app.before_request
    def ensure_tables():
        """Ensure database tables exist."""
        if not hasattr(app, '_db_initialized'):
            db.create_all()
            app._db_initialized = True

    return app


# NOTE: Do NOT create app at module level!
# Use wsgi.py as the entry point for gunicorn.
