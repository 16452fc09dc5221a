"""
Error types raised by the pipeline services and rendered as JSON by the app.
"""
import logging
from flask import jsonify

logger = logging.getLogger(__name__)


class PipelineError(Exception):
    """Base error carrying the HTTP status to respond with."""
    status_code = 500

    def __init__(self, message, status_code=None, details=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self):
        payload = {'error': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationError(PipelineError):
    status_code = 400


class NotFoundError(PipelineError):
    status_code = 404


class ConflictError(PipelineError):
    status_code = 409


class AIGatewayError(PipelineError):
    """Upstream AI failure: 429 rate limit, 402 credits exhausted, 500 otherwise."""
    status_code = 500


def handle_pipeline_error(error):
    if error.status_code >= 500:
        logger.error(f"Pipeline error: {error.message}")
    else:
        logger.info(f"Request rejected ({error.status_code}): {error.message}")
    return jsonify(error.to_dict()), error.status_code


def register_error_handlers(app):
    """Render PipelineError subclasses as `{error: ...}` JSON."""
    from talentflow_app.models import db

    app.register_error_handler(PipelineError, handle_pipeline_error)

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'error': 'Internal server error'}), 500
