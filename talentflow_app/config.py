"""
Configuration management for TalentFlow.
"""
import hashlib
import logging
import os
from dotenv import load_dotenv

load_dotenv()


def _get_secret_key():
    """Read SECRET_KEY from env; support common alternate names and treat empty as unset."""
    for name in ("SECRET_KEY", "FLASK_SECRET_KEY"):
        val = os.environ.get(name)
        if val and isinstance(val, str) and val.strip():
            return val.strip()
    return None


def _production_secret_fallback():
    """Deterministic key from DATABASE_URL so all Gunicorn workers share the same key."""
    url = os.environ.get("DATABASE_URL") or ""
    if not url:
        return None
    return hashlib.sha256(url.encode()).hexdigest()


def _float_env(name, default):
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return float(default)


class Config:
    """Base configuration."""
    SECRET_KEY = _get_secret_key()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # AI gateway (OpenAI-compatible chat completions with tool calling)
    AI_GATEWAY_API_KEY = os.environ.get('AI_GATEWAY_API_KEY')
    AI_GATEWAY_URL = os.environ.get('AI_GATEWAY_URL', 'https://ai.gateway.lovable.dev/v1/chat/completions')
    AI_MODEL = os.environ.get('AI_MODEL', 'google/gemini-2.5-flash')
    AI_REQUEST_TIMEOUT = _float_env('AI_REQUEST_TIMEOUT', 60)

    # Transactional email (Resend)
    RESEND_API_KEY = os.environ.get('RESEND_API_KEY')
    EMAIL_FROM = os.environ.get('EMAIL_FROM', 'TalentFlow Hiring <onboarding@resend.dev>')

    # Links embedded in candidate emails
    APP_BASE_URL = os.environ.get('APP_BASE_URL', 'http://localhost:5000')

    INVITATION_TTL_DAYS = int(os.environ.get('INVITATION_TTL_DAYS', 7))
    # Seconds to wait between AI stage evaluations in one pipeline walk
    STAGE_EVALUATION_DELAY = _float_env('STAGE_EVALUATION_DELAY', 1.0)


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    _db_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'instance', 'talentflow.db')
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f'sqlite:///{_db_path}'
    )
    if not Config.SECRET_KEY:
        SECRET_KEY = "dev-secret-key-change-in-production"


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///instance/talentflow.db')
    if not Config.SECRET_KEY:
        _fallback = _production_secret_fallback()
        if _fallback:
            SECRET_KEY = _fallback
            logging.warning(
                "SECRET_KEY not set; using deterministic key from DATABASE_URL. "
                "Set SECRET_KEY in the environment for stronger security."
            )
        else:
            SECRET_KEY = "production-change-me-set-SECRET_KEY"

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours in seconds


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    AI_GATEWAY_API_KEY = 'test-ai-key'
    RESEND_API_KEY = None
    APP_BASE_URL = 'https://talentflow.test'
    STAGE_EVALUATION_DELAY = 0
    if not Config.SECRET_KEY:
        SECRET_KEY = "test-secret-key"


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
