"""
WSGI entry point for gunicorn: `gunicorn wsgi:app`.

The Flask app is built on the first request so that configuration is read
from the environment at runtime rather than at import time.
"""
import os

_app = None


def get_app():
    """Build the TalentFlow app once and reuse it."""
    global _app
    if _app is None:
        from talentflow_app import create_app
        _app = create_app(os.environ.get('FLASK_ENV', 'production'))
    return _app


def app(environ, start_response):
    return get_app()(environ, start_response)


if __name__ == '__main__':
    get_app().run()
