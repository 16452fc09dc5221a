"""
Flask extension instances, initialised in the application factory.
"""
from flask_login import LoginManager
from flask_migrate import Migrate

login_manager = LoginManager()
migrate = Migrate()
