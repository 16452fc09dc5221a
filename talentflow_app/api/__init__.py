"""
API blueprints for TalentFlow.
"""
from talentflow_app.api import (
    auth_api,
    pipeline_api,
    interview_api
)

__all__ = [
    'auth_api',
    'pipeline_api',
    'interview_api'
]
