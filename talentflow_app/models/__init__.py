"""
Database models for TalentFlow.
"""
from talentflow_app.models.base import db, generate_uuid, generate_token
from talentflow_app.models.user import User
from talentflow_app.models.candidate import Candidate
from talentflow_app.models.job_posting import JobPosting
from talentflow_app.models.pipeline import InterviewStage, InterviewCandidate, InterviewEvent
from talentflow_app.models.assessment import InterviewInvitation, InterviewResponse
from talentflow_app.models.audit import AuditLog

__all__ = [
    'db',
    'generate_uuid',
    'generate_token',
    'User',
    'Candidate',
    'JobPosting',
    'InterviewStage',
    'InterviewCandidate',
    'InterviewEvent',
    'InterviewInvitation',
    'InterviewResponse',
    'AuditLog',
]
