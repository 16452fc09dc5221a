"""
AI match analysis of a candidate profile against a job posting.
"""
import logging
import math
from talentflow_app.services.ai.gateway import call_ai_function
from talentflow_app.utils.errors import AIGatewayError

logger = logging.getLogger(__name__)

RECOMMENDATIONS = ('strong_yes', 'yes', 'maybe', 'no')

ANALYSIS_SCHEMA = {
    "type": "object",
    "properties": {
        "overall_score": {"type": "number", "minimum": 0, "maximum": 100, "description": "Overall match score 0-100"},
        "skill_match_score": {"type": "number", "minimum": 0, "maximum": 100, "description": "Skills alignment score"},
        "experience_match_score": {"type": "number", "minimum": 0, "maximum": 100,
                                   "description": "Experience level match score"},
        "location_match_score": {"type": "number", "minimum": 0, "maximum": 100,
                                 "description": "Location compatibility score"},
        "recommendation": {"type": "string", "enum": list(RECOMMENDATIONS), "description": "Hiring recommendation"},
        "strengths": {"type": "array", "items": {"type": "string"}, "description": "Key strengths"},
        "concerns": {"type": "array", "items": {"type": "string"}, "description": "Potential concerns"},
        "summary": {"type": "string", "description": "Brief summary of the candidate fit"},
        "suggested_interview_focus": {"type": "array", "items": {"type": "string"},
                                      "description": "Areas to focus on during interview"},
    },
    "required": ["overall_score", "skill_match_score", "experience_match_score",
                 "recommendation", "strengths", "summary"],
    "additionalProperties": False,
}


def _clamp_score(value, field):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AIGatewayError(f'AI analysis returned a non-numeric {field}')
    if not math.isfinite(value):
        raise AIGatewayError(f'AI analysis returned a non-finite {field}')
    return int(round(max(0, min(100, value))))


def build_analysis_prompt(candidate, job_posting):
    skills = ', '.join(candidate.skills or []) or 'Not specified'
    job_skills = ', '.join(job_posting.skills or []) or 'Not specified'
    return f"""Analyze this candidate's profile against the job requirements and provide a comprehensive evaluation.

CANDIDATE PROFILE:
- Name: {candidate.full_name}
- Experience Level: {candidate.experience_level or 'Not specified'}
- Preferred Role: {candidate.preferred_role or 'Not specified'}
- Location: {candidate.location or 'Not specified'}
- Skills: {skills}
- Education: {candidate.education or 'Not specified'}

JOB DETAILS:
- Title: {job_posting.title}
- Description: {job_posting.description or 'Not specified'}
- Requirements: {job_posting.requirements or 'Not specified'}
- Required Skills: {job_skills}
- Experience Required: {job_posting.experience_required or 'Not specified'}
- Location: {job_posting.location or 'Not specified'}

Provide your analysis using the suggest_analysis function."""


def analyze_candidate_fit(candidate, job_posting):
    """
    Score how well a candidate fits a job posting.

    Returns the validated analysis dict (scores clamped to 0-100) with the
    candidate's profile attached under `candidate_data`.
    """
    raw = call_ai_function(
        'You are an expert HR analyst specializing in candidate evaluation and job matching.',
        build_analysis_prompt(candidate, job_posting),
        'suggest_analysis',
        'Return the candidate analysis with scoring',
        ANALYSIS_SCHEMA,
    )

    analysis = {
        'overall_score': _clamp_score(raw.get('overall_score'), 'overall_score'),
        'skill_match_score': _clamp_score(raw.get('skill_match_score', 0), 'skill_match_score'),
        'experience_match_score': _clamp_score(raw.get('experience_match_score', 0), 'experience_match_score'),
        'recommendation': raw.get('recommendation') if raw.get('recommendation') in RECOMMENDATIONS else 'maybe',
        'strengths': [str(s) for s in raw.get('strengths') or []],
        'concerns': [str(c) for c in raw.get('concerns') or []],
        'summary': raw.get('summary') if isinstance(raw.get('summary'), str) else '',
        'suggested_interview_focus': [str(f) for f in raw.get('suggested_interview_focus') or []],
    }
    if raw.get('location_match_score') is not None:
        analysis['location_match_score'] = _clamp_score(raw['location_match_score'], 'location_match_score')

    analysis['candidate_data'] = {
        'full_name': candidate.full_name,
        'email': candidate.email,
        'location': candidate.location,
        'experience_level': candidate.experience_level,
        'preferred_role': candidate.preferred_role,
        'skills': candidate.skills or [],
        'education': candidate.education,
    }
    logger.info(f"Resume analysis for {candidate.full_name}: {analysis['overall_score']}")
    return analysis
