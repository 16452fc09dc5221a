"""
AI evaluation of a candidate at one interview stage.
"""
import logging
import math
from talentflow_app.services.ai.gateway import call_ai_function
from talentflow_app.utils.constants import (
    STAGE_EVALUATION_PROMPTS, EVALUATION_PASS_SCORE, DEFAULT_PREVIOUS_SCORE,
)
from talentflow_app.utils.errors import AIGatewayError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI interview evaluator. Evaluate candidates fairly based on their "
    "profile and the stage requirements. Provide realistic scores - not every "
    "candidate should pass every stage."
)

EVALUATION_SCHEMA = {
    "type": "object",
    "properties": {
        "score": {"type": "number", "description": "Score from 0-100"},
        "passed": {"type": "boolean", "description": f"Whether the candidate passed (score >= {EVALUATION_PASS_SCORE})"},
        "feedback": {"type": "string", "description": "2-3 sentence evaluation feedback"},
        "strengths": {"type": "array", "items": {"type": "string"}},
        "concerns": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["score", "passed", "feedback"],
    "additionalProperties": False,
}


def _string_list(value):
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def validate_evaluation(raw):
    """
    Normalize evaluator output: finite numeric score clamped to 0-100,
    string feedback, `passed` always derived from the score.
    """
    score = raw.get('score')
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise AIGatewayError('AI evaluation returned a non-numeric score')
    if not math.isfinite(score):
        raise AIGatewayError('AI evaluation returned a non-finite score')
    score = int(round(max(0, min(100, score))))

    feedback = raw.get('feedback', '')
    if not isinstance(feedback, str):
        raise AIGatewayError('AI evaluation returned invalid feedback')

    passed = score >= EVALUATION_PASS_SCORE
    claimed = raw.get('passed')
    if isinstance(claimed, bool) and claimed != passed:
        logger.warning(f"AI evaluation passed={claimed} disagrees with score {score}; using the score")

    return {
        'score': score,
        'passed': passed,
        'feedback': feedback,
        'details': {
            'strengths': _string_list(raw.get('strengths')),
            'concerns': _string_list(raw.get('concerns')),
        },
    }


def build_evaluation_prompt(candidate_name, job_title, stage_name, previous_score=None,
                            previous_analysis=None, notes=None):
    stage_prompt = STAGE_EVALUATION_PROMPTS.get(
        stage_name, f"Evaluate the candidate for the {stage_name} stage."
    ).format(job_title=job_title)
    previous_analysis = previous_analysis or {}
    if previous_score is None:
        previous_score = DEFAULT_PREVIOUS_SCORE

    lines = [
        f"Candidate: {candidate_name}",
        f"Position: {job_title}",
        f"Current Stage: {stage_name}",
        f"Previous AI Score: {previous_score}",
        f"Previous Analysis: {previous_analysis.get('summary') or 'N/A'}",
    ]
    strengths = previous_analysis.get('strengths')
    if strengths:
        lines.append(f"Strengths: {', '.join(str(s) for s in strengths)}")
    if notes:
        lines.append(f"Interviewer Notes: {notes}")
    lines.append("")
    lines.append(stage_prompt)
    lines.append("")
    lines.append(
        "Provide a realistic evaluation with a score from 0-100. "
        f"A score of {EVALUATION_PASS_SCORE} or above means they pass this stage."
    )
    return "\n".join(lines)


def evaluate_stage_with_ai(candidate_name, job_title, stage_name, previous_score=None,
                           previous_analysis=None, notes=None):
    """Score a candidate for one stage. Returns {score, passed, feedback, details}."""
    prompt = build_evaluation_prompt(
        candidate_name, job_title, stage_name, previous_score, previous_analysis, notes
    )
    raw = call_ai_function(
        SYSTEM_PROMPT,
        prompt,
        'stage_evaluation',
        'Return the stage evaluation result',
        EVALUATION_SCHEMA,
    )
    result = validate_evaluation(raw)
    logger.info(f"Evaluated {candidate_name} at {stage_name}: score={result['score']} passed={result['passed']}")
    return result
