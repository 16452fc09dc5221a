"""
Assessment question generation for AI-scored stages.
"""
import copy
import logging
import re
from talentflow_app.services.ai.gateway import call_ai_function
from talentflow_app.utils.constants import (
    STAGE_ASSESSMENT_CONFIGS, DEFAULT_ASSESSMENT_STAGE, FALLBACK_QUESTIONS, GENERAL_MCQ_BANK,
)
from talentflow_app.utils.errors import AIGatewayError

logger = logging.getLogger(__name__)

OPTION_PREFIX = re.compile(r'^\s*[A-Da-d][).:]\s*')

QUESTIONS_SCHEMA = {
    "type": "object",
    "properties": {
        "questions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "question": {"type": "string"},
                    "type": {"type": "string", "enum": ["mcq", "text"]},
                    "options": {"type": "array", "items": {"type": "string"}},
                    "correctAnswer": {"type": "number", "description": "Index (0-3) of the correct option"},
                    "explanation": {"type": "string"},
                },
                "required": ["question", "type"],
            },
        },
    },
    "required": ["questions"],
}


def get_stage_config(stage_name):
    """Question count, type and timing for a stage; unknown stages use the phone screen shape."""
    return STAGE_ASSESSMENT_CONFIGS.get(stage_name) or STAGE_ASSESSMENT_CONFIGS[DEFAULT_ASSESSMENT_STAGE]


def clean_option(option):
    return OPTION_PREFIX.sub('', str(option)).strip()


def normalize_question(raw, question_type):
    """
    Validate one generated question. MCQs need four non-empty options and
    get a numeric correctAnswer (0 when the model gives none).
    Returns None when the question is unusable.
    """
    if not isinstance(raw, dict):
        return None
    text = raw.get('question')
    if not isinstance(text, str) or not text.strip():
        return None

    kind = raw.get('type') or ('text' if question_type == 'text' else 'mcq')
    explanation = raw.get('explanation') if isinstance(raw.get('explanation'), str) else ''

    if kind == 'text':
        return {
            'question': text.strip(),
            'type': 'text',
            'options': None,
            'correctAnswer': None,
            'explanation': explanation,
        }

    options = raw.get('options')
    if not isinstance(options, list) or len(options) < 4:
        return None
    options = [clean_option(o) for o in options[:4]]
    if not all(options):
        return None

    answer = raw.get('correctAnswer')
    if isinstance(answer, bool) or not isinstance(answer, (int, float)) or not 0 <= int(answer) <= 3:
        answer = 0

    return {
        'question': text.strip(),
        'type': 'mcq',
        'options': options,
        'correctAnswer': int(answer),
        'explanation': explanation,
    }


def get_fallback_questions(stage_name, job_title, count=None):
    bank = FALLBACK_QUESTIONS.get(stage_name, GENERAL_MCQ_BANK)
    questions = []
    for item in copy.deepcopy(bank):
        item['question'] = item['question'].format(job_title=job_title or 'this')
        questions.append(item)
    if count:
        questions = questions[:count]
    return questions


def generate_stage_questions(stage_name, job_title, skills=None, requirements=None):
    """
    Generate the question set for a stage, falling back to the built-in
    bank whenever the gateway fails or returns nothing usable.
    """
    config = get_stage_config(stage_name)
    count = config['question_count']
    prompt = config['prompt'].format(
        count=count,
        job_title=job_title,
        skills=', '.join(skills or []) or 'General skills',
        requirements=requirements or 'Standard requirements',
    )
    if config['question_type'] == 'mcq':
        prompt += "\n\nEach question must have exactly 4 options and a correctAnswer index (0-3)."
    elif config['question_type'] == 'mixed':
        prompt += "\n\nMCQ questions must have exactly 4 options and a correctAnswer index (0-3)."

    try:
        result = call_ai_function(
            "You are an expert interviewer creating assessment questions.",
            prompt,
            'generate_questions',
            'Return the generated assessment questions',
            QUESTIONS_SCHEMA,
        )
    except AIGatewayError as e:
        logger.warning(f"Question generation failed for {stage_name}, using fallback bank: {e.message}")
        return get_fallback_questions(stage_name, job_title, count)

    raw_questions = result.get('questions')
    if not isinstance(raw_questions, list):
        raw_questions = []
    questions = []
    for raw in raw_questions:
        question = normalize_question(raw, config['question_type'])
        if question:
            questions.append(question)

    if not questions:
        logger.warning(f"No valid generated questions for {stage_name}, using fallback bank")
        return get_fallback_questions(stage_name, job_title, count)
    return questions[:count]
