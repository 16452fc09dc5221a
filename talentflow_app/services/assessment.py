"""
Candidate-facing assessment sessions opened through invitation links.
"""
import logging
from datetime import datetime
from talentflow_app.models import db, InterviewInvitation, InterviewResponse
from talentflow_app.models.pipeline import EVENT_IN_PROGRESS, EVENT_COMPLETED
from talentflow_app.services.ai.question_generator import generate_stage_questions, get_stage_config
from talentflow_app.services.communication.email import send_assessment_completed_email
from talentflow_app.services.pipeline import advance_after_assessment
from talentflow_app.utils.constants import ASSESSMENT_PASS_SCORE
from talentflow_app.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def public_questions(questions):
    """Strip answers and explanations before questions reach the candidate."""
    return [
        {
            'question': q.get('question'),
            'type': q.get('type', 'mcq'),
            'options': q.get('options'),
        }
        for q in questions or []
    ]


def _session_payload(response, record, stage, resumed):
    config = get_stage_config(stage.name)
    job_posting = record.job_posting
    return {
        'success': True,
        'responseId': response.id,
        'resumed': resumed,
        'questions': public_questions(response.questions),
        'totalQuestions': response.total_questions,
        'timePerQuestion': config['time_per_question'],
        'questionType': config['question_type'],
        'stageName': stage.name,
        'jobTitle': job_posting.title,
        'companyName': job_posting.display_company_name,
        'candidateName': record.candidate.full_name,
    }


def start_interview(token):
    """
    Open (or resume) the assessment behind an invitation token.
    """
    if not token:
        raise ValidationError('Interview token is required')

    invitation = InterviewInvitation.query.filter_by(invitation_token=token).first()
    if invitation is None:
        raise NotFoundError('Invalid or expired interview link')

    if invitation.is_expired():
        raise ValidationError('This interview link has expired')

    event = invitation.interview_event
    record = event.interview_candidate
    stage = event.stage

    # live stages are decided by the employer, never by an online assessment
    if not stage.is_ai_automated or invitation.meeting_link:
        raise ValidationError('This invitation is for a live interview, not an online assessment')

    if invitation.used_at is not None:
        raise ValidationError('This interview has already been completed')

    existing = event.responses.order_by(InterviewResponse.created_at.desc()).first()
    if existing is not None:
        if existing.is_completed:
            raise ValidationError('This interview has already been completed')
        if existing.questions:
            logger.info(f"Resuming assessment {existing.id} for record {record.id}")
            return _session_payload(existing, record, stage, resumed=True)

    job_posting = record.job_posting
    questions = generate_stage_questions(
        stage.name,
        job_posting.title,
        skills=job_posting.skills,
        requirements=job_posting.requirements,
    )

    if existing is not None:
        response = existing
        response.questions = questions
        response.total_questions = len(questions)
    else:
        response = InterviewResponse(
            interview_event_id=event.id,
            questions=questions,
            total_questions=len(questions),
        )
        db.session.add(response)

    event.status = EVENT_IN_PROGRESS
    db.session.commit()

    logger.info(f"Assessment {response.id} started for record {record.id} at {stage.name}")
    return _session_payload(response, record, stage, resumed=False)


def score_answers(questions, answers):
    """Exact match of each answer against the question at the same index."""
    correct = 0
    for index, question in enumerate(questions):
        if index >= len(answers):
            break
        expected = question.get('correctAnswer')
        answer = answers[index]
        if expected is None or isinstance(answer, bool):
            continue
        if answer == expected:
            correct += 1
    total = len(questions)
    # half rounds up: 1 of 8 correct scores 13
    score = int(correct * 100 / total + 0.5) if total else 0
    return correct, score


def submit_interview(response_id, answers, time_taken=None, recording_url=None):
    """
    Score and finalize an assessment, consume its invitation and move the
    record on when the score reaches the pass threshold.
    """
    if not response_id or answers is None:
        raise ValidationError('responseId and answers are required')
    if not isinstance(answers, list):
        raise ValidationError('answers must be a list')

    response = db.session.get(InterviewResponse, response_id)
    if response is None:
        raise NotFoundError('Interview response not found')
    if response.is_completed:
        raise ValidationError('This interview has already been submitted')

    questions = response.questions or []
    correct, score = score_answers(questions, answers)
    now = datetime.utcnow()

    event = response.interview_event
    record = event.interview_candidate
    stage = event.stage

    response.answers = answers
    response.correct_answers = correct
    response.score = score
    response.time_taken_seconds = time_taken
    response.recording_url = recording_url
    response.completed_at = now

    event.status = EVENT_COMPLETED
    event.completed_at = now
    event.ai_score = score
    event.ai_feedback = {
        'correctAnswers': correct,
        'totalQuestions': len(questions),
        'percentage': score,
        'timeTaken': time_taken,
        'hasRecording': bool(recording_url),
    }

    for invitation in event.invitations.filter_by(used_at=None):
        invitation.used_at = now

    record.ai_score = score
    record.ai_analysis = {
        'lastInterviewScore': score,
        'correctAnswers': correct,
        'totalQuestions': len(questions),
        'stage': stage.name,
        'completedAt': now.isoformat(),
    }
    db.session.commit()
    logger.info(f"Assessment {response.id} submitted: {correct}/{len(questions)} = {score}")

    outcome = advance_after_assessment(record, stage, score)

    notice = send_assessment_completed_email(
        record.job_posting.employer,
        record.candidate,
        record.job_posting,
        stage.name,
        score,
        score >= ASSESSMENT_PASS_SCORE,
    )
    if not notice.get('success'):
        logger.info(f"Employer notification not sent for {response.id}: {notice.get('error')}")

    results = []
    for index, question in enumerate(questions):
        user_answer = answers[index] if index < len(answers) else None
        expected = question.get('correctAnswer')
        results.append({
            'question': question.get('question'),
            'options': question.get('options'),
            'userAnswer': user_answer,
            'correctAnswer': expected,
            'explanation': question.get('explanation'),
            'isCorrect': expected is not None and not isinstance(user_answer, bool) and user_answer == expected,
        })

    return {
        'success': True,
        'score': score,
        'correctCount': correct,
        'totalQuestions': len(questions),
        'timeTaken': time_taken,
        'passed': score >= ASSESSMENT_PASS_SCORE,
        'advanced': outcome['advanced'],
        'nextStage': outcome['nextStage'],
        'status': outcome['status'],
        'results': results,
    }
