"""
Interview pipeline service: stage events, automatic progression, employer
actions, invitations and enrollment.

Every stage transition (event upsert plus record update) is committed as one
unit, so a failure part way through a multi-stage walk leaves the record at
the last committed stage.
"""
import logging
import time
from datetime import datetime, timedelta
from flask import current_app
from talentflow_app.models import (
    db, generate_token, InterviewCandidate, InterviewEvent, InterviewStage, InterviewInvitation,
)
from talentflow_app.models.pipeline import (
    RECORD_ACTIVE, RECORD_REJECTED, RECORD_HIRED,
    EVENT_PENDING, EVENT_SCHEDULED, EVENT_COMPLETED, EVENT_PASSED, EVENT_FAILED,
)
from talentflow_app.models.assessment import EMAIL_SENT, EMAIL_FAILED
from talentflow_app.services.ai.stage_evaluator import evaluate_stage_with_ai
from talentflow_app.services.communication.email import (
    send_stage_transition_email, send_interview_invitation_email,
)
from talentflow_app.services.stages import (
    get_ordered_stages, get_current_stage, get_next_stage, get_first_stage, get_stage_by_name,
)
from talentflow_app.utils.constants import ASSESSMENT_PASS_SCORE
from talentflow_app.utils.errors import NotFoundError, ValidationError, ConflictError

logger = logging.getLogger(__name__)

ACTION_ADVANCE = 'advance'
ACTION_REJECT = 'reject'
ACTION_EVALUATE = 'evaluate'
ACTIONS = (ACTION_ADVANCE, ACTION_REJECT, ACTION_EVALUATE)

DONE_STATUSES = (EVENT_COMPLETED, EVENT_PASSED, EVENT_FAILED)


def get_record_or_404(record_id):
    record = db.session.get(InterviewCandidate, record_id) if record_id else None
    if record is None:
        raise NotFoundError('Candidate not found')
    return record


def get_latest_event(record, stage):
    return (
        InterviewEvent.query
        .filter_by(interview_candidate_id=record.id, stage_id=stage.id)
        .order_by(InterviewEvent.created_at.desc())
        .first()
    )


def record_stage_event(record, stage, status, ai_score=None, ai_feedback=None, notes=None,
                       scheduled_at=None):
    """
    Upsert the event for (record, stage): the latest row is updated, a new one
    is added only when none exists. Does not commit.
    """
    event = get_latest_event(record, stage)
    if event is None:
        event = InterviewEvent(interview_candidate_id=record.id, stage_id=stage.id)
        db.session.add(event)

    event.status = status
    if ai_score is not None:
        event.ai_score = ai_score
    if ai_feedback is not None:
        event.ai_feedback = ai_feedback
    if notes is not None:
        event.notes = notes
    if scheduled_at is not None:
        event.scheduled_at = scheduled_at
    if status in DONE_STATUSES:
        event.completed_at = datetime.utcnow()
    return event


def _notify_transition(record, stage, passed, score=None, feedback=None, next_stage=None):
    result = send_stage_transition_email(
        record.candidate,
        record.job_posting,
        stage.name,
        passed,
        score=score,
        feedback=feedback,
        next_stage_name=next_stage.name if next_stage else None,
    )
    if not result.get('success'):
        logger.info(f"Stage transition email not sent for {record.id}: {result.get('error')}")
    return result


def _require_active(record):
    if record.status != RECORD_ACTIVE:
        raise ConflictError(f"Candidate is {record.status}, no further stage changes allowed")


def assessment_link(token):
    base_url = current_app.config.get('APP_BASE_URL', '').rstrip('/')
    return f"{base_url}/interview?token={token}"


def mint_invitation(record, stage, scheduled_at=None, meeting_link=None):
    """
    Create a scheduled event and a fresh invitation for `stage`, commit, then
    email the candidate. The invitation's email_status reflects delivery.
    """
    ttl_days = current_app.config.get('INVITATION_TTL_DAYS', 7)
    expires_at = datetime.utcnow() + timedelta(days=ttl_days)

    event = record_stage_event(record, stage, EVENT_SCHEDULED, scheduled_at=scheduled_at or expires_at)
    db.session.flush()

    invitation = InterviewInvitation(
        interview_event_id=event.id,
        invitation_token=generate_token(),
        meeting_link=meeting_link,
        expires_at=expires_at,
    )
    db.session.add(invitation)
    db.session.commit()

    result = send_interview_invitation_email(
        record.candidate,
        record.job_posting,
        stage.name,
        assessment_link(invitation.invitation_token),
        expires_at,
        scheduled_at=scheduled_at,
        meeting_link=meeting_link,
    )
    if result.get('success'):
        invitation.email_status = EMAIL_SENT
        invitation.email_sent_at = datetime.utcnow()
    else:
        invitation.email_status = EMAIL_FAILED
        logger.warning(f"Invitation email failed for record {record.id} ({stage.name}): {result.get('error')}")
    db.session.commit()

    logger.info(f"Invitation minted for record {record.id} at {stage.name}")
    return invitation


def auto_progress(record_id, auto_progress_all=True, evaluate_current_stage=False,
                  evaluator=None, delay=None, sleep=time.sleep):
    """
    Walk the stage catalog from the record's current stage, letting the AI
    evaluator score each AI-automated stage until a fail, a manual gate or
    the end of the pipeline.

    A manual current stage is only scored when `evaluate_current_stage` is
    set. `evaluator` takes the keyword arguments of `evaluate_stage_with_ai`.
    """
    evaluator = evaluator or evaluate_stage_with_ai
    if delay is None:
        delay = current_app.config.get('STAGE_EVALUATION_DELAY', 0)

    record = get_record_or_404(record_id)
    if record.status != RECORD_ACTIVE:
        return {'success': False, 'message': f"Candidate is {record.status}, cannot progress"}

    stages = get_ordered_stages()
    if not stages:
        raise ValidationError('No interview stages configured')

    start_stage = get_current_stage(record, stages)
    candidate = record.candidate
    job_posting = record.job_posting
    results = []

    for stage in stages:
        if stage.stage_order < start_stage.stage_order:
            continue
        explicitly_requested = evaluate_current_stage and stage.id == start_stage.id
        if not stage.is_ai_automated and not explicitly_requested:
            break

        if results and delay:
            sleep(delay)

        evaluation = evaluator(
            candidate_name=candidate.full_name,
            job_title=job_posting.title,
            stage_name=stage.name,
            previous_score=record.ai_score,
            previous_analysis=record.ai_analysis,
        )
        passed = evaluation['passed']
        next_stage = get_next_stage(stage, stages) if passed else None

        record_stage_event(
            record,
            stage,
            EVENT_COMPLETED if passed else EVENT_FAILED,
            ai_score=evaluation['score'],
            ai_feedback={
                'feedback': evaluation['feedback'],
                'details': evaluation.get('details', {}),
                'passed': passed,
                'evaluated_at': datetime.utcnow().isoformat(),
            },
            notes=evaluation['feedback'],
        )
        results.append({
            'stage': stage.name,
            'stageOrder': stage.stage_order,
            'score': evaluation['score'],
            'passed': passed,
            'feedback': evaluation['feedback'],
        })

        if not passed:
            record.status = RECORD_REJECTED
            record.current_stage_id = stage.id
        elif next_stage is None:
            record.status = RECORD_HIRED
            record.current_stage_id = stage.id
        else:
            record.current_stage_id = next_stage.id
        db.session.commit()
        logger.info(f"Record {record.id} {stage.name}: score={evaluation['score']} passed={passed}")

        _notify_transition(record, stage, passed, evaluation['score'], evaluation['feedback'], next_stage)

        if not passed:
            return {
                'success': True,
                'status': 'rejected',
                'rejectedAt': stage.name,
                'results': results,
                'message': f"Candidate did not pass {stage.name}",
            }
        if next_stage is None:
            return {
                'success': True,
                'status': 'completed',
                'results': results,
                'message': 'Candidate completed all interview stages',
            }
        if not auto_progress_all:
            return {
                'success': True,
                'status': 'progressed',
                'currentStage': next_stage.name,
                'results': results,
                'message': f"Candidate advanced to {next_stage.name}",
            }

    current = get_current_stage(record, stages)
    return {
        'success': True,
        'status': 'awaiting_manual',
        'currentStage': current.name,
        'results': results,
        'message': f"Waiting for employer action at {current.name}",
    }


def _advance_past(record, stage, stages):
    """Move the record past `stage`; hired when it was the last. Does not commit."""
    next_stage = get_next_stage(stage, stages)
    if next_stage is None:
        record.status = RECORD_HIRED
        record.current_stage_id = stage.id
    else:
        record.current_stage_id = next_stage.id
    return next_stage


def process_stage_action(record_id, action, feedback=None, score=None, evaluator=None):
    """
    Apply an employer action (advance, reject or evaluate) to the record's
    current stage.
    """
    if action not in ACTIONS:
        raise ValidationError('Invalid action')

    record = get_record_or_404(record_id)
    _require_active(record)

    stages = get_ordered_stages()
    stage = get_current_stage(record, stages)
    if stage is None:
        raise ValidationError('No interview stages configured')

    if action == ACTION_REJECT:
        record_stage_event(
            record, stage, EVENT_FAILED,
            ai_score=score,
            notes=feedback or 'Candidate rejected',
        )
        record.status = RECORD_REJECTED
        record.current_stage_id = stage.id
        db.session.commit()
        _notify_transition(record, stage, False, score)
        return {
            'success': True,
            'status': 'rejected',
            'currentStage': stage.name,
            'message': f"Candidate rejected at {stage.name}",
        }

    evaluation = None
    if action == ACTION_EVALUATE:
        evaluator = evaluator or evaluate_stage_with_ai
        evaluation = evaluator(
            candidate_name=record.candidate.full_name,
            job_title=record.job_posting.title,
            stage_name=stage.name,
            previous_score=record.ai_score,
            previous_analysis=record.ai_analysis,
            notes=feedback,
        )
        passed = evaluation['passed']
        event_score = evaluation['score']
        notes = feedback or evaluation['feedback']
        ai_feedback = {
            'feedback': evaluation['feedback'],
            'details': evaluation.get('details', {}),
            'passed': passed,
            'evaluated_at': datetime.utcnow().isoformat(),
        }
    else:
        passed = True
        event_score = score if score is not None else record.ai_score
        notes = feedback
        ai_feedback = None

    record_stage_event(
        record, stage, EVENT_PASSED if passed else EVENT_FAILED,
        ai_score=event_score,
        ai_feedback=ai_feedback,
        notes=notes,
    )

    if not passed:
        record.status = RECORD_REJECTED
        record.current_stage_id = stage.id
        db.session.commit()
        _notify_transition(record, stage, False, event_score, evaluation['feedback'])
        return {
            'success': True,
            'status': 'rejected',
            'currentStage': stage.name,
            'evaluation': evaluation,
            'message': f"Candidate did not pass {stage.name}",
        }

    next_stage = _advance_past(record, stage, stages)
    db.session.commit()

    response = {
        'success': True,
        'status': 'hired' if next_stage is None else 'advanced',
        'currentStage': next_stage.name if next_stage else stage.name,
        'evaluation': evaluation,
        'invitation': None,
        'message': (
            'Candidate completed all interview stages' if next_stage is None
            else f"Candidate advanced to {next_stage.name}"
        ),
    }
    if next_stage is not None and next_stage.is_ai_automated:
        invitation = mint_invitation(record, next_stage)
        response['invitation'] = invitation.to_dict()
    else:
        _notify_transition(record, stage, True, event_score, None, next_stage)
    return response


def advance_after_assessment(record, stage, score, stages=None):
    """
    Move the record past an assessed stage when `score` reaches the
    assessment threshold. Invites to the next stage when it is AI-scored.
    Never moves a record backwards, past a live stage or out of a terminal
    state.
    """
    outcome = {'advanced': False, 'status': record.status, 'nextStage': None, 'invitation': None}
    if record.status != RECORD_ACTIVE or score < ASSESSMENT_PASS_SCORE:
        return outcome
    if not stage.is_ai_automated:
        logger.warning(f"Ignoring assessment score for live stage {stage.name} on record {record.id}")
        return outcome

    stages = stages if stages is not None else get_ordered_stages()
    current = get_current_stage(record, stages)
    if current is not None and current.stage_order > stage.stage_order:
        return outcome

    next_stage = _advance_past(record, stage, stages)
    db.session.commit()

    outcome['advanced'] = True
    outcome['status'] = record.status
    outcome['nextStage'] = next_stage.name if next_stage else None

    if next_stage is not None and next_stage.is_ai_automated:
        outcome['invitation'] = mint_invitation(record, next_stage).to_dict()
    else:
        _notify_transition(record, stage, True, score, None, next_stage)
    return outcome


def enroll_candidate(job_posting, candidate, resume_url=None, analysis=None):
    """
    Upsert the pipeline record for (job posting, candidate) at the first
    stage. With a resume analysis the screening stage is recorded as
    completed and the record takes the assessment advance path.
    """
    stages = get_ordered_stages()
    first_stage = get_first_stage(stages)
    if first_stage is None:
        raise ValidationError('No interview stages configured')

    record = InterviewCandidate.query.filter_by(
        job_posting_id=job_posting.id, candidate_id=candidate.id
    ).first()
    created = record is None
    if created:
        record = InterviewCandidate(
            job_posting_id=job_posting.id,
            candidate_id=candidate.id,
            current_stage_id=first_stage.id,
            status=RECORD_ACTIVE,
        )
        db.session.add(record)
    else:
        _require_active(record)

    if resume_url:
        record.resume_url = resume_url
    db.session.flush()

    if analysis is None:
        if created:
            record_stage_event(record, first_stage, EVENT_PENDING)
        db.session.commit()
        return record, {'created': created, 'advanced': False, 'status': record.status,
                        'nextStage': None, 'invitation': None}

    score = analysis['overall_score']
    record.ai_score = score
    record.ai_analysis = analysis
    record_stage_event(record, first_stage, EVENT_COMPLETED, ai_score=score, ai_feedback=analysis,
                       notes=analysis.get('summary'))
    db.session.commit()

    outcome = advance_after_assessment(record, first_stage, score, stages)
    outcome['created'] = created
    return record, outcome


def move_candidate(record_id, to_stage_id):
    """Place a record at a later stage. Moving backwards is rejected."""
    record = get_record_or_404(record_id)
    _require_active(record)

    target = db.session.get(InterviewStage, to_stage_id) if to_stage_id else None
    if target is None:
        raise NotFoundError('Stage not found')

    current = get_current_stage(record)
    if current is not None and target.stage_order < current.stage_order:
        raise ValidationError('Candidates can only move forward in the pipeline')

    record.current_stage_id = target.id
    db.session.commit()
    logger.info(f"Record {record.id} moved to {target.name}")
    return record


def schedule_stage_invitation(record_id, stage_name, scheduled_at=None, meeting_link=None):
    """
    Schedule a stage for the candidate: live stages carry the employer's
    meeting link, AI-scored stages an assessment link.
    """
    record = get_record_or_404(record_id)
    _require_active(record)

    stage = get_stage_by_name(stage_name) if stage_name else None
    if stage is None:
        raise NotFoundError('Stage not found')

    if not stage.is_ai_automated and not meeting_link:
        raise ValidationError('meetingLink is required for live interview stages')

    return mint_invitation(
        record,
        stage,
        scheduled_at=scheduled_at,
        meeting_link=None if stage.is_ai_automated else meeting_link,
    )
