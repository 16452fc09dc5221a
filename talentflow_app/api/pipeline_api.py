"""
Interview pipeline API: board, enrollment, progression and employer actions.
"""
from datetime import datetime
from flask import Blueprint, request, jsonify
from flask_login import current_user
from talentflow_app.models import db, Candidate, JobPosting
from talentflow_app.models.assessment import EMAIL_SENT
from talentflow_app.services.ai.resume_analyzer import analyze_candidate_fit
from talentflow_app.services.board import build_pipeline_board
from talentflow_app.services.pipeline import (
    auto_progress, process_stage_action, move_candidate, enroll_candidate,
    schedule_stage_invitation, get_record_or_404,
)
from talentflow_app.services.stages import get_ordered_stages
from talentflow_app.utils.auth import employer_required, can_manage_job, can_manage_record, log_audit

bp = Blueprint('pipeline_api', __name__, url_prefix='/api/pipeline')


def _owned_record(record_id):
    """Return (record, None) or (None, error response) for the current employer."""
    record = get_record_or_404(record_id)
    if not can_manage_record(record):
        log_audit(current_user.id, 'unauthorized_access_attempt', 'interview_candidate', record.id)
        return None, (jsonify({'error': 'Access denied'}), 403)
    return record, None


def _parse_score(value):
    if value is None or value == '':
        return None, None
    if isinstance(value, bool):
        return None, 'score must be a number between 0 and 100'
    try:
        score = float(value)
    except (TypeError, ValueError):
        return None, 'score must be a number between 0 and 100'
    if not 0 <= score <= 100:
        return None, 'score must be a number between 0 and 100'
    return int(round(score)), None


@bp.route('/stages', methods=['GET'])
@employer_required
def list_stages():
    """Ordered stage catalog."""
    return jsonify({'stages': [s.to_dict() for s in get_ordered_stages()]})


@bp.route('/board', methods=['GET'])
@employer_required
def get_board():
    """Kanban columns of active candidates. Optional ?job_id= filter."""
    job_id = request.args.get('job_id')
    if job_id:
        job = db.session.get(JobPosting, job_id)
        if job is None:
            return jsonify({'error': 'Job posting not found'}), 404
        if not can_manage_job(job):
            return jsonify({'error': 'Access denied'}), 403

    employer_id = None if current_user.is_admin else current_user.id
    return jsonify({'stages': build_pipeline_board(job_posting_id=job_id, employer_id=employer_id)})


@bp.route('/candidates', methods=['POST'])
@employer_required
def enroll():
    """
    Add a candidate to a job's pipeline.
    Payload: { jobId, candidateId | candidate: {full_name, email, ...}, resumeUrl, analyze }.
    """
    data = request.json or {}
    job_id = data.get('jobId')
    if not job_id:
        return jsonify({'error': 'jobId is required'}), 400

    job = db.session.get(JobPosting, job_id)
    if job is None:
        return jsonify({'error': 'Job posting not found'}), 404
    if not can_manage_job(job):
        return jsonify({'error': 'Access denied'}), 403

    candidate_id = data.get('candidateId')
    if candidate_id:
        candidate = db.session.get(Candidate, candidate_id)
        if candidate is None:
            return jsonify({'error': 'Candidate not found'}), 404
    else:
        profile = data.get('candidate') or {}
        full_name = (profile.get('full_name') or '').strip()
        if not full_name:
            return jsonify({'error': 'candidate.full_name is required'}), 400
        email = (profile.get('email') or '').strip().lower() or None
        candidate = Candidate.query.filter_by(email=email).first() if email else None
        if candidate is None:
            candidate = Candidate(full_name=full_name, email=email)
            db.session.add(candidate)
        # an existing profile may be shared with other employers: only fill gaps
        for field in ('phone', 'location', 'experience_level', 'preferred_role', 'education'):
            if profile.get(field) and not getattr(candidate, field):
                setattr(candidate, field, profile[field])
        if isinstance(profile.get('skills'), list) and not candidate.skills:
            candidate.skills = profile['skills']
        db.session.commit()

    analysis = analyze_candidate_fit(candidate, job) if data.get('analyze', True) else None
    record, outcome = enroll_candidate(job, candidate, resume_url=data.get('resumeUrl'), analysis=analysis)

    log_audit(current_user.id, 'candidate_enrolled', 'interview_candidate', record.id,
              details={'job_id': job.id, 'score': record.ai_score})
    return jsonify({
        'success': True,
        'interviewCandidate': record.to_dict(),
        'created': outcome['created'],
        'advanced': outcome['advanced'],
        'nextStage': outcome['nextStage'],
        'invitation': outcome['invitation'],
    }), 201 if outcome['created'] else 200


@bp.route('/auto-progress', methods=['POST'])
@employer_required
def run_auto_progress():
    """
    Walk AI-automated stages for one candidate.
    Payload: { interviewCandidateId, autoProgressAll, evaluateCurrentStage }.
    """
    data = request.json or {}
    record_id = data.get('interviewCandidateId')
    if not record_id:
        return jsonify({'error': 'interviewCandidateId is required'}), 400

    record, error = _owned_record(record_id)
    if error:
        return error

    result = auto_progress(
        record.id,
        auto_progress_all=data.get('autoProgressAll', True) is not False,
        evaluate_current_stage=bool(data.get('evaluateCurrentStage', False)),
    )
    log_audit(current_user.id, 'pipeline_auto_progress', 'interview_candidate', record_id,
              details={'status': result.get('status'), 'stages': len(result.get('results', []))})
    return jsonify(result)


@bp.route('/process-stage', methods=['POST'])
@employer_required
def process_stage():
    """
    Employer decision on the current stage.
    Payload: { interviewCandidateId, action: advance|reject|evaluate, feedback, score }.
    """
    data = request.json or {}
    record_id = data.get('interviewCandidateId')
    action = data.get('action')
    if not record_id or not action:
        return jsonify({'error': 'interviewCandidateId and action are required'}), 400

    score, score_error = _parse_score(data.get('score'))
    if score_error:
        return jsonify({'error': score_error}), 400

    record, error = _owned_record(record_id)
    if error:
        return error

    feedback = data.get('feedback')
    if feedback is not None and not isinstance(feedback, str):
        return jsonify({'error': 'feedback must be text'}), 400

    result = process_stage_action(record.id, action, feedback=feedback, score=score)
    log_audit(current_user.id, f'stage_{action}', 'interview_candidate', record_id,
              details={'status': result.get('status'), 'stage': result.get('currentStage')})
    return jsonify(result)


@bp.route('/candidates/<record_id>/move', methods=['POST'])
@employer_required
def move(record_id):
    """Move a candidate forward to another stage. Payload: { stageId }."""
    data = request.json or {}
    stage_id = data.get('stageId')
    if not stage_id:
        return jsonify({'error': 'stageId is required'}), 400

    record, error = _owned_record(record_id)
    if error:
        return error

    record = move_candidate(record.id, stage_id)
    log_audit(current_user.id, 'candidate_moved', 'interview_candidate', record.id,
              details={'stage_id': stage_id})
    return jsonify({'success': True, 'interviewCandidate': record.to_dict()})


@bp.route('/invitations', methods=['POST'])
@employer_required
def schedule_invitation():
    """
    Invite a candidate to a stage.
    Payload: { interviewCandidateId, stageName, scheduledDate, meetingLink }.
    """
    data = request.json or {}
    record_id = data.get('interviewCandidateId')
    stage_name = data.get('stageName')
    if not record_id or not stage_name:
        return jsonify({'error': 'interviewCandidateId and stageName are required'}), 400

    scheduled_at = None
    if data.get('scheduledDate'):
        try:
            scheduled_at = datetime.fromisoformat(str(data['scheduledDate']).replace('Z', '+00:00'))
        except ValueError:
            return jsonify({'error': 'scheduledDate must be an ISO 8601 date'}), 400
        if scheduled_at.tzinfo is not None:
            scheduled_at = scheduled_at.replace(tzinfo=None) - scheduled_at.utcoffset()

    record, error = _owned_record(record_id)
    if error:
        return error

    invitation = schedule_stage_invitation(
        record.id, stage_name, scheduled_at=scheduled_at, meeting_link=data.get('meetingLink')
    )
    log_audit(current_user.id, 'invitation_sent', 'interview_invitation', invitation.id,
              details={'stage': stage_name, 'email_status': invitation.email_status})
    return jsonify({
        'success': True,
        'invitation': invitation.to_dict(),
        'emailSent': invitation.email_status == EMAIL_SENT,
    }), 201
