"""
Employer actions on a candidate's current stage.
"""
import pytest
from conftest import scripted_evaluator, make_record
from talentflow_app.models import db, InterviewInvitation, InterviewEvent
from talentflow_app.services.pipeline import (
    process_stage_action, move_candidate, schedule_stage_invitation, record_stage_event,
)
from talentflow_app.utils.errors import AIGatewayError, ConflictError, NotFoundError, ValidationError


def test_reject_marks_current_stage_failed(record, stages):
    result = process_stage_action(record.id, 'reject', feedback='Not a fit for the role', score=30)

    assert result['status'] == 'rejected'
    db.session.refresh(record)
    assert record.status == 'rejected'
    event = record.events.one()
    assert event.stage_id == stages['Resume Screening'].id
    assert event.status == 'failed'
    assert event.notes == 'Not a fit for the role'
    assert event.ai_score == 30


def test_reject_default_note(record):
    process_stage_action(record.id, 'reject')

    assert record.events.one().notes == 'Candidate rejected'


def test_advance_into_ai_stage_mints_one_invitation(job, candidate, stages):
    record = make_record(job, candidate, stages['Resume Screening'], ai_score=77)

    result = process_stage_action(record.id, 'advance', feedback='Strong resume')

    assert result['status'] == 'advanced'
    assert result['currentStage'] == 'AI Phone Interview'
    db.session.refresh(record)
    assert record.current_stage_id == stages['AI Phone Interview'].id

    screening = InterviewEvent.query.filter_by(
        interview_candidate_id=record.id, stage_id=stages['Resume Screening'].id
    ).one()
    assert screening.status == 'passed'
    assert screening.ai_score == 77

    invitations = InterviewInvitation.query.all()
    assert len(invitations) == 1
    assert invitations[0].interview_event.stage_id == stages['AI Phone Interview'].id
    assert invitations[0].interview_event.status == 'scheduled'
    # no Resend key in tests
    assert invitations[0].email_status == 'failed'
    assert result['invitation']['invitation_token'] == invitations[0].invitation_token


def test_advance_into_manual_stage_sends_no_invitation(job, candidate, stages):
    record = make_record(job, candidate, stages['Technical Assessment'])

    result = process_stage_action(record.id, 'advance')

    assert result['currentStage'] == 'HR Round'
    assert result['invitation'] is None
    assert InterviewInvitation.query.count() == 0


def test_advance_at_last_stage_hires(job, candidate, stages):
    record = make_record(job, candidate, stages['Offer Stage'])

    result = process_stage_action(record.id, 'advance')

    assert result['status'] == 'hired'
    db.session.refresh(record)
    assert record.status == 'hired'
    assert record.current_stage_id == stages['Offer Stage'].id


def test_evaluate_low_score_rejects_without_next_stage_event(job, candidate, stages):
    record = make_record(job, candidate, stages['Technical Assessment'])
    evaluator = scripted_evaluator({'Technical Assessment': 45})

    result = process_stage_action(record.id, 'evaluate', feedback='Struggled with SQL', evaluator=evaluator)

    assert result['status'] == 'rejected'
    assert evaluator.calls == [{'stage_name': 'Technical Assessment', 'notes': 'Struggled with SQL'}]
    db.session.refresh(record)
    assert record.status == 'rejected'
    assert record.current_stage_id == stages['Technical Assessment'].id
    events = record.events.all()
    assert len(events) == 1
    assert events[0].status == 'failed'
    assert events[0].ai_score == 45
    assert InterviewEvent.query.filter_by(stage_id=stages['HR Round'].id).count() == 0


def test_evaluate_pass_advances(job, candidate, stages):
    record = make_record(job, candidate, stages['Technical Assessment'])

    result = process_stage_action(
        record.id, 'evaluate', evaluator=scripted_evaluator({'Technical Assessment': 82})
    )

    assert result['status'] == 'advanced'
    assert result['evaluation']['score'] == 82
    db.session.refresh(record)
    assert record.current_stage_id == stages['HR Round'].id
    assert record.events.one().status == 'passed'


def test_evaluate_rate_limit_leaves_record_untouched(job, candidate, stages):
    record = make_record(job, candidate, stages['HR Round'])

    def limited(**kwargs):
        raise AIGatewayError('Rate limit exceeded', status_code=429)

    with pytest.raises(AIGatewayError) as excinfo:
        process_stage_action(record.id, 'evaluate', evaluator=limited)

    assert excinfo.value.status_code == 429
    db.session.refresh(record)
    assert record.status == 'active'
    assert record.events.count() == 0


def test_invalid_action(record):
    with pytest.raises(ValidationError) as excinfo:
        process_stage_action(record.id, 'promote')
    assert excinfo.value.message == 'Invalid action'
    assert excinfo.value.status_code == 400


def test_terminal_record_is_not_mutated(job, candidate, stages):
    record = make_record(job, candidate, stages['HR Round'], status='hired')

    with pytest.raises(ConflictError) as excinfo:
        process_stage_action(record.id, 'reject')

    assert excinfo.value.status_code == 409
    db.session.refresh(record)
    assert record.status == 'hired'


def test_event_upsert_keeps_one_row_per_stage(record, stages):
    stage = stages['Resume Screening']
    record_stage_event(record, stage, 'scheduled')
    db.session.commit()
    record_stage_event(record, stage, 'completed', ai_score=70)
    db.session.commit()

    events = record.events.all()
    assert len(events) == 1
    assert events[0].status == 'completed'
    assert events[0].ai_score == 70


def test_move_forward(record, stages):
    moved = move_candidate(record.id, stages['HR Round'].id)

    assert moved.current_stage_id == stages['HR Round'].id


def test_move_backward_is_rejected(job, candidate, stages):
    record = make_record(job, candidate, stages['HR Round'])

    with pytest.raises(ValidationError):
        move_candidate(record.id, stages['Resume Screening'].id)

    db.session.refresh(record)
    assert record.current_stage_id == stages['HR Round'].id


def test_move_to_unknown_stage(record):
    with pytest.raises(NotFoundError):
        move_candidate(record.id, 'no-such-stage')


def test_schedule_live_stage_requires_meeting_link(job, candidate, stages):
    record = make_record(job, candidate, stages['Technical Assessment'])

    with pytest.raises(ValidationError):
        schedule_stage_invitation(record.id, 'Technical Assessment')


def test_schedule_live_stage(job, candidate, stages):
    record = make_record(job, candidate, stages['Technical Assessment'])

    invitation = schedule_stage_invitation(
        record.id, 'Technical Assessment', meeting_link='https://meet.example.com/abc'
    )

    assert invitation.meeting_link == 'https://meet.example.com/abc'
    assert invitation.interview_event.status == 'scheduled'
    assert invitation.interview_event.stage_id == stages['Technical Assessment'].id
    assert invitation.email_status == 'failed'


def test_schedule_unknown_stage(record):
    with pytest.raises(NotFoundError):
        schedule_stage_invitation(record.id, 'Culture Fit Lunch')
