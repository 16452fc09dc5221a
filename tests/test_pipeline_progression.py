"""
Automatic progression through AI-scored stages.
"""
import pytest
from conftest import scripted_evaluator, make_record
from talentflow_app.models import db
from talentflow_app.services.pipeline import auto_progress
from talentflow_app.utils.errors import AIGatewayError, NotFoundError


def test_walk_stops_at_first_manual_stage(record, stages):
    evaluator = scripted_evaluator({'Resume Screening': 75, 'AI Phone Interview': 80})

    result = auto_progress(record.id, evaluator=evaluator)

    assert result['success'] is True
    assert result['status'] == 'awaiting_manual'
    assert result['currentStage'] == 'Technical Assessment'
    assert [c['stage_name'] for c in evaluator.calls] == ['Resume Screening', 'AI Phone Interview']
    assert [r['score'] for r in result['results']] == [75, 80]

    db.session.refresh(record)
    assert record.status == 'active'
    assert record.current_stage_id == stages['Technical Assessment'].id
    events = record.events.all()
    assert len(events) == 2
    assert {e.stage.name: e.status for e in events} == {
        'Resume Screening': 'completed',
        'AI Phone Interview': 'completed',
    }
    assert all(e.completed_at is not None for e in events)


def test_failed_stage_rejects_candidate(record, stages):
    evaluator = scripted_evaluator({'Resume Screening': 75, 'AI Phone Interview': 40})

    result = auto_progress(record.id, evaluator=evaluator)

    assert result['status'] == 'rejected'
    assert result['rejectedAt'] == 'AI Phone Interview'
    db.session.refresh(record)
    assert record.status == 'rejected'
    assert record.current_stage_id == stages['AI Phone Interview'].id
    failed = [e for e in record.events if e.status == 'failed']
    assert len(failed) == 1
    assert failed[0].ai_score == 40
    assert failed[0].ai_feedback['passed'] is False


def test_single_step_when_auto_progress_all_is_false(record, stages):
    evaluator = scripted_evaluator({'Resume Screening': 90, 'AI Phone Interview': 90})

    result = auto_progress(record.id, auto_progress_all=False, evaluator=evaluator)

    assert result['status'] == 'progressed'
    assert result['currentStage'] == 'AI Phone Interview'
    assert len(evaluator.calls) == 1
    db.session.refresh(record)
    assert record.current_stage_id == stages['AI Phone Interview'].id


def test_record_without_stage_starts_at_first_stage(job, candidate, stages):
    record = make_record(job, candidate, stage=None)
    evaluator = scripted_evaluator({'Resume Screening': 70, 'AI Phone Interview': 65})

    result = auto_progress(record.id, evaluator=evaluator)

    assert result['currentStage'] == 'Technical Assessment'
    assert evaluator.calls[0]['stage_name'] == 'Resume Screening'


def test_inactive_record_is_left_alone(job, candidate, stages):
    record = make_record(job, candidate, stages['AI Phone Interview'], status='rejected')
    evaluator = scripted_evaluator({})

    result = auto_progress(record.id, evaluator=evaluator)

    assert result == {'success': False, 'message': 'Candidate is rejected, cannot progress'}
    assert evaluator.calls == []
    assert record.events.count() == 0


def test_manual_current_stage_is_not_evaluated_without_request(job, candidate, stages):
    record = make_record(job, candidate, stages['Technical Assessment'])
    evaluator = scripted_evaluator({'Technical Assessment': 95})

    result = auto_progress(record.id, evaluator=evaluator)

    assert result['status'] == 'awaiting_manual'
    assert result['results'] == []
    assert evaluator.calls == []
    db.session.refresh(record)
    assert record.current_stage_id == stages['Technical Assessment'].id
    assert record.events.count() == 0


def test_explicit_request_scores_manual_current_stage_only(job, candidate, stages):
    record = make_record(job, candidate, stages['Technical Assessment'])
    evaluator = scripted_evaluator({'Technical Assessment': 72, 'HR Round': 99})

    result = auto_progress(record.id, evaluate_current_stage=True, evaluator=evaluator)

    assert [c['stage_name'] for c in evaluator.calls] == ['Technical Assessment']
    assert result['status'] == 'awaiting_manual'
    assert result['currentStage'] == 'HR Round'
    db.session.refresh(record)
    assert record.current_stage_id == stages['HR Round'].id


def test_passing_last_stage_hires_candidate(job, candidate, stages):
    record = make_record(job, candidate, stages['Offer Stage'])
    evaluator = scripted_evaluator({'Offer Stage': 88})

    result = auto_progress(record.id, evaluate_current_stage=True, evaluator=evaluator)

    assert result['status'] == 'completed'
    db.session.refresh(record)
    assert record.status == 'hired'
    assert record.current_stage_id == stages['Offer Stage'].id


def test_delay_between_evaluations(record):
    evaluator = scripted_evaluator({'Resume Screening': 75, 'AI Phone Interview': 80})
    sleeps = []

    auto_progress(record.id, evaluator=evaluator, delay=1.5, sleep=sleeps.append)

    assert sleeps == [1.5]


def test_gateway_failure_keeps_earlier_stages(record, stages):
    def evaluator(stage_name, **kwargs):
        if stage_name == 'AI Phone Interview':
            raise AIGatewayError('Rate limit exceeded', status_code=429)
        return {'score': 80, 'passed': True, 'feedback': 'Good fit', 'details': {}}

    with pytest.raises(AIGatewayError) as excinfo:
        auto_progress(record.id, evaluator=evaluator)

    assert excinfo.value.status_code == 429
    db.session.refresh(record)
    assert record.status == 'active'
    assert record.current_stage_id == stages['AI Phone Interview'].id
    assert [e.stage.name for e in record.events] == ['Resume Screening']


def test_stage_order_never_decreases(record, stages):
    orders = [stages['Resume Screening'].stage_order]
    for _ in range(3):
        auto_progress(
            record.id,
            auto_progress_all=False,
            evaluator=scripted_evaluator({'Resume Screening': 61, 'AI Phone Interview': 61}),
        )
        db.session.refresh(record)
        orders.append(record.current_stage.stage_order)

    assert orders == sorted(orders)
    assert orders[-1] == stages['Technical Assessment'].stage_order


def test_unknown_record(app):
    with pytest.raises(NotFoundError):
        auto_progress('missing-id', evaluator=scripted_evaluator({}))
