"""
AI gateway client and stage evaluator output validation.
"""
import pytest
import requests
from conftest import FakeResponse, tool_call_response
from talentflow_app.services.ai.stage_evaluator import evaluate_stage_with_ai, validate_evaluation
from talentflow_app.services.ai.resume_analyzer import analyze_candidate_fit
from talentflow_app.utils.errors import AIGatewayError


def _evaluate():
    return evaluate_stage_with_ai(
        candidate_name='Jane Doe',
        job_title='Backend Engineer',
        stage_name='Technical Assessment',
        previous_score=74,
        notes='Solid system design answers',
    )


def test_request_forces_the_stage_evaluation_tool(app, monkeypatch):
    sent = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        sent.update(url=url, headers=headers, json=json, timeout=timeout)
        return tool_call_response({'score': 78, 'passed': True, 'feedback': 'Strong fundamentals'})

    monkeypatch.setattr(requests, 'post', fake_post)

    result = _evaluate()

    assert result == {
        'score': 78,
        'passed': True,
        'feedback': 'Strong fundamentals',
        'details': {'strengths': [], 'concerns': []},
    }
    assert sent['url'] == app.config['AI_GATEWAY_URL']
    assert sent['headers']['Authorization'] == 'Bearer test-ai-key'
    assert sent['json']['tool_choice'] == {'type': 'function', 'function': {'name': 'stage_evaluation'}}
    assert sent['json']['tools'][0]['function']['name'] == 'stage_evaluation'
    prompt = sent['json']['messages'][1]['content']
    assert 'Previous AI Score: 74' in prompt
    assert 'Interviewer Notes: Solid system design answers' in prompt
    assert 'for the Backend Engineer role' in prompt


@pytest.mark.parametrize('raw_score, expected', [(140, 100), (-5, 0), (59.6, 60)])
def test_scores_are_clamped(app, raw_score, expected):
    result = validate_evaluation({'score': raw_score, 'feedback': 'ok'})

    assert result['score'] == expected


def test_passed_is_derived_from_score(app):
    assert validate_evaluation({'score': 60, 'feedback': ''})['passed'] is True
    assert validate_evaluation({'score': 59, 'feedback': ''})['passed'] is False
    assert validate_evaluation({'score': 59, 'passed': 'yes', 'feedback': ''})['passed'] is False


def test_contradicting_passed_flag_is_overridden(app, caplog):
    with caplog.at_level('WARNING'):
        result = validate_evaluation({'score': 30, 'passed': True, 'feedback': 'Weak answers'})

    assert result['passed'] is False
    assert 'disagrees with score 30' in caplog.text
    assert validate_evaluation({'score': 85, 'passed': False, 'feedback': ''})['passed'] is True


@pytest.mark.parametrize('raw', [
    {'score': 'eighty', 'feedback': 'ok'},
    {'score': True, 'feedback': 'ok'},
    {'feedback': 'missing score'},
    {'score': 70, 'feedback': ['not', 'a', 'string']},
    {'score': float('nan'), 'feedback': 'ok'},
    {'score': float('inf'), 'feedback': 'ok'},
    {'score': float('-inf'), 'feedback': 'ok'},
])
def test_malformed_evaluations_are_rejected(app, raw):
    with pytest.raises(AIGatewayError):
        validate_evaluation(raw)


@pytest.mark.parametrize('status_code, message', [
    (429, 'Rate limit exceeded'),
    (402, 'AI credits exhausted'),
    (500, 'AI evaluation failed'),
])
def test_gateway_status_errors(app, monkeypatch, status_code, message):
    monkeypatch.setattr(requests, 'post', lambda *a, **kw: FakeResponse(status_code, text='upstream'))

    with pytest.raises(AIGatewayError) as excinfo:
        _evaluate()

    assert excinfo.value.message == message
    assert excinfo.value.status_code == status_code


def test_response_without_tool_call(app, monkeypatch):
    monkeypatch.setattr(
        requests, 'post',
        lambda *a, **kw: FakeResponse(200, {'choices': [{'message': {'content': 'I think 80'}}]}),
    )

    with pytest.raises(AIGatewayError) as excinfo:
        _evaluate()
    assert excinfo.value.message == 'No tool call in AI response'


def test_transport_failure(app):
    with pytest.raises(AIGatewayError) as excinfo:
        _evaluate()
    assert excinfo.value.message == 'AI gateway request failed'


def test_missing_api_key(app):
    app.config['AI_GATEWAY_API_KEY'] = None

    with pytest.raises(AIGatewayError) as excinfo:
        _evaluate()
    assert excinfo.value.message == 'AI gateway API key not configured'


def test_resume_analysis_is_clamped(job, candidate, monkeypatch):
    monkeypatch.setattr(requests, 'post', lambda *a, **kw: tool_call_response({
        'overall_score': 104,
        'skill_match_score': 88,
        'experience_match_score': 70,
        'recommendation': 'yes',
        'strengths': ['Python'],
        'summary': 'Good backend match',
    }))

    analysis = analyze_candidate_fit(candidate, job)

    assert analysis['overall_score'] == 100
    assert analysis['skill_match_score'] == 88
    assert analysis['summary'] == 'Good backend match'
    assert analysis['candidate_data']['full_name'] == 'Jane Doe'


def test_resume_analysis_rejects_nan_scores(job, candidate, monkeypatch):
    monkeypatch.setattr(requests, 'post', lambda *a, **kw: tool_call_response({
        'overall_score': float('nan'),
        'skill_match_score': 88,
        'experience_match_score': 70,
        'recommendation': 'yes',
        'strengths': [],
        'summary': 'Unscored',
    }))

    with pytest.raises(AIGatewayError):
        analyze_candidate_fit(candidate, job)


def test_nan_in_tool_call_arguments_is_rejected(app, monkeypatch):
    monkeypatch.setattr(requests, 'post', lambda *a, **kw: tool_call_response({
        'score': float('nan'), 'passed': True, 'feedback': 'Great',
    }))

    with pytest.raises(AIGatewayError):
        _evaluate()
