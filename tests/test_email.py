"""
Resend email delivery.
"""
from datetime import datetime
import requests
from conftest import FakeResponse
from talentflow_app.services.communication.email import (
    send_email, send_interview_invitation_email, send_stage_transition_email,
)


def test_missing_api_key(app):
    result = send_email('jane@example.com', 'Hello', '<p>Hi</p>')

    assert result == {'success': False, 'error': 'Resend API key not configured'}


def test_transport_errors_are_returned_not_raised(app):
    app.config['RESEND_API_KEY'] = 're_test'

    result = send_email('jane@example.com', 'Hello', '<p>Hi</p>')

    assert result['success'] is False
    assert 'network disabled' in result['error']


def test_missing_recipient(app):
    app.config['RESEND_API_KEY'] = 're_test'

    assert send_email(None, 'Hello', '<p>Hi</p>')['success'] is False


def test_successful_send(app, monkeypatch):
    app.config['RESEND_API_KEY'] = 're_test'
    sent = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        sent.update(url=url, headers=headers, json=json, timeout=timeout)
        return FakeResponse(200, {'id': 'msg_123'})

    monkeypatch.setattr(requests, 'post', fake_post)

    result = send_email('jane@example.com', 'Hello', '<p>Hi</p>')

    assert result == {'success': True, 'message_id': 'msg_123'}
    assert sent['url'] == 'https://api.resend.com/emails'
    assert sent['headers']['Authorization'] == 'Bearer re_test'
    assert sent['json']['to'] == ['jane@example.com']
    assert sent['timeout'] == 30


def test_rejected_send(app, monkeypatch):
    app.config['RESEND_API_KEY'] = 're_test'
    monkeypatch.setattr(requests, 'post', lambda *a, **kw: FakeResponse(422, text='invalid from'))

    assert send_email('jane@example.com', 'Hello', '<p>Hi</p>') == {'success': False, 'error': 'invalid from'}


def test_invitation_email_links_to_assessment(app, job, candidate, monkeypatch):
    app.config['RESEND_API_KEY'] = 're_test'
    sent = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        sent.update(json)
        return FakeResponse(200, {'id': 'msg_1'})

    monkeypatch.setattr(requests, 'post', fake_post)

    link = 'https://talentflow.test/interview?token=abc123'
    result = send_interview_invitation_email(
        candidate, job, 'AI Phone Interview', link, datetime(2030, 1, 15, 9, 30)
    )

    assert result['success'] is True
    assert sent['subject'] == 'Interview Invitation: AI Phone Interview - Backend Engineer at Acme Corp'
    assert link in sent['html']
    assert 'Hi Jane' in sent['html']
    assert 'Start Interview' in sent['html']


def test_live_stage_invitation_uses_meeting_link(app, job, candidate, monkeypatch):
    app.config['RESEND_API_KEY'] = 're_test'
    sent = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        sent.update(json)
        return FakeResponse(200, {'id': 'msg_2'})

    monkeypatch.setattr(requests, 'post', fake_post)

    send_interview_invitation_email(
        candidate, job, 'Technical Assessment', 'https://talentflow.test/interview?token=x',
        datetime(2030, 1, 15), meeting_link='https://meet.example.com/abc',
    )

    assert 'https://meet.example.com/abc' in sent['html']
    assert 'Join Interview' in sent['html']


def test_rejection_email_wording(app, job, candidate, monkeypatch):
    app.config['RESEND_API_KEY'] = 're_test'
    sent = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        sent.update(json)
        return FakeResponse(200, {'id': 'msg_3'})

    monkeypatch.setattr(requests, 'post', fake_post)

    send_stage_transition_email(candidate, job, 'HR Round', False, score=42)

    assert sent['subject'].startswith('Application update - Backend Engineer')
    assert 'will not be moving forward' in sent['html']
    assert '42%' in sent['html']
