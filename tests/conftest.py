"""
Pytest configuration and shared fixtures.
"""
import json
import pytest
import requests
from talentflow_app import create_app
from talentflow_app.models import db, User, Candidate, JobPosting, InterviewCandidate, InterviewStage
from talentflow_app.services.stages import seed_default_stages

TEST_EMPLOYER_EMAIL = "employer@test.com"
TEST_PASSWORD = "Secret123"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, text=''):
        self.status_code = status_code
        self._payload = payload
        self.text = text or ''

    def json(self):
        if self._payload is None:
            raise ValueError('No JSON body')
        return self._payload


def tool_call_response(arguments, status_code=200):
    """Gateway response carrying one function call with `arguments`."""
    return FakeResponse(status_code, {
        'choices': [{
            'message': {
                'tool_calls': [{
                    'type': 'function',
                    'function': {'name': 'fn', 'arguments': json.dumps(arguments)},
                }],
            },
        }],
    })


def scripted_evaluator(scores):
    """Evaluator returning a fixed score per stage name; records the calls made."""
    calls = []

    def evaluator(candidate_name, job_title, stage_name, previous_score=None,
                  previous_analysis=None, notes=None):
        calls.append({'stage_name': stage_name, 'notes': notes})
        score = scores[stage_name]
        return {
            'score': score,
            'passed': score >= 60,
            'feedback': f"{stage_name} scored {score}",
            'details': {'strengths': [], 'concerns': []},
        }

    evaluator.calls = calls
    return evaluator


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        seed_default_stages()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    """No test reaches the AI gateway or Resend unless it patches requests.post itself."""
    def refuse(*args, **kwargs):
        raise requests.ConnectionError('network disabled in tests')
    monkeypatch.setattr(requests, 'post', refuse)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def stages(app):
    return {s.name: s for s in InterviewStage.query.all()}


def make_user(email=TEST_EMPLOYER_EMAIL, role='employer', company_name='Acme Corp'):
    user = User(email=email, first_name='Erin', last_name='Employer', company_name=company_name, role=role)
    user.set_password(TEST_PASSWORD)
    db.session.add(user)
    db.session.commit()
    return user


def make_job(employer, title='Backend Engineer'):
    job = JobPosting(
        user_id=employer.id,
        title=title,
        description='Build and run APIs.',
        requirements='3+ years of Python',
        skills=['Python', 'Flask', 'SQL'],
    )
    db.session.add(job)
    db.session.commit()
    return job


def make_candidate(full_name='Jane Doe', email='jane@example.com'):
    candidate = Candidate(full_name=full_name, email=email, skills=['Python', 'Docker'])
    db.session.add(candidate)
    db.session.commit()
    return candidate


def make_record(job, candidate, stage=None, status='active', ai_score=None):
    record = InterviewCandidate(
        job_posting_id=job.id,
        candidate_id=candidate.id,
        current_stage_id=stage.id if stage else None,
        status=status,
        ai_score=ai_score,
    )
    db.session.add(record)
    db.session.commit()
    return record


@pytest.fixture
def employer(app):
    return make_user()


@pytest.fixture
def job(employer):
    return make_job(employer)


@pytest.fixture
def candidate(app):
    return make_candidate()


@pytest.fixture
def record(job, candidate, stages):
    return make_record(job, candidate, stages['Resume Screening'])


@pytest.fixture
def auth_client(client, employer):
    response = client.post('/api/auth/login', json={'email': TEST_EMPLOYER_EMAIL, 'password': TEST_PASSWORD})
    assert response.status_code == 200
    return client
