"""
Kanban view of the interview pipeline and change subscriptions for it.
"""
import logging
from sqlalchemy import event
from sqlalchemy.orm import Session
from talentflow_app.models import (
    db, InterviewStage, InterviewCandidate, InterviewEvent, InterviewInvitation, InterviewResponse,
    JobPosting,
)
from talentflow_app.models.pipeline import (
    RECORD_ACTIVE, EVENT_PENDING, EVENT_SCHEDULED, EVENT_IN_PROGRESS,
    EVENT_COMPLETED, EVENT_PASSED, EVENT_FAILED,
)
from talentflow_app.utils.constants import DEFAULT_PREVIOUS_SCORE

logger = logging.getLogger(__name__)

STEP_COMPLETED = 'completed'
STEP_CURRENT = 'current'
STEP_PENDING = 'pending'
STEP_FAILED = 'failed'
STEP_IN_PROGRESS = 'in_progress'

WATCHED_MODELS = (InterviewCandidate, InterviewEvent, InterviewResponse, InterviewInvitation)


def candidate_rating(ai_score):
    """Five-star rating from a 0-100 score; unscored candidates rate as 70."""
    score = ai_score or DEFAULT_PREVIOUS_SCORE
    return min(5, int(score / 20 + 0.5))


def step_status(stage, stage_event, current_stage):
    """Board status of one stage for one record."""
    if stage_event is not None:
        if stage_event.status in (EVENT_COMPLETED, EVENT_PASSED):
            return STEP_COMPLETED
        if stage_event.status == EVENT_FAILED:
            return STEP_FAILED
        if stage_event.status == EVENT_IN_PROGRESS:
            return STEP_IN_PROGRESS
        if stage_event.status in (EVENT_SCHEDULED, EVENT_PENDING):
            return STEP_CURRENT
    if current_stage is not None and stage.id == current_stage.id:
        return STEP_CURRENT
    if current_stage is not None and stage.stage_order < current_stage.stage_order:
        return STEP_COMPLETED
    return STEP_PENDING


def _build_steps(stages, events_by_stage, current_stage):
    steps = []
    for stage in stages:
        ev = events_by_stage.get(stage.id)
        status = step_status(stage, ev, current_stage)
        steps.append({
            'id': stage.id,
            'title': stage.name,
            'status': status,
            'isLive': status == STEP_IN_PROGRESS,
            'isAiAutomated': stage.is_ai_automated,
            'score': ev.ai_score if ev else None,
            'notes': ev.notes if ev else None,
            'scheduledAt': ev.scheduled_at.isoformat() if ev and ev.scheduled_at else None,
            'startedAt': ev.created_at.isoformat() if ev and ev.created_at else None,
            'completedAt': ev.completed_at.isoformat() if ev and ev.completed_at else None,
        })
    return steps


def _card(record, stages, events_by_stage, column_stage):
    candidate = record.candidate
    job_posting = record.job_posting
    analysis = record.ai_analysis or {}
    profile = analysis.get('candidate_data') or {}
    skills = profile.get('skills') or candidate.skills or (job_posting.skills or [])[:5]

    return {
        'id': candidate.id,
        'interviewCandidateId': record.id,
        'jobId': job_posting.id,
        'name': profile.get('full_name') or candidate.full_name or 'Unknown',
        'email': profile.get('email') or candidate.email or '',
        'phone': candidate.phone,
        'location': profile.get('location') or candidate.location,
        'experience': candidate.experience_level,
        'education': profile.get('education') or candidate.education,
        'role': job_posting.title or 'Unknown Position',
        'appliedDate': record.applied_at.isoformat() if record.applied_at else None,
        'rating': candidate_rating(record.ai_score),
        'aiScore': record.ai_score,
        'aiAnalysis': record.ai_analysis,
        'tags': list(skills)[:3],
        'skills': list(skills),
        'resumeUrl': record.resume_url,
        'currentStage': column_stage.id,
        'interviewSteps': _build_steps(stages, events_by_stage, column_stage),
    }


def build_pipeline_board(job_posting_id=None, employer_id=None, session=None):
    """
    Columns of active candidates per stage:
    [{id, title, stageOrder, candidates: [...]}].

    Records without a current stage are listed in the first column.
    """
    session = session or db.session
    stages = session.query(InterviewStage).order_by(InterviewStage.stage_order.asc()).all()
    if not stages:
        return []

    query = session.query(InterviewCandidate).filter(InterviewCandidate.status == RECORD_ACTIVE)
    if job_posting_id:
        query = query.filter(InterviewCandidate.job_posting_id == job_posting_id)
    if employer_id:
        query = query.join(JobPosting).filter(JobPosting.user_id == employer_id)
    records = query.order_by(InterviewCandidate.applied_at.asc()).all()

    events_by_record = {}
    record_ids = [r.id for r in records]
    if record_ids:
        events = (
            session.query(InterviewEvent)
            .filter(InterviewEvent.interview_candidate_id.in_(record_ids))
            .order_by(InterviewEvent.created_at.asc())
            .all()
        )
        for ev in events:
            # later rows win: the latest event per (record, stage)
            events_by_record.setdefault(ev.interview_candidate_id, {})[ev.stage_id] = ev

    columns = {
        stage.id: {'id': stage.id, 'title': stage.name, 'stageOrder': stage.stage_order, 'candidates': []}
        for stage in stages
    }
    first_stage = stages[0]
    unplaced = []

    for record in records:
        events_by_stage = events_by_record.get(record.id, {})
        if record.current_stage_id and record.current_stage_id in columns:
            card = _card(record, stages, events_by_stage, record.current_stage)
            columns[record.current_stage_id]['candidates'].append(card)
        else:
            card = _card(record, stages, {}, first_stage)
            for index, step in enumerate(card['interviewSteps']):
                step['status'] = STEP_CURRENT if index == 0 else STEP_PENDING
                step['isLive'] = False
            unplaced.append(card)

    columns[first_stage.id]['candidates'].extend(unplaced)
    return [columns[stage.id] for stage in stages]


class PipelineSubscription:
    """
    Calls `on_refresh(board)` with a rebuilt board after every committed
    change to pipeline records, events, responses or invitations.

        with PipelineSubscription(on_refresh, job_posting_id=job.id):
            ...

    Must be created inside an application context.
    """

    def __init__(self, on_refresh, job_posting_id=None, employer_id=None):
        self.on_refresh = on_refresh
        self.job_posting_id = job_posting_id
        self.employer_id = employer_id
        self._engine = db.engine
        self._flag = f"pipeline_subscription_{id(self)}"
        self._closed = False

        event.listen(Session, 'after_flush', self._after_flush)
        event.listen(Session, 'after_commit', self._after_commit)
        event.listen(Session, 'after_rollback', self._after_rollback)

    @property
    def closed(self):
        return self._closed

    def _after_flush(self, session, flush_context):
        changed = list(session.new) + list(session.dirty) + list(session.deleted)
        if any(isinstance(obj, WATCHED_MODELS) for obj in changed):
            session.info[self._flag] = True

    def _after_rollback(self, session):
        session.info.pop(self._flag, None)

    def _after_commit(self, session):
        if not session.info.pop(self._flag, False):
            return
        self.refresh()

    def refresh(self):
        """Rebuild the board in a separate session and hand it to the callback."""
        if self._closed:
            return None
        with Session(bind=self._engine) as session:
            board = build_pipeline_board(
                job_posting_id=self.job_posting_id,
                employer_id=self.employer_id,
                session=session,
            )
        try:
            self.on_refresh(board)
        except Exception:
            logger.exception("Pipeline board refresh callback failed")
        return board

    def close(self):
        if self._closed:
            return
        event.remove(Session, 'after_flush', self._after_flush)
        event.remove(Session, 'after_commit', self._after_commit)
        event.remove(Session, 'after_rollback', self._after_rollback)
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
