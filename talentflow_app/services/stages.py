"""
Stage catalog lookups and seeding.
"""
import logging
from talentflow_app.models import db, InterviewStage
from talentflow_app.utils.constants import DEFAULT_STAGES

logger = logging.getLogger(__name__)


def get_ordered_stages():
    return InterviewStage.query.order_by(InterviewStage.stage_order.asc()).all()


def seed_default_stages():
    """Insert any default stage that is missing. Returns the number created."""
    existing = {s.name for s in InterviewStage.query.all()}
    created = 0
    for name, order, is_ai, description in DEFAULT_STAGES:
        if name in existing:
            continue
        db.session.add(InterviewStage(
            name=name,
            stage_order=order,
            is_ai_automated=is_ai,
            description=description,
        ))
        created += 1
    if created:
        db.session.commit()
        logger.info(f"Seeded {created} interview stages")
    return created


def get_first_stage(stages=None):
    stages = stages if stages is not None else get_ordered_stages()
    return stages[0] if stages else None


def get_current_stage(record, stages=None):
    """A record without a stage sits at the first stage."""
    if record.current_stage is not None:
        return record.current_stage
    return get_first_stage(stages)


def get_next_stage(stage, stages=None):
    if stage is None:
        return None
    stages = stages if stages is not None else get_ordered_stages()
    for candidate in stages:
        if candidate.stage_order > stage.stage_order:
            return candidate
    return None


def get_stage_by_name(name):
    return InterviewStage.query.filter_by(name=name).first()
