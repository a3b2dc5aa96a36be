"""Engine construction for request handlers.

Each request gets its own engine bound to the request's database session.
"""

from __future__ import annotations

from functools import partial
from random import Random

from fastapi import Depends
from sqlalchemy.orm import Session

from fitplan.config.settings import settings
from fitplan.db.session import get_db
from fitplan.persistence import (
    CandidateRepository,
    ProfileRepository,
    ScheduleRepository,
    StreakRepository,
    UsedItemRepository,
    unit_of_work,
)
from fitplan.recommendation.engine import RecommendationEngine


def build_engine(session: Session, rng: Random | None = None) -> RecommendationEngine:
    """Wire a RecommendationEngine to SQLAlchemy repositories on ``session``."""
    if rng is None and settings.recommendation_seed is not None:
        rng = Random(settings.recommendation_seed)

    return RecommendationEngine(
        candidates=CandidateRepository(session),
        used_items=UsedItemRepository(session),
        schedules=ScheduleRepository(session),
        profiles=ProfileRepository(session),
        streaks=StreakRepository(session),
        transaction=partial(unit_of_work, session),
        rng=rng,
        retention_weeks=settings.used_item_retention_weeks,
        preview_size=settings.recommendation_preview_size,
    )


def get_engine(db: Session = Depends(get_db)) -> RecommendationEngine:
    """FastAPI dependency returning a request-scoped engine."""
    return build_engine(db)
