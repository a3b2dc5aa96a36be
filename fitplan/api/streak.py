"""Streak endpoints."""

from fastapi import APIRouter, Depends

from fitplan.api.dependencies.auth import get_current_user_id
from fitplan.api.dependencies.engine import get_engine
from fitplan.api.schemas import StreakActivityRequest, StreakResponse
from fitplan.recommendation.engine import RecommendationEngine

router = APIRouter(prefix="/streak", tags=["streak"])


@router.get("", response_model=StreakResponse)
def get_streak(
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> StreakResponse:
    return StreakResponse.model_validate(engine.get_streak(user_id))


@router.post("", response_model=StreakResponse)
def record_activity(
    request: StreakActivityRequest,
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> StreakResponse:
    """Advance the streak for an activity completed on the given date.

    Raises:
        InvalidDateFormatError: 400 if the date cannot be parsed
    """
    return StreakResponse.model_validate(engine.record_activity(user_id, request.date))


@router.post("/reset", response_model=StreakResponse)
def reset_streak(
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> StreakResponse:
    return StreakResponse.model_validate(engine.reset_streak(user_id))
