"""Recommendation endpoints: plan preview, regeneration and preference changes."""

from fastapi import APIRouter, Depends, Query
from loguru import logger

from fitplan.api.dependencies.auth import get_current_user_id
from fitplan.api.dependencies.engine import get_engine
from fitplan.api.schemas import PreferencesRequest, RecommendationResponse
from fitplan.recommendation.engine import RecommendationEngine

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.get("", response_model=RecommendationResponse)
def get_recommendations(
    limit: int | None = Query(None, ge=0, description="Items per list (defaults to the configured preview size)"),
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> RecommendationResponse:
    """Targets plus the first few planned workouts and diets.

    Raises:
        PlanNotFoundError: 404 if no plan has been generated yet
    """
    recommendation, plan = engine.preview(user_id, limit)
    return RecommendationResponse.build(user_id, recommendation, plan)


@router.post("/regenerate", response_model=RecommendationResponse)
def regenerate(
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> RecommendationResponse:
    logger.info("Plan regeneration requested", user_id=user_id)
    result = engine.regenerate_plan(user_id)
    return RecommendationResponse.build(user_id, result.recommendation, result.plan)


@router.put("/preferences", response_model=RecommendationResponse)
def update_preferences(
    request: PreferencesRequest,
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> RecommendationResponse:
    """Change activity level and goals.

    Clears stored schedules and used-item history, then regenerates the plan.
    """
    logger.info("Preference update requested", user_id=user_id, activity_level=request.activity_level)
    result = engine.update_preferences(user_id, request.activity_level, request.workout_goals, request.diet_goal)
    return RecommendationResponse.build(user_id, result.recommendation, result.plan)
