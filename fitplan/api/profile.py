"""Profile endpoints.

Saving a profile validates it, derives targets and constraints, and stores a
freshly selected monthly plan in the same transaction.
"""

from fastapi import APIRouter, Depends
from loguru import logger

from fitplan.api.dependencies.auth import get_current_user_id
from fitplan.api.dependencies.engine import get_engine
from fitplan.api.schemas import MacroTargetsResponse, ProfileRequest, ProfileResponse, RecommendationResponse
from fitplan.recommendation.engine import RecommendationEngine

router = APIRouter(prefix="/profile", tags=["profile"])


@router.put("", response_model=RecommendationResponse)
def save_profile(
    request: ProfileRequest,
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> RecommendationResponse:
    """Create or update the profile and generate the initial plan.

    Raises:
        InvalidProfileError: 400 if weight, age, activity level or goals are invalid
        NoCandidatesAvailableError: 404 if the catalog cannot supply a plan
    """
    logger.info("Profile save requested", user_id=user_id)
    result = engine.save_profile(
        user_id,
        weight=request.weight,
        age=request.age,
        activity_level=request.activity_level,
        workout_goals=request.workout_goals,
        diet_goal=request.diet_goal,
        excluded_ingredients=request.excluded_ingredients,
        name=request.name,
        height=request.height,
    )
    return RecommendationResponse.build(user_id, result.recommendation, result.plan)


@router.get("", response_model=ProfileResponse)
def get_profile(
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> ProfileResponse:
    recommendation = engine.recommend_for(user_id)
    profile = recommendation.profile
    return ProfileResponse(
        user_id=user_id,
        weight=profile.weight,
        age=profile.age,
        activity_level=profile.activity_level.value,
        workout_goals=sorted(goal.value for goal in profile.workout_goals),
        diet_goal=profile.diet_goal,
        excluded_ingredients=sorted(profile.excluded_ingredients),
        macros=MacroTargetsResponse.model_validate(recommendation.macros),
    )
