"""Weekly schedule endpoints."""

from fastapi import APIRouter, Depends, Query
from loguru import logger

from fitplan.api.dependencies.auth import get_current_user_id
from fitplan.api.dependencies.engine import get_engine
from fitplan.api.schemas import (
    PlanWeekRequest,
    ScheduleRequest,
    ScheduleResponse,
    UsedItemResponse,
    UsedItemsRecordedResponse,
    UsedItemsRequest,
)
from fitplan.recommendation.engine import RecommendationEngine
from fitplan.recommendation.models import DayAssignment

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.post("/plan", response_model=ScheduleResponse)
def plan_week(
    request: PlanWeekRequest,
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> ScheduleResponse:
    """Build the week from the stored plan, skipping items already used that week.

    The schedule is saved and its items recorded as used in one transaction.
    """
    logger.info("Weekly planning requested", user_id=user_id, week=request.week_number)
    schedule = engine.plan_week(user_id, request.week_number, request.week_start_date)
    return ScheduleResponse.model_validate(schedule)


@router.post("", response_model=ScheduleResponse)
def save_schedule(
    request: ScheduleRequest,
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> ScheduleResponse:
    """Replace the stored assignment for the week with the submitted days.

    Raises:
        InvalidScheduleError: 400 if a day is outside 1..7 or an id is unknown
    """
    days = [
        DayAssignment(day=d.day, workout_ids=tuple(d.workout_ids), diet_ids=tuple(d.diet_ids)) for d in request.days
    ]
    schedule = engine.save_schedule(user_id, request.week_number, request.week_start_date, days)
    return ScheduleResponse.model_validate(schedule)


@router.get("", response_model=ScheduleResponse)
def get_schedule(
    week: int | None = Query(None, ge=1, description="Week number (defaults to the current week)"),
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> ScheduleResponse:
    return ScheduleResponse.model_validate(engine.get_schedule(user_id, week))


@router.get("/used-items", response_model=list[UsedItemResponse])
def list_used_items(
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> list[UsedItemResponse]:
    return [UsedItemResponse.model_validate(record) for record in engine.used_items(user_id)]


@router.post("/used-items", response_model=UsedItemsRecordedResponse)
def record_used_items(
    request: UsedItemsRequest,
    user_id: str = Depends(get_current_user_id),
    engine: RecommendationEngine = Depends(get_engine),
) -> UsedItemsRecordedResponse:
    recorded = engine.record_used_items(
        user_id,
        request.week_number,
        request.item_kind,
        request.item_ids,
        request.date_assigned,
    )
    return UsedItemsRecordedResponse(recorded=recorded)
