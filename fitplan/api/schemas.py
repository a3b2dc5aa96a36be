"""Request and response schemas for the HTTP layer.

Response models read straight from the engine's frozen dataclasses
(``from_attributes``), so the routers only pick which values to return.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fitplan.recommendation.enums import ItemKind
from fitplan.recommendation.models import Plan, Recommendation

# ============================================================================
# Profile
# ============================================================================


class ProfileRequest(BaseModel):
    """Request body for PUT /profile."""

    name: str | None = Field(default=None, description="Display name")
    weight: float = Field(description="Body weight in kg")
    height: float | None = Field(default=None, description="Height in cm", gt=0)
    age: int = Field(description="Age in years")
    activity_level: str = Field(description="sedentary | light | moderate | active | very-active")
    workout_goals: list[str] = Field(default_factory=list, description="weight-loss | muscle-gain | endurance")
    diet_goal: str | None = Field(default=None, description="Diet type matched exactly against the catalog")
    excluded_ingredients: list[str] = Field(default_factory=list, description="Ingredients to avoid")

    @field_validator("excluded_ingredients")
    @classmethod
    def strip_ingredients(cls, v: list[str]) -> list[str]:
        return [item.strip() for item in v if item and item.strip()]


class PreferencesRequest(BaseModel):
    """Request body for PUT /recommendations/preferences."""

    activity_level: str
    workout_goals: list[str] = Field(default_factory=list)
    diet_goal: str | None = None


class MacroTargetsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    caloric_intake: float = Field(description="Daily calories (kcal)")
    protein: float = Field(description="Daily protein (g)")
    carbs: float = Field(description="Daily carbohydrates (g)")
    fats: float = Field(description="Daily fats (g)")


class ProfileResponse(BaseModel):
    """Response for GET /profile."""

    user_id: str
    weight: float
    age: int
    activity_level: str
    workout_goals: list[str]
    diet_goal: str | None
    excluded_ingredients: list[str]
    macros: MacroTargetsResponse


# ============================================================================
# Recommendations
# ============================================================================


class ConstraintsResponse(BaseModel):
    """Categorical selection constraints and quotas."""

    tags: list[str]
    intensity: str
    level: str
    calorie_min: float
    calorie_max: float
    workouts_per_week: int
    monthly_workouts: int
    monthly_meals: int


class WorkoutResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    tag: str
    intensity: str
    level: str
    duration_minutes: int
    calories_burned: int
    description: str | None = None
    image_url: str | None = None
    video_url: str | None = None


class DietResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    diet_type: str
    calories: float
    ingredients: list[str]
    meal_type: str | None = None
    meal_time: str | None = None
    description: str | None = None
    image_url: str | None = None
    recipe_url: str | None = None


class RecommendationResponse(BaseModel):
    """Targets, constraints and (part of) the stored plan."""

    user_id: str
    macros: MacroTargetsResponse
    constraints: ConstraintsResponse
    workouts: list[WorkoutResponse]
    diets: list[DietResponse]
    week_start_date: date | None = None

    @classmethod
    def build(cls, user_id: str, recommendation: Recommendation, plan: Plan) -> "RecommendationResponse":
        constraints = recommendation.constraints
        low, high = constraints.calorie_band
        return cls(
            user_id=user_id,
            macros=MacroTargetsResponse.model_validate(recommendation.macros),
            constraints=ConstraintsResponse(
                tags=sorted(constraints.tags),
                intensity=constraints.intensity.value,
                level=constraints.level.value,
                calorie_min=low,
                calorie_max=high,
                workouts_per_week=constraints.quota.workouts_per_week,
                monthly_workouts=constraints.quota.monthly_workouts,
                monthly_meals=constraints.quota.monthly_meals,
            ),
            workouts=[WorkoutResponse.model_validate(w) for w in plan.workouts],
            diets=[DietResponse.model_validate(d) for d in plan.diets],
            week_start_date=plan.week_start_date,
        )


# ============================================================================
# Schedule
# ============================================================================


class PlanWeekRequest(BaseModel):
    """Request body for POST /schedule/plan."""

    week_number: int = Field(ge=1, description="1-based week number")
    week_start_date: date = Field(description="First day (Monday) of the week")


class ScheduleDayRequest(BaseModel):
    day: int = Field(description="Day of week, 1 = Monday ... 7 = Sunday")
    workout_ids: list[int] = Field(default_factory=list)
    diet_ids: list[int] = Field(default_factory=list)


class ScheduleRequest(BaseModel):
    """Request body for POST /schedule."""

    week_number: int = Field(ge=1)
    week_start_date: date
    days: list[ScheduleDayRequest]


class ScheduleDayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: int
    workouts: list[WorkoutResponse]
    diets: list[DietResponse]


class ScheduleResponse(BaseModel):
    """A week of assignments; always seven days."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    week_number: int
    week_start_date: date | None
    days: list[ScheduleDayResponse]


class UsedItemsRequest(BaseModel):
    """Request body for POST /schedule/used-items."""

    week_number: int = Field(ge=1)
    item_kind: ItemKind
    item_ids: list[int]
    date_assigned: date


class UsedItemsRecordedResponse(BaseModel):
    recorded: int = Field(description="Number of new records written (duplicates ignored)")


class UsedItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_kind: ItemKind
    item_id: int
    week_number: int
    date_assigned: date


# ============================================================================
# Streak
# ============================================================================


class StreakActivityRequest(BaseModel):
    """Request body for POST /streak.

    The date is kept as a string so malformed values surface as
    InvalidDateFormatError rather than a schema error.
    """

    date: str = Field(description="Activity date, ISO-8601 (YYYY-MM-DD or full timestamp)")


class StreakResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    streak: int
    last_activity_date: date | None
