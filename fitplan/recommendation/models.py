"""Core immutable data models for recommendations and schedules.

This module defines the canonical data structures that flow through the
engine:
- Profile input (physiology and preferences)
- Derived output (macro targets, selection constraints, quotas)
- Catalog candidates (workouts and diets)
- Weekly schedule and streak state

All models are frozen (immutable); a regeneration builds new values from the
latest persisted profile instead of mutating old ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from fitplan.recommendation.enums import ActivityLevel, Intensity, ItemKind, Level, WorkoutGoal
from fitplan.recommendation.predicates import Predicate


# -----------------------------
# Profile
# -----------------------------
@dataclass(frozen=True)
class Profile:
    """Immutable recommendation input.

    Attributes:
        weight: Body weight in kg
        age: Age in years
        activity_level: Self-reported activity level
        workout_goals: Selected training goals
        diet_goal: Diet type to match exactly against the catalog (None/empty → any)
        excluded_ingredients: Ingredients that must not appear in a meal
    """

    weight: float
    age: int
    activity_level: ActivityLevel
    workout_goals: frozenset[WorkoutGoal] = frozenset()
    diet_goal: str | None = None
    excluded_ingredients: frozenset[str] = frozenset()


# -----------------------------
# Derived targets and constraints
# -----------------------------
@dataclass(frozen=True)
class MacroTargets:
    """Daily nutritional targets (kcal and grams)."""

    caloric_intake: float
    protein: float
    carbs: float
    fats: float


@dataclass(frozen=True)
class Quota:
    """Selection quotas derived from activity level."""

    workouts_per_week: int
    monthly_workouts: int
    monthly_meals: int


@dataclass(frozen=True)
class Constraints:
    """Selection constraints for one recommendation run.

    The categorical choices are kept alongside the composed predicates so
    callers can report them without re-deriving.

    Attributes:
        workout_filter: Predicate over WorkoutCandidate fields
        diet_filter: Predicate over DietCandidate fields
        tags: Allowed workout tags (empty → no tag restriction)
        intensity: Required workout intensity
        level: Required workout level
        calorie_band: Closed (low, high) interval for meal calories
        quota: Workout and meal quotas
    """

    workout_filter: Predicate
    diet_filter: Predicate
    tags: frozenset[str]
    intensity: Intensity
    level: Level
    calorie_band: tuple[float, float]
    quota: Quota


@dataclass(frozen=True)
class Recommendation:
    """Pure recommendation output for a profile (no catalog access)."""

    profile: Profile
    macros: MacroTargets
    constraints: Constraints


# -----------------------------
# Catalog candidates
# -----------------------------
@dataclass(frozen=True)
class WorkoutCandidate:
    """Workout catalog entry as seen by the engine."""

    id: int
    name: str
    tag: str
    intensity: str
    level: str
    duration_minutes: int = 0
    calories_burned: int = 0
    description: str | None = None
    image_url: str | None = None
    video_url: str | None = None

    kind = ItemKind.WORKOUT


@dataclass(frozen=True)
class DietCandidate:
    """Meal catalog entry as seen by the engine."""

    id: int
    name: str
    diet_type: str
    calories: float
    ingredients: tuple[str, ...] = ()
    meal_type: str | None = None
    meal_time: str | None = None
    description: str | None = None
    image_url: str | None = None
    recipe_url: str | None = None

    kind = ItemKind.DIET


@dataclass(frozen=True)
class Plan:
    """Monthly candidate pool stored on the profile."""

    workouts: tuple[WorkoutCandidate, ...]
    diets: tuple[DietCandidate, ...]
    week_start_date: date | None = None


@dataclass(frozen=True)
class PlanResult:
    """Result of a plan (re)generation."""

    user_id: str
    recommendation: Recommendation
    plan: Plan


# -----------------------------
# Rotation and schedule
# -----------------------------
@dataclass(frozen=True)
class UsedItemRecord:
    """One (user, item, week) usage record."""

    user_id: str
    item_kind: ItemKind
    item_id: int
    week_number: int
    date_assigned: date


@dataclass(frozen=True)
class ScheduleDay:
    """Assigned workouts and diets for one day (1 = Monday … 7 = Sunday)."""

    day: int
    workouts: tuple[WorkoutCandidate, ...] = ()
    diets: tuple[DietCandidate, ...] = ()


@dataclass(frozen=True)
class DayAssignment:
    """Caller-built assignment for one day, by catalog id."""

    day: int
    workout_ids: tuple[int, ...] = ()
    diet_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class WeekSchedule:
    """Per-day assignment of one week; always holds days 1..7 in order."""

    user_id: str
    week_number: int
    week_start_date: date | None
    days: tuple[ScheduleDay, ...] = field(default_factory=tuple)

    def item_ids(self, kind: ItemKind) -> list[int]:
        """Ids of every item of ``kind`` in day order (duplicates preserved)."""
        ids: list[int] = []
        for day in self.days:
            items = day.workouts if kind == ItemKind.WORKOUT else day.diets
            ids.extend(item.id for item in items)
        return ids


# -----------------------------
# Streak
# -----------------------------
@dataclass(frozen=True)
class StreakState:
    """Daily-continuity counter."""

    streak: int = 0
    last_activity_date: date | None = None


INITIAL_STREAK = StreakState()
