"""Profile validation.

Macro and constraint computation are total over well-formed profiles; this
module is where malformed input is rejected before any computation runs.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from fitplan.recommendation.enums import ActivityLevel, WorkoutGoal
from fitplan.recommendation.errors import InvalidProfileError
from fitplan.recommendation.models import Profile

MAX_WEIGHT_KG = 500.0
MIN_AGE = 1
MAX_AGE = 120


def _coerce_activity_level(value: object) -> ActivityLevel:
    if value is None or value == "":
        raise InvalidProfileError("activity_level is required")
    try:
        return ActivityLevel(str(value))
    except ValueError as e:
        allowed = ", ".join(level.value for level in ActivityLevel)
        raise InvalidProfileError(f"Unknown activity_level '{value}' (expected one of: {allowed})") from e


def _coerce_goals(values: Iterable[object] | None) -> frozenset[WorkoutGoal]:
    goals: set[WorkoutGoal] = set()
    for value in values or ():
        try:
            goals.add(WorkoutGoal(str(value)))
        except ValueError as e:
            allowed = ", ".join(goal.value for goal in WorkoutGoal)
            raise InvalidProfileError(f"Unknown workout goal '{value}' (expected any of: {allowed})") from e
    return frozenset(goals)


def validate_profile(profile: Profile) -> Profile:
    """Check numeric ranges of an already-typed profile.

    Raises:
        InvalidProfileError: If weight or age is missing, non-finite or out of range
    """
    weight = profile.weight
    if weight is None or isinstance(weight, bool) or not isinstance(weight, (int, float)):
        raise InvalidProfileError("weight is required")
    if not math.isfinite(weight) or weight <= 0 or weight > MAX_WEIGHT_KG:
        raise InvalidProfileError(f"weight must be in (0, {MAX_WEIGHT_KG:g}] kg, got {weight}")

    age = profile.age
    if age is None or isinstance(age, bool) or not isinstance(age, int):
        raise InvalidProfileError("age is required and must be an integer")
    if age < MIN_AGE or age > MAX_AGE:
        raise InvalidProfileError(f"age must be in [{MIN_AGE}, {MAX_AGE}], got {age}")

    if not isinstance(profile.activity_level, ActivityLevel):
        raise InvalidProfileError(f"Unknown activity_level '{profile.activity_level}'")
    return profile


def build_profile(
    weight: float | None,
    age: int | None,
    activity_level: str | None,
    workout_goals: Iterable[str] | None = None,
    diet_goal: str | None = None,
    excluded_ingredients: Iterable[str] | None = None,
) -> Profile:
    """Build a validated Profile from raw stored or submitted values.

    Raises:
        InvalidProfileError: If any field is missing or out of range
    """
    profile = Profile(
        weight=float(weight) if isinstance(weight, (int, float)) and not isinstance(weight, bool) else weight,  # type: ignore[arg-type]
        age=age,  # type: ignore[arg-type]
        activity_level=_coerce_activity_level(activity_level),
        workout_goals=_coerce_goals(workout_goals),
        diet_goal=diet_goal or None,
        excluded_ingredients=frozenset(i.strip() for i in excluded_ingredients or () if i and i.strip()),
    )
    return validate_profile(profile)
