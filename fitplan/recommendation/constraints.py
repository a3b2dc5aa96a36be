"""Constraint deriver.

Maps a profile onto categorical selection constraints and quotas. Workout
tags come from the first matching goal (weight loss, then muscle gain, then
endurance); intensity is driven by age before activity level; level by body
weight alone. Meals are filtered by a calorie band around the caloric target,
the diet goal and the excluded ingredients.
"""

from fitplan.recommendation.enums import ActivityLevel, Intensity, Level, WorkoutGoal, WorkoutTag
from fitplan.recommendation.macros import compute_macro_targets
from fitplan.recommendation.models import Constraints, MacroTargets, Profile, Quota, Recommendation
from fitplan.recommendation.predicates import AllOf, ExcludesAny, FieldBetween, FieldEquals, FieldIn

GOAL_PRIORITY: tuple[WorkoutGoal, ...] = (
    WorkoutGoal.WEIGHT_LOSS,
    WorkoutGoal.MUSCLE_GAIN,
    WorkoutGoal.ENDURANCE,
)

GOAL_TAGS: dict[WorkoutGoal, frozenset[str]] = {
    WorkoutGoal.WEIGHT_LOSS: frozenset(
        {WorkoutTag.CARDIO, WorkoutTag.HIIT, WorkoutTag.ENDURANCE, WorkoutTag.STRENGTH_TRAINING, WorkoutTag.CORE}
    ),
    WorkoutGoal.MUSCLE_GAIN: frozenset(
        {WorkoutTag.STRENGTH_TRAINING, WorkoutTag.CORE, WorkoutTag.HIIT, WorkoutTag.ENDURANCE}
    ),
    WorkoutGoal.ENDURANCE: frozenset({WorkoutTag.ENDURANCE, WorkoutTag.CARDIO, WorkoutTag.STRENGTH_TRAINING}),
}

WORKOUTS_PER_WEEK: dict[ActivityLevel, int] = {
    ActivityLevel.SEDENTARY: 1,
    ActivityLevel.LIGHT: 2,
    ActivityLevel.MODERATE: 4,
    ActivityLevel.ACTIVE: 6,
    ActivityLevel.VERY_ACTIVE: 7,
}

WEEKS_PER_MONTH = 4
MONTHLY_MEAL_QUOTA = 3
CALORIE_BAND_HALF_WIDTH = 500.0
SENIOR_AGE = 50
HEAVY_WEIGHT_KG = 100
LIGHT_WEIGHT_KG = 60


def workout_tags_for_goals(goals: frozenset[WorkoutGoal]) -> frozenset[str]:
    """Allowed tags for the highest-priority goal present (empty → no restriction)."""
    for goal in GOAL_PRIORITY:
        if goal in goals:
            return GOAL_TAGS[goal]
    return frozenset()


def select_intensity(age: int, activity_level: ActivityLevel) -> Intensity:
    """Pick workout intensity; age over 50 always forces Low."""
    if age > SENIOR_AGE:
        return Intensity.LOW
    if activity_level == ActivityLevel.VERY_ACTIVE:
        return Intensity.HIGH
    if activity_level in (ActivityLevel.SEDENTARY, ActivityLevel.LIGHT):
        return Intensity.LOW
    if activity_level in (ActivityLevel.MODERATE, ActivityLevel.ACTIVE):
        return Intensity.MEDIUM
    return Intensity.LOW


def select_level(weight: float) -> Level:
    """Pick workout level from body weight only."""
    if weight > HEAVY_WEIGHT_KG:
        return Level.ADVANCED
    if weight < LIGHT_WEIGHT_KG:
        return Level.BEGINNER
    return Level.INTERMEDIATE


def workouts_per_week(activity_level: ActivityLevel) -> int:
    """Weekly workout count for an activity level."""
    return WORKOUTS_PER_WEEK.get(activity_level, 0)


def compute_quota(activity_level: ActivityLevel) -> Quota:
    """Weekly and monthly quotas for an activity level."""
    weekly = workouts_per_week(activity_level)
    return Quota(
        workouts_per_week=weekly,
        monthly_workouts=weekly * WEEKS_PER_MONTH,
        monthly_meals=MONTHLY_MEAL_QUOTA,
    )


def derive_constraints(profile: Profile, macros: MacroTargets) -> Constraints:
    """Derive workout and diet filters plus quotas for a profile.

    Args:
        profile: Validated profile
        macros: Targets computed for the same profile

    Returns:
        Constraints with composed predicates
    """
    tags = workout_tags_for_goals(profile.workout_goals)
    intensity = select_intensity(profile.age, profile.activity_level)
    level = select_level(profile.weight)

    workout_filter = AllOf.of(
        FieldIn("tag", tags) if tags else None,
        FieldEquals("intensity", intensity.value),
        FieldEquals("level", level.value),
    )

    calorie_band = (
        macros.caloric_intake - CALORIE_BAND_HALF_WIDTH,
        macros.caloric_intake + CALORIE_BAND_HALF_WIDTH,
    )
    diet_filter = AllOf.of(
        FieldBetween("calories", *calorie_band),
        ExcludesAny("ingredients", profile.excluded_ingredients) if profile.excluded_ingredients else None,
        FieldEquals("diet_type", profile.diet_goal) if profile.diet_goal else None,
    )

    return Constraints(
        workout_filter=workout_filter,
        diet_filter=diet_filter,
        tags=tags,
        intensity=intensity,
        level=level,
        calorie_band=calorie_band,
        quota=compute_quota(profile.activity_level),
    )


def recommend(profile: Profile) -> Recommendation:
    """Run the macro calculator and constraint deriver for a profile."""
    macros = compute_macro_targets(profile)
    return Recommendation(
        profile=profile,
        macros=macros,
        constraints=derive_constraints(profile, macros),
    )
