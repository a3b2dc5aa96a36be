"""Macro calculator.

Pure arithmetic from profile to daily caloric and macronutrient targets:

1. Basal rate: 10*weight + 6.25*(age*0.9) - 5*age + 5, scaled by 0.9 past 60
2. Total expenditure: basal rate times the activity factor
3. Caloric target: expenditure -500 for weight loss, +500 for muscle gain
4. Protein/carbs from body weight, fats fill the remaining calories
"""

from fitplan.recommendation.enums import ActivityLevel, WorkoutGoal
from fitplan.recommendation.models import MacroTargets, Profile

ACTIVITY_FACTORS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

CALORIE_ADJUSTMENT = 500.0
KCAL_PER_GRAM_PROTEIN = 4.0
KCAL_PER_GRAM_CARBS = 4.0
KCAL_PER_GRAM_FAT = 9.0


def basal_metabolic_rate(weight: float, age: int) -> float:
    """Age-adjusted basal rate in kcal/day."""
    bmr = 10 * weight + 6.25 * (age * 0.9) - 5 * age + 5
    if age > 60:
        bmr *= 0.9
    return bmr


def total_daily_energy_expenditure(weight: float, age: int, activity_level: ActivityLevel) -> float:
    """Basal rate scaled by the activity factor (very-active for unknown levels)."""
    factor = ACTIVITY_FACTORS.get(activity_level, ACTIVITY_FACTORS[ActivityLevel.VERY_ACTIVE])
    return basal_metabolic_rate(weight, age) * factor


def compute_macro_targets(profile: Profile) -> MacroTargets:
    """Compute daily caloric, protein, carb and fat targets.

    Weight loss takes precedence over muscle gain for the caloric adjustment.
    Fats are clamped at zero so every target is non-negative.

    Args:
        profile: Validated profile

    Returns:
        MacroTargets in kcal (caloric_intake) and grams (protein, carbs, fats)
    """
    goals = profile.workout_goals
    weight = profile.weight

    if WorkoutGoal.WEIGHT_LOSS in goals:
        adjustment = -CALORIE_ADJUSTMENT
    elif WorkoutGoal.MUSCLE_GAIN in goals:
        adjustment = CALORIE_ADJUSTMENT
    else:
        adjustment = 0.0

    tdee = total_daily_energy_expenditure(weight, profile.age, profile.activity_level)
    caloric_intake = max(tdee + adjustment, 0.0)

    muscle_gain = WorkoutGoal.MUSCLE_GAIN in goals
    protein = 2 * weight if muscle_gain else 1.2 * weight
    if profile.age > 50:
        protein = max(protein, 1.5 * weight)
    carbs = 3 * weight if muscle_gain else 2 * weight

    remaining = caloric_intake - (protein * KCAL_PER_GRAM_PROTEIN + carbs * KCAL_PER_GRAM_CARBS)
    fats = max(remaining / KCAL_PER_GRAM_FAT, 0.0)

    return MacroTargets(
        caloric_intake=caloric_intake,
        protein=protein,
        carbs=carbs,
        fats=fats,
    )
