"""Tests for the macro calculator."""

import pytest

from fitplan.recommendation.enums import ActivityLevel, WorkoutGoal
from fitplan.recommendation.macros import (
    ACTIVITY_FACTORS,
    basal_metabolic_rate,
    compute_macro_targets,
    total_daily_energy_expenditure,
)
from fitplan.recommendation.models import Profile


def _profile(weight=70.0, age=30, activity=ActivityLevel.MODERATE, goals=()) -> Profile:
    return Profile(weight=weight, age=age, activity_level=activity, workout_goals=frozenset(goals))


def test_basal_rate_formula():
    # 10*70 + 6.25*27 - 150 + 5
    assert basal_metabolic_rate(70, 30) == pytest.approx(723.75)


def test_basal_rate_scaled_down_past_sixty():
    unscaled = 10 * 70 + 6.25 * (65 * 0.9) - 5 * 65 + 5
    assert basal_metabolic_rate(70, 65) == pytest.approx(unscaled * 0.9)
    assert basal_metabolic_rate(70, 60) == pytest.approx(10 * 70 + 6.25 * 54 - 300 + 5)


@pytest.mark.parametrize("level", list(ActivityLevel))
def test_expenditure_uses_activity_factor(level):
    expected = basal_metabolic_rate(80, 40) * ACTIVITY_FACTORS[level]
    assert total_daily_energy_expenditure(80, 40, level) == pytest.approx(expected)


def test_weight_loss_subtracts_500():
    tdee = total_daily_energy_expenditure(70, 30, ActivityLevel.MODERATE)
    macros = compute_macro_targets(_profile(goals=[WorkoutGoal.WEIGHT_LOSS]))
    assert macros.caloric_intake == pytest.approx(tdee - 500)


def test_muscle_gain_adds_500_and_raises_protein_and_carbs():
    tdee = total_daily_energy_expenditure(70, 30, ActivityLevel.MODERATE)
    macros = compute_macro_targets(_profile(goals=[WorkoutGoal.MUSCLE_GAIN]))
    assert macros.caloric_intake == pytest.approx(tdee + 500)
    assert macros.protein == pytest.approx(140)
    assert macros.carbs == pytest.approx(210)


def test_weight_loss_wins_over_muscle_gain_for_calories():
    tdee = total_daily_energy_expenditure(70, 30, ActivityLevel.MODERATE)
    macros = compute_macro_targets(_profile(goals=[WorkoutGoal.WEIGHT_LOSS, WorkoutGoal.MUSCLE_GAIN]))
    assert macros.caloric_intake == pytest.approx(tdee - 500)
    # protein and carbs still follow the muscle-gain goal
    assert macros.protein == pytest.approx(140)


def test_protein_floor_over_fifty():
    macros = compute_macro_targets(_profile(weight=80, age=55))
    assert macros.protein == pytest.approx(120)


def test_fats_fill_remaining_calories():
    profile = _profile(weight=90, age=25, activity=ActivityLevel.VERY_ACTIVE)
    macros = compute_macro_targets(profile)
    expected = (macros.caloric_intake - 4 * macros.protein - 4 * macros.carbs) / 9
    assert expected > 0
    assert macros.fats == pytest.approx(expected)


def test_targets_are_never_negative():
    macros = compute_macro_targets(
        _profile(weight=120, age=90, activity=ActivityLevel.SEDENTARY, goals=[WorkoutGoal.WEIGHT_LOSS])
    )
    assert macros.caloric_intake >= 0
    assert macros.fats == 0
    assert macros.protein > 0
    assert macros.carbs > 0
