"""End-to-end engine tests over the seeded SQLite catalog.

Catalog (see tests/conftest.py): workouts 1-5 match the reference profile,
6, 7 and 10 are only reachable through the fallback tag whitelist, 8 and 9
only through the unfiltered last resort. Diets 1, 2, 3 and 5 fall in the
reference profile's calorie band.
"""

from datetime import date
from random import Random

import pytest

from fitplan.api.dependencies.engine import build_engine
from fitplan.db.models import UserProfile
from fitplan.recommendation.enums import ItemKind
from fitplan.recommendation.errors import (
    InvalidProfileError,
    InvalidScheduleError,
    NoCandidatesAvailableError,
    PlanNotFoundError,
    ProfileNotFoundError,
)
from fitplan.recommendation.models import DayAssignment
from fitplan.recommendation.streak import parse_activity_date

MONDAY = date(2026, 3, 2)


@pytest.fixture
def planned_user(recommendation_engine, user_id, reference_profile):
    recommendation_engine.save_profile(user_id, today=MONDAY, **reference_profile)
    return user_id


# -----------------------------
# Profile and plan
# -----------------------------
def test_save_profile_generates_plan_with_fallback(recommendation_engine, user_id, reference_profile):
    result = recommendation_engine.save_profile(user_id, today=MONDAY, **reference_profile)

    workout_ids = {w.id for w in result.plan.workouts}
    assert {1, 2, 3, 4, 5} <= workout_ids
    assert workout_ids <= {1, 2, 3, 4, 5, 6, 7, 10}
    assert len(result.plan.diets) == 3
    assert {d.id for d in result.plan.diets} <= {1, 2, 3, 5}
    assert result.recommendation.constraints.quota.monthly_workouts == 16

    stored = recommendation_engine.get_plan(user_id)
    assert [w.id for w in stored.workouts] == [w.id for w in result.plan.workouts]
    assert stored.week_start_date == MONDAY


def test_invalid_profile_writes_nothing(recommendation_engine, db_session, user_id):
    with pytest.raises(InvalidProfileError):
        recommendation_engine.save_profile(user_id, weight=-3, age=30, activity_level="moderate")
    assert db_session.get(UserProfile, user_id) is None


def test_empty_catalog_raises_before_writing(db_session, user_id, reference_profile):
    engine = build_engine(db_session, rng=Random(1))
    with pytest.raises(NoCandidatesAvailableError):
        engine.save_profile(user_id, **reference_profile)
    assert db_session.get(UserProfile, user_id) is None


def test_regenerate_uses_latest_profile(recommendation_engine, planned_user):
    recommendation_engine.save_profile(
        planned_user, weight=70, age=30, activity_level="sedentary", workout_goals=[], today=MONDAY
    )
    result = recommendation_engine.regenerate_plan(planned_user, today=date(2026, 3, 9))

    assert result.recommendation.constraints.quota.monthly_workouts == 4
    assert len(result.plan.workouts) == 4
    assert recommendation_engine.get_plan(planned_user).week_start_date == date(2026, 3, 9)


def test_preview_returns_first_items(recommendation_engine, planned_user):
    plan = recommendation_engine.get_plan(planned_user)
    recommendation, preview = recommendation_engine.preview(planned_user)

    assert [w.id for w in preview.workouts] == [w.id for w in plan.workouts[:3]]
    assert len(preview.diets) == 3
    assert recommendation.constraints.intensity == "Medium"


def test_preview_without_plan(recommendation_engine, planned_user):
    recommendation_engine.profiles.save_plan(planned_user, [], [], MONDAY)
    with pytest.raises(PlanNotFoundError):
        recommendation_engine.preview(planned_user)


def test_unknown_user_is_a_lookup_error(recommendation_engine):
    with pytest.raises(ProfileNotFoundError):
        recommendation_engine.regenerate_plan("ghost")


# -----------------------------
# Weekly planning
# -----------------------------
def test_plan_week_assigns_and_records(recommendation_engine, planned_user):
    schedule = recommendation_engine.plan_week(planned_user, 1, MONDAY)

    assert [d.day for d in schedule.days] == [1, 2, 3, 4, 5, 6, 7]
    assert [d.day for d in schedule.days if d.workouts] == [1, 2, 4, 6]
    assert all(len(d.diets) == 1 for d in schedule.days)

    history = recommendation_engine.used_items(planned_user)
    assert {r.item_id for r in history if r.item_kind == ItemKind.WORKOUT} == set(schedule.item_ids(ItemKind.WORKOUT))
    assert {r.item_id for r in history if r.item_kind == ItemKind.DIET} == set(schedule.item_ids(ItemKind.DIET))
    assert all(r.date_assigned == MONDAY for r in history)

    stored = recommendation_engine.get_schedule(planned_user)
    assert stored.week_number == 1
    assert stored.item_ids(ItemKind.WORKOUT) == schedule.item_ids(ItemKind.WORKOUT)


def test_replanning_same_week_avoids_used_workouts(recommendation_engine, planned_user):
    first = recommendation_engine.plan_week(planned_user, 1, MONDAY)
    second = recommendation_engine.plan_week(planned_user, 1, MONDAY)

    assert set(first.item_ids(ItemKind.WORKOUT)).isdisjoint(second.item_ids(ItemKind.WORKOUT))
    # the second save replaced the first
    assert recommendation_engine.get_schedule(planned_user, 1).item_ids(ItemKind.WORKOUT) == second.item_ids(
        ItemKind.WORKOUT
    )


def test_exhausted_plan_is_topped_up_from_catalog(recommendation_engine, planned_user):
    plan_ids = [w.id for w in recommendation_engine.get_plan(planned_user).workouts]
    recommendation_engine.record_used_items(planned_user, 1, ItemKind.WORKOUT, plan_ids, MONDAY)

    schedule = recommendation_engine.plan_week(planned_user, 1, MONDAY)

    # only the two workouts outside every filter are left for the week
    assert set(schedule.item_ids(ItemKind.WORKOUT)) == {8, 9}


def test_no_fresh_diets_fails_without_touching_stored_week(recommendation_engine, planned_user):
    first = recommendation_engine.plan_week(planned_user, 1, MONDAY)
    recommendation_engine.record_used_items(planned_user, 1, ItemKind.DIET, [1, 2, 3, 4, 5], MONDAY)

    with pytest.raises(NoCandidatesAvailableError):
        recommendation_engine.plan_week(planned_user, 1, MONDAY)

    stored = recommendation_engine.get_schedule(planned_user, 1)
    assert stored.item_ids(ItemKind.WORKOUT) == first.item_ids(ItemKind.WORKOUT)


def test_weeks_rotate_independently(recommendation_engine, planned_user):
    week_one = recommendation_engine.plan_week(planned_user, 1, MONDAY)
    week_two = recommendation_engine.plan_week(planned_user, 2, date(2026, 3, 9))

    assert week_one.item_ids(ItemKind.WORKOUT) == week_two.item_ids(ItemKind.WORKOUT)
    assert recommendation_engine.get_schedule(planned_user).week_number == 2


def test_plan_week_rejects_non_positive_week(recommendation_engine, planned_user):
    with pytest.raises(InvalidScheduleError):
        recommendation_engine.plan_week(planned_user, 0, MONDAY)


def test_schedule_before_any_week_is_empty(recommendation_engine, planned_user):
    schedule = recommendation_engine.get_schedule(planned_user)
    assert schedule.week_number == 1
    assert all(not d.workouts and not d.diets for d in schedule.days)


# -----------------------------
# Caller-built schedules and used items
# -----------------------------
def test_save_schedule_replaces_week(recommendation_engine, planned_user):
    recommendation_engine.save_schedule(planned_user, 3, MONDAY, [DayAssignment(day=1, workout_ids=(1, 2))])
    saved = recommendation_engine.save_schedule(
        planned_user, 3, MONDAY, [DayAssignment(day=7, workout_ids=(4,), diet_ids=(2,))]
    )

    stored = recommendation_engine.get_schedule(planned_user, 3)
    assert stored.item_ids(ItemKind.WORKOUT) == [4]
    assert stored.days[6].diets[0].id == 2
    assert saved.item_ids(ItemKind.WORKOUT) == [4]


def test_save_schedule_rejects_unknown_ids_and_keeps_previous(recommendation_engine, planned_user):
    recommendation_engine.save_schedule(planned_user, 1, MONDAY, [DayAssignment(day=1, workout_ids=(1,))])

    with pytest.raises(InvalidScheduleError, match="999"):
        recommendation_engine.save_schedule(planned_user, 1, MONDAY, [DayAssignment(day=2, workout_ids=(999,))])

    assert recommendation_engine.get_schedule(planned_user, 1).item_ids(ItemKind.WORKOUT) == [1]


def test_save_schedule_rejects_bad_day_and_keeps_previous(recommendation_engine, planned_user):
    recommendation_engine.save_schedule(planned_user, 1, MONDAY, [DayAssignment(day=1, workout_ids=(1,))])

    with pytest.raises(InvalidScheduleError):
        recommendation_engine.save_schedule(planned_user, 1, MONDAY, [DayAssignment(day=8, workout_ids=(2,))])

    assert recommendation_engine.get_schedule(planned_user, 1).item_ids(ItemKind.WORKOUT) == [1]


def test_record_used_items_ignores_duplicates(recommendation_engine, planned_user):
    assert recommendation_engine.record_used_items(planned_user, 1, ItemKind.WORKOUT, [1, 2, 2], MONDAY) == 2
    assert recommendation_engine.record_used_items(planned_user, 1, ItemKind.WORKOUT, [1], MONDAY) == 0
    assert len(recommendation_engine.used_items(planned_user)) == 2


def test_update_preferences_clears_schedules_and_history(recommendation_engine, planned_user):
    recommendation_engine.plan_week(planned_user, 1, MONDAY)

    result = recommendation_engine.update_preferences(planned_user, "light", ["endurance"], None, today=MONDAY)

    assert result.recommendation.constraints.quota.workouts_per_week == 2
    assert recommendation_engine.used_items(planned_user) == []
    week = recommendation_engine.get_schedule(planned_user, 1)
    assert all(not d.workouts and not d.diets for d in week.days)
    profile = recommendation_engine.recommend_for(planned_user).profile
    assert profile.activity_level == "light"
    assert profile.weight == 70


# -----------------------------
# Streak
# -----------------------------
def test_streak_lifecycle(recommendation_engine, planned_user):
    assert recommendation_engine.get_streak(planned_user).streak == 0

    assert recommendation_engine.record_activity(planned_user, "2026-03-01").streak == 0
    assert recommendation_engine.record_activity(planned_user, "2026-03-02").streak == 1
    assert recommendation_engine.record_activity(planned_user, "2026-03-03T07:00:00Z").streak == 2
    assert recommendation_engine.record_activity(planned_user, "2026-03-03").streak == 2
    assert recommendation_engine.record_activity(planned_user, "2026-03-06").streak == 0

    state = recommendation_engine.get_streak(planned_user)
    assert state.last_activity_date == parse_activity_date("2026-03-06")

    reset = recommendation_engine.reset_streak(planned_user)
    assert reset.streak == 0
    assert reset.last_activity_date is None
