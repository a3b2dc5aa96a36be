"""Tests for candidate selection and the fallback requests."""

import pytest

from fitplan.recommendation.errors import NoCandidatesAvailableError
from fitplan.recommendation.predicates import MATCH_ALL, FieldBetween, FieldEquals, FieldIn
from fitplan.recommendation.selector import FALLBACK_WORKOUT_TAGS, CandidateSelector


@pytest.fixture
def workouts(workout_factory):
    return [
        workout_factory(1, "Strength Training", "Medium", "Intermediate"),
        workout_factory(2, "Core", "Medium", "Intermediate"),
        workout_factory(3, "Cardio"),
        workout_factory(4, "Yoga"),
        workout_factory(5, "Sports"),
        workout_factory(6, "Balance"),
    ]


@pytest.fixture
def diets(diet_factory):
    return [
        diet_factory(1, calories=1800),
        diet_factory(2, calories=2000),
        diet_factory(3, calories=2200),
        diet_factory(4, calories=3500),
    ]


def test_primary_request_fills_quota_without_fallback(candidate_store_factory, workouts, rng):
    store = candidate_store_factory(workouts=workouts)
    selector = CandidateSelector(store, rng)

    selected = selector.select_workouts(FieldEquals("intensity", "Medium"), quota=2)

    assert sorted(w.id for w in selected) == [1, 2]
    assert len(store.workout_queries) == 1


def test_primary_result_never_exceeds_quota(candidate_store_factory, workouts, rng):
    store = candidate_store_factory(workouts=workouts)
    selected = CandidateSelector(store, rng).select_workouts(MATCH_ALL, quota=3)
    assert len(selected) == 3
    assert len({w.id for w in selected}) == 3


def test_underfilled_workouts_topped_up_from_tag_whitelist(candidate_store_factory, workouts, rng):
    store = candidate_store_factory(workouts=workouts)
    selector = CandidateSelector(store, rng)

    selected = selector.select_workouts(FieldEquals("intensity", "Medium"), quota=10)

    ids = [w.id for w in selected]
    # primary results stay in front, fallback adds whitelisted tags only
    assert set(ids[:2]) == {1, 2}
    assert set(ids) == {1, 2, 3, 4}
    assert len(ids) == len(set(ids))
    assert all(w.tag in FALLBACK_WORKOUT_TAGS for w in selected)
    _, fallback_limit = store.workout_queries[1]
    assert fallback_limit == 10


def test_empty_primary_falls_back_to_whitelist(candidate_store_factory, workouts, rng):
    store = candidate_store_factory(workouts=workouts)
    selected = CandidateSelector(store, rng).select_workouts(FieldEquals("tag", "Nonexistent"), quota=4)
    assert selected
    assert all(w.tag in FALLBACK_WORKOUT_TAGS for w in selected)


def test_workout_fallback_nonempty_whenever_catalog_nonempty(candidate_store_factory, workout_factory, rng):
    store = candidate_store_factory(workouts=[workout_factory(9, "Balance"), workout_factory(10, "Sports")])
    selected = CandidateSelector(store, rng).select_workouts(FieldEquals("tag", "Cardio"), quota=4)
    assert sorted(w.id for w in selected) == [9, 10]


def test_no_workouts_anywhere_raises(candidate_store_factory, rng):
    selector = CandidateSelector(candidate_store_factory(), rng)
    with pytest.raises(NoCandidatesAvailableError) as exc_info:
        selector.select_workouts(MATCH_ALL, quota=4)
    assert exc_info.value.stage == "selection"


def test_zero_quota_selects_nothing(candidate_store_factory, workouts, rng):
    store = candidate_store_factory(workouts=workouts)
    assert CandidateSelector(store, rng).select_workouts(MATCH_ALL, quota=0) == []
    assert store.workout_queries == []


def test_excluded_ids_never_selected(candidate_store_factory, workouts, rng):
    store = candidate_store_factory(workouts=workouts)
    selected = CandidateSelector(store, rng).select_workouts(MATCH_ALL, quota=10, exclude_ids={1, 3, 5})
    assert {w.id for w in selected}.isdisjoint({1, 3, 5})


def test_diets_primary_fills_quota(candidate_store_factory, diets, rng):
    store = candidate_store_factory(diets=diets)
    selected = CandidateSelector(store, rng).select_diets(FieldBetween("calories", 1500, 2500), quota=3)
    assert sorted(d.id for d in selected) == [1, 2, 3]
    assert len(store.diet_queries) == 1


def test_underfilled_diets_return_full_catalog_behind_primary(candidate_store_factory, diets, rng):
    store = candidate_store_factory(diets=diets)
    selected = CandidateSelector(store, rng).select_diets(FieldIn("id", {4}), quota=3)

    assert selected[0].id == 4
    assert sorted(d.id for d in selected) == [1, 2, 3, 4]
    fallback_predicate, fallback_limit = store.diet_queries[1]
    assert fallback_limit is None
    assert fallback_predicate == MATCH_ALL


def test_no_diets_anywhere_raises(candidate_store_factory, rng):
    with pytest.raises(NoCandidatesAvailableError):
        CandidateSelector(candidate_store_factory(), rng).select_diets(MATCH_ALL, quota=3)


def test_seeded_generators_select_identically(candidate_store_factory, workouts):
    from random import Random

    first = CandidateSelector(candidate_store_factory(workouts=workouts), Random(3)).select_workouts(MATCH_ALL, 3)
    second = CandidateSelector(candidate_store_factory(workouts=workouts), Random(3)).select_workouts(MATCH_ALL, 3)
    assert [w.id for w in first] == [w.id for w in second]
