"""Tests for the rotation tracker."""

from datetime import date

from fitplan.recommendation.enums import ItemKind
from fitplan.recommendation.rotation import RotationTracker

USER = "user-1"
MONDAY = date(2026, 3, 2)


def test_record_used_is_idempotent(used_item_store, workout_factory):
    tracker = RotationTracker(used_item_store)
    workout = workout_factory(1)

    assert tracker.record_used(USER, 1, [workout], MONDAY) == 1
    assert tracker.record_used(USER, 1, [workout], MONDAY) == 0
    assert len(tracker.history(USER)) == 1


def test_duplicates_within_one_call_written_once(used_item_store):
    tracker = RotationTracker(used_item_store)
    assert tracker.record_used_ids(USER, 1, ItemKind.DIET, [4, 4, 5, 4], MONDAY) == 2
    assert used_item_store.used_item_ids(USER, 1, ItemKind.DIET) == {4, 5}


def test_filter_unused_drops_items_used_that_week(used_item_store, workout_factory, diet_factory):
    tracker = RotationTracker(used_item_store)
    tracker.record_used(USER, 2, [workout_factory(1), diet_factory(1)], MONDAY)

    pool = [workout_factory(1), workout_factory(2), diet_factory(1), diet_factory(3)]
    remaining = tracker.filter_unused(USER, 2, pool)

    assert [(c.kind, c.id) for c in remaining] == [(ItemKind.WORKOUT, 2), (ItemKind.DIET, 3)]


def test_usage_is_scoped_to_week_user_and_kind(used_item_store, workout_factory, diet_factory):
    tracker = RotationTracker(used_item_store)
    tracker.record_used(USER, 1, [workout_factory(7)], MONDAY)

    assert tracker.filter_unused(USER, 2, [workout_factory(7)])
    assert tracker.filter_unused("someone-else", 1, [workout_factory(7)])
    # same numeric id, different kind
    assert tracker.filter_unused(USER, 1, [diet_factory(7)])


def test_retention_purges_weeks_outside_window(used_item_store):
    tracker = RotationTracker(used_item_store, retention_weeks=2)
    for week in (1, 2, 3):
        tracker.record_used_ids(USER, week, ItemKind.WORKOUT, [week], MONDAY)

    assert {r.week_number for r in tracker.history(USER)} == {2, 3}


def test_zero_retention_keeps_everything(used_item_store):
    tracker = RotationTracker(used_item_store, retention_weeks=0)
    for week in range(1, 12):
        tracker.record_used_ids(USER, week, ItemKind.WORKOUT, [1], MONDAY)
    assert len(tracker.history(USER)) == 11


def test_clear_drops_whole_history(used_item_store):
    tracker = RotationTracker(used_item_store)
    tracker.record_used_ids(USER, 1, ItemKind.WORKOUT, [1, 2], MONDAY)
    tracker.record_used_ids("other", 1, ItemKind.WORKOUT, [1], MONDAY)

    assert tracker.clear(USER) == 2
    assert tracker.history(USER) == []
    assert len(tracker.history("other")) == 1
