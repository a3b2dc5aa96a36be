"""In-memory stores for component tests."""

from datetime import date
from random import Random

import pytest

from fitplan.recommendation.models import DietCandidate, StreakState, UsedItemRecord, WorkoutCandidate
from fitplan.recommendation.predicates import filter_records


class InMemoryCandidateStore:
    """CandidateStore over plain lists; records every query it receives."""

    def __init__(self, workouts=(), diets=()):
        self.workouts = list(workouts)
        self.diets = list(diets)
        self.workout_queries = []
        self.diet_queries = []

    @staticmethod
    def _sample(items, limit, rng):
        if limit is None:
            return items
        return rng.sample(items, min(limit, len(items)))

    def find_workouts(self, predicate, limit, rng):
        self.workout_queries.append((predicate, limit))
        return self._sample(filter_records(predicate, self.workouts), limit, rng)

    def find_diets(self, predicate, limit, rng):
        self.diet_queries.append((predicate, limit))
        return self._sample(filter_records(predicate, self.diets), limit, rng)

    def get_workouts(self, ids):
        by_id = {w.id: w for w in self.workouts}
        return [by_id[i] for i in ids if i in by_id]

    def get_diets(self, ids):
        by_id = {d.id: d for d in self.diets}
        return [by_id[i] for i in ids if i in by_id]


class InMemoryUsedItemStore:
    """UsedItemStore keyed on (user, kind, item, week)."""

    def __init__(self):
        self.records: dict[tuple, date] = {}

    def has_used(self, user_id, item_kind, item_id, week_number):
        return (user_id, item_kind, item_id, week_number) in self.records

    def record_used(self, user_id, item_kind, item_id, week_number, date_assigned):
        key = (user_id, item_kind, item_id, week_number)
        if key in self.records:
            return False
        self.records[key] = date_assigned
        return True

    def used_item_ids(self, user_id, week_number, item_kind):
        return {key[2] for key in self.records if key[0] == user_id and key[1] == item_kind and key[3] == week_number}

    def history(self, user_id):
        return [
            UsedItemRecord(user_id=k[0], item_kind=k[1], item_id=k[2], week_number=k[3], date_assigned=v)
            for k, v in sorted(self.records.items())
            if k[0] == user_id
        ]

    def purge_before(self, user_id, week_number):
        stale = [k for k in self.records if k[0] == user_id and k[3] < week_number]
        for key in stale:
            del self.records[key]
        return len(stale)

    def clear_user(self, user_id):
        return self.purge_before(user_id, float("inf"))


class InMemoryStreakStore:
    def __init__(self, states=None):
        self.states = dict(states or {})
        self.locked_reads = 0

    def get_streak(self, user_id, for_update=False):
        if for_update:
            self.locked_reads += 1
        return self.states.get(user_id, StreakState())

    def set_streak(self, user_id, state):
        self.states[user_id] = state


def make_workout(item_id: int, tag: str = "Cardio", intensity: str = "Low", level: str = "Beginner") -> WorkoutCandidate:
    return WorkoutCandidate(id=item_id, name=f"Workout {item_id}", tag=tag, intensity=intensity, level=level)


def make_diet(item_id: int, calories: float = 2000, diet_type: str = "balanced", ingredients=()) -> DietCandidate:
    return DietCandidate(
        id=item_id,
        name=f"Diet {item_id}",
        diet_type=diet_type,
        calories=calories,
        ingredients=tuple(ingredients),
    )


@pytest.fixture
def rng() -> Random:
    return Random(42)


@pytest.fixture
def used_item_store() -> InMemoryUsedItemStore:
    return InMemoryUsedItemStore()


@pytest.fixture
def streak_store() -> InMemoryStreakStore:
    return InMemoryStreakStore()


@pytest.fixture
def workout_factory():
    return make_workout


@pytest.fixture
def diet_factory():
    return make_diet


@pytest.fixture
def candidate_store_factory():
    return InMemoryCandidateStore
