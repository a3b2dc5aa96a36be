"""Store contracts the engine depends on.

Any backend implementing these protocols can drive the engine; the
SQLAlchemy implementations live in fitplan.persistence.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from random import Random
from typing import Protocol

from fitplan.recommendation.enums import ItemKind
from fitplan.recommendation.models import (
    DietCandidate,
    Profile,
    ScheduleDay,
    StreakState,
    UsedItemRecord,
    WeekSchedule,
    WorkoutCandidate,
)
from fitplan.recommendation.predicates import Predicate


class CandidateStore(Protocol):
    def find_workouts(self, predicate: Predicate, limit: int | None, rng: Random) -> list[WorkoutCandidate]: ...

    def find_diets(self, predicate: Predicate, limit: int | None, rng: Random) -> list[DietCandidate]: ...

    def get_workouts(self, ids: Sequence[int]) -> list[WorkoutCandidate]: ...

    def get_diets(self, ids: Sequence[int]) -> list[DietCandidate]: ...


class UsedItemStore(Protocol):
    def has_used(self, user_id: str, item_kind: ItemKind, item_id: int, week_number: int) -> bool: ...

    def record_used(
        self, user_id: str, item_kind: ItemKind, item_id: int, week_number: int, date_assigned: date
    ) -> bool: ...

    def used_item_ids(self, user_id: str, week_number: int, item_kind: ItemKind) -> set[int]: ...

    def history(self, user_id: str) -> list[UsedItemRecord]: ...

    def purge_before(self, user_id: str, week_number: int) -> int: ...

    def clear_user(self, user_id: str) -> int: ...


class ScheduleStore(Protocol):
    def replace_schedule(
        self, user_id: str, week_number: int, week_start_date: date, days: Iterable[ScheduleDay]
    ) -> int: ...

    def get_schedule(self, user_id: str, week_number: int) -> WeekSchedule: ...

    def clear_user(self, user_id: str) -> int: ...


class ProfileStore(Protocol):
    def get_profile(self, user_id: str) -> Profile: ...

    def upsert_profile(
        self,
        user_id: str,
        *,
        weight: float,
        age: int,
        activity_level: str,
        workout_goals: Iterable[str] = (),
        diet_goal: str | None = None,
        excluded_ingredients: Iterable[str] = (),
        name: str | None = None,
        height: float | None = None,
    ) -> object: ...

    def set_current_week(self, user_id: str, week_number: int, week_start_date: date | None = None) -> None: ...

    def get_current_week(self, user_id: str) -> int | None: ...

    def save_plan(self, user_id: str, workout_ids: Sequence[int], diet_ids: Sequence[int], week_start_date: date) -> None: ...

    def get_plan_ids(self, user_id: str) -> tuple[list[int], list[int], date | None]: ...

    def update_preferences(
        self,
        user_id: str,
        activity_level: str,
        workout_goals: Iterable[str],
        diet_goal: str | None,
    ) -> None: ...


class StreakStore(Protocol):
    def get_streak(self, user_id: str, for_update: bool = False) -> StreakState: ...

    def set_streak(self, user_id: str, state: StreakState) -> None: ...


__all__ = [
    "CandidateStore",
    "ProfileStore",
    "ScheduleStore",
    "StreakStore",
    "UsedItemStore",
]
