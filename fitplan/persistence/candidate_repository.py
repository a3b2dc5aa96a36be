"""Repository for the workout and diet catalogs.

Pushes the SQL-translatable part of a predicate into the query, re-checks
every row against the full predicate in memory, then samples with the
caller's Random so selection is reproducible under a seeded generator.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from random import Random

from sqlalchemy import select
from sqlalchemy.orm import Session

from fitplan.db.models import Diet, Workout
from fitplan.persistence.base import store_errors
from fitplan.persistence.filters import to_clause
from fitplan.recommendation.models import DietCandidate, WorkoutCandidate
from fitplan.recommendation.predicates import Predicate, filter_records


def workout_to_candidate(row: Workout) -> WorkoutCandidate:
    return WorkoutCandidate(
        id=row.id,
        name=row.name,
        tag=row.tag,
        intensity=row.intensity,
        level=row.level,
        duration_minutes=row.duration_minutes,
        calories_burned=row.calories_burned,
        description=row.description,
        image_url=row.image_url,
        video_url=row.video_url,
    )


def diet_to_candidate(row: Diet) -> DietCandidate:
    return DietCandidate(
        id=row.id,
        name=row.name,
        diet_type=row.diet_type,
        calories=row.calories,
        ingredients=tuple(row.ingredients or ()),
        meal_type=row.meal_type,
        meal_time=row.meal_time,
        description=row.description,
        image_url=row.image_url,
        recipe_url=row.recipe_url,
    )


def _sample(items: list, limit: int | None, rng: Random) -> list:
    if limit is None:
        return items
    if limit <= 0:
        return []
    return rng.sample(items, min(limit, len(items)))


def _in_requested_order(items: Iterable, ids: Sequence[int]) -> list:
    by_id = {item.id: item for item in items}
    return [by_id[item_id] for item_id in ids if item_id in by_id]


class CandidateRepository:
    """SQLAlchemy-backed CandidateStore."""

    def __init__(self, session: Session):
        self.session = session

    def find_workouts(self, predicate: Predicate, limit: int | None, rng: Random) -> list[WorkoutCandidate]:
        """Random workouts matching ``predicate``; all of them (id order) when limit is None."""
        query = select(Workout).order_by(Workout.id)
        clause = to_clause(predicate, Workout)
        if clause is not None:
            query = query.where(clause)

        with store_errors("find_workouts"):
            rows = self.session.execute(query).scalars().all()

        candidates = filter_records(predicate, (workout_to_candidate(r) for r in rows))
        return _sample(candidates, limit, rng)

    def find_diets(self, predicate: Predicate, limit: int | None, rng: Random) -> list[DietCandidate]:
        """Random diets matching ``predicate``; all of them (id order) when limit is None."""
        query = select(Diet).order_by(Diet.id)
        clause = to_clause(predicate, Diet)
        if clause is not None:
            query = query.where(clause)

        with store_errors("find_diets"):
            rows = self.session.execute(query).scalars().all()

        candidates = filter_records(predicate, (diet_to_candidate(r) for r in rows))
        return _sample(candidates, limit, rng)

    def get_workouts(self, ids: Sequence[int]) -> list[WorkoutCandidate]:
        """Workouts by id, in the order requested; unknown ids are skipped."""
        if not ids:
            return []
        with store_errors("get_workouts"):
            rows = self.session.execute(select(Workout).where(Workout.id.in_(set(ids)))).scalars().all()
        return _in_requested_order((workout_to_candidate(r) for r in rows), ids)

    def get_diets(self, ids: Sequence[int]) -> list[DietCandidate]:
        """Diets by id, in the order requested; unknown ids are skipped."""
        if not ids:
            return []
        with store_errors("get_diets"):
            rows = self.session.execute(select(Diet).where(Diet.id.in_(set(ids)))).scalars().all()
        return _in_requested_order((diet_to_candidate(r) for r in rows), ids)
