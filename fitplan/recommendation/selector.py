"""Candidate selector.

Draws random candidates satisfying the derived constraints, up to a quota.
When the primary request under-fills the quota a broadened fallback request
tops it up:
- workouts: only the fixed whitelist of acceptable tags, same quota
- diets: no filter at all, the full catalog

An empty primary result is never fatal on its own; only an empty merged
result raises NoCandidatesAvailableError.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from random import Random
from typing import TypeVar

from loguru import logger

from fitplan.recommendation.enums import WorkoutTag
from fitplan.recommendation.errors import NoCandidatesAvailableError
from fitplan.recommendation.models import DietCandidate, WorkoutCandidate
from fitplan.recommendation.ports import CandidateStore
from fitplan.recommendation.predicates import MATCH_ALL, AllOf, FieldIn, FieldNotIn, Predicate

FALLBACK_WORKOUT_TAGS: frozenset[str] = frozenset(
    {
        WorkoutTag.CARDIO,
        WorkoutTag.STRENGTH_TRAINING,
        WorkoutTag.HIIT,
        WorkoutTag.ENDURANCE,
        WorkoutTag.FUNCTIONAL,
        WorkoutTag.CORE,
        WorkoutTag.FLEXIBILITY,
        WorkoutTag.RECOVERY,
        WorkoutTag.YOGA,
        WorkoutTag.PILATES,
    }
)

CandidateT = TypeVar("CandidateT", WorkoutCandidate, DietCandidate)


def _merge(primary: Sequence[CandidateT], fallback: Iterable[CandidateT], limit: int | None) -> list[CandidateT]:
    """Primary items first, then unseen fallback items, optionally capped."""
    merged = list(primary)
    seen = {item.id for item in merged}
    for item in fallback:
        if limit is not None and len(merged) >= limit:
            break
        if item.id in seen:
            continue
        merged.append(item)
        seen.add(item.id)
    return merged


def exclusion_predicate(exclude_ids: Iterable[int]) -> Predicate | None:
    """Predicate removing already-used ids, or None when nothing is excluded."""
    ids = frozenset(exclude_ids)
    return FieldNotIn("id", ids) if ids else None


class CandidateSelector:
    """Selects workout and diet candidates through a CandidateStore."""

    def __init__(self, store: CandidateStore, rng: Random | None = None):
        self.store = store
        self.rng = rng or Random()

    def select_workouts(
        self,
        workout_filter: Predicate,
        quota: int,
        exclude_ids: Iterable[int] = (),
    ) -> list[WorkoutCandidate]:
        """Select up to ``quota`` workouts, falling back to the tag whitelist.

        Raises:
            NoCandidatesAvailableError: If primary and fallback are both empty
        """
        if quota <= 0:
            logger.debug("Workout quota is zero, nothing to select")
            return []

        exclude = exclusion_predicate(exclude_ids)
        primary = self.store.find_workouts(AllOf.of(workout_filter, exclude), quota, self.rng)
        if len(primary) >= quota:
            return primary

        logger.info(
            "Primary workout request under-filled quota, issuing fallback",
            found=len(primary),
            quota=quota,
        )
        fallback = self.store.find_workouts(
            AllOf.of(FieldIn("tag", FALLBACK_WORKOUT_TAGS), exclude),
            quota,
            self.rng,
        )
        if not primary and not fallback:
            # Catalog holds no whitelisted tags: draw from whatever exists
            fallback = self.store.find_workouts(AllOf.of(exclude), quota, self.rng)

        selected = _merge(primary, fallback, limit=quota)
        if not selected:
            raise NoCandidatesAvailableError("No workouts available for the profile constraints or the fallback catalog")
        return selected

    def select_diets(
        self,
        diet_filter: Predicate,
        quota: int,
        exclude_ids: Iterable[int] = (),
    ) -> list[DietCandidate]:
        """Select up to ``quota`` diets, falling back to the full catalog.

        Raises:
            NoCandidatesAvailableError: If primary and fallback are both empty
        """
        exclude = exclusion_predicate(exclude_ids)
        primary = self.store.find_diets(AllOf.of(diet_filter, exclude), quota, self.rng) if quota > 0 else []
        if quota > 0 and len(primary) >= quota:
            return primary

        logger.info(
            "Primary diet request under-filled quota, returning full catalog",
            found=len(primary),
            quota=quota,
        )
        fallback = self.store.find_diets(exclude or MATCH_ALL, None, self.rng)

        selected = _merge(primary, fallback, limit=None)
        if not selected:
            raise NoCandidatesAvailableError("No diets available for the profile constraints or the full catalog")
        return selected
