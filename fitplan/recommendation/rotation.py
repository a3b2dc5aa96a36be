"""Rotation tracker.

Keeps weekly assignments from repeating: items recorded as used for a
(user, week) are removed from the pool offered for that week. Recording is
idempotent, so replays of the same (user, item, week) are no-ops.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from typing import TypeVar

from loguru import logger

from fitplan.recommendation.enums import ItemKind
from fitplan.recommendation.models import DietCandidate, UsedItemRecord, WorkoutCandidate
from fitplan.recommendation.ports import UsedItemStore

CandidateT = TypeVar("CandidateT", WorkoutCandidate, DietCandidate)


class RotationTracker:
    """Filters and records used items through a UsedItemStore.

    Attributes:
        store: Used-item store
        retention_weeks: Weeks of history kept per user after each recording
            (0 keeps everything)
    """

    def __init__(self, store: UsedItemStore, retention_weeks: int = 0):
        self.store = store
        self.retention_weeks = retention_weeks

    def used_item_ids(self, user_id: str, week_number: int, item_kind: ItemKind) -> set[int]:
        """Ids of items of ``item_kind`` already used in the given week."""
        return self.store.used_item_ids(user_id, week_number, item_kind)

    def filter_unused(self, user_id: str, week_number: int, candidates: Sequence[CandidateT]) -> list[CandidateT]:
        """Return ``candidates`` minus items already used in the given week, order kept."""
        used: dict[ItemKind, set[int]] = {}
        unused: list[CandidateT] = []
        for candidate in candidates:
            if candidate.kind not in used:
                used[candidate.kind] = self.used_item_ids(user_id, week_number, candidate.kind)
            if candidate.id not in used[candidate.kind]:
                unused.append(candidate)

        removed = len(candidates) - len(unused)
        if removed:
            logger.debug(
                "Removed previously used candidates",
                user_id=user_id,
                week=week_number,
                removed=removed,
            )
        return unused

    def record_used_ids(
        self,
        user_id: str,
        week_number: int,
        item_kind: ItemKind,
        item_ids: Iterable[int],
        date_assigned: date,
    ) -> int:
        """Record usage for raw ids; returns how many new records were written."""
        written = 0
        seen: set[int] = set()
        for item_id in item_ids:
            if item_id in seen:
                continue
            seen.add(item_id)
            if self.store.record_used(user_id, item_kind, item_id, week_number, date_assigned):
                written += 1
            else:
                logger.debug(
                    "Item already recorded for week",
                    user_id=user_id,
                    item_kind=item_kind.value,
                    item_id=item_id,
                    week=week_number,
                )

        self._apply_retention(user_id, week_number)
        return written

    def record_used(
        self,
        user_id: str,
        week_number: int,
        items: Iterable[WorkoutCandidate | DietCandidate],
        date_assigned: date,
    ) -> int:
        """Record every assigned item; returns how many new records were written."""
        by_kind: dict[ItemKind, list[int]] = {}
        for item in items:
            by_kind.setdefault(item.kind, []).append(item.id)

        written = 0
        for item_kind, ids in by_kind.items():
            written += self.record_used_ids(user_id, week_number, item_kind, ids, date_assigned)
        return written

    def history(self, user_id: str) -> list[UsedItemRecord]:
        """All used-item records for a user."""
        return self.store.history(user_id)

    def clear(self, user_id: str) -> int:
        """Drop a user's whole used-item history."""
        return self.store.clear_user(user_id)

    def _apply_retention(self, user_id: str, week_number: int) -> None:
        if self.retention_weeks <= 0:
            return
        cutoff = week_number - self.retention_weeks + 1
        if cutoff <= 1:
            return
        purged = self.store.purge_before(user_id, cutoff)
        if purged:
            logger.info(
                "Purged used-item history outside retention window",
                user_id=user_id,
                cutoff_week=cutoff,
                purged=purged,
            )
