"""Repository for weekly schedules.

A week is stored as one row per assigned item. replace_schedule() deletes the
week's rows and inserts the new set in the caller's transaction; it never
merges with what was there.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from fitplan.db.models import ScheduleEntry
from fitplan.persistence.base import store_errors
from fitplan.persistence.candidate_repository import CandidateRepository
from fitplan.recommendation.enums import ItemKind
from fitplan.recommendation.models import ScheduleDay, WeekSchedule
from fitplan.recommendation.schedule import WEEK_DAYS


class ScheduleRepository:
    """SQLAlchemy-backed ScheduleStore."""

    def __init__(self, session: Session):
        self.session = session
        self.candidates = CandidateRepository(session)

    def replace_schedule(
        self,
        user_id: str,
        week_number: int,
        week_start_date: date,
        days: Iterable[ScheduleDay],
    ) -> int:
        """Delete then insert the rows of (user, week); returns rows written."""
        entries: list[ScheduleEntry] = []
        for schedule_day in days:
            for position, workout in enumerate(schedule_day.workouts):
                entries.append(
                    ScheduleEntry(
                        user_id=user_id,
                        week_number=week_number,
                        week_start_date=week_start_date,
                        day=schedule_day.day,
                        item_kind=ItemKind.WORKOUT.value,
                        item_id=workout.id,
                        position=position,
                    )
                )
            for position, diet in enumerate(schedule_day.diets):
                entries.append(
                    ScheduleEntry(
                        user_id=user_id,
                        week_number=week_number,
                        week_start_date=week_start_date,
                        day=schedule_day.day,
                        item_kind=ItemKind.DIET.value,
                        item_id=diet.id,
                        position=position,
                    )
                )

        with store_errors("replace_schedule"):
            removed = self.session.execute(
                delete(ScheduleEntry).where(
                    ScheduleEntry.user_id == user_id,
                    ScheduleEntry.week_number == week_number,
                )
            ).rowcount
            self.session.add_all(entries)
            self.session.flush()

        logger.debug(
            "Replaced schedule rows",
            user_id=user_id,
            week=week_number,
            removed=removed or 0,
            inserted=len(entries),
        )
        return len(entries)

    def get_schedule(self, user_id: str, week_number: int) -> WeekSchedule:
        """Read a week grouped by day 1..7; days without entries are empty."""
        query = (
            select(ScheduleEntry)
            .where(ScheduleEntry.user_id == user_id, ScheduleEntry.week_number == week_number)
            .order_by(ScheduleEntry.day, ScheduleEntry.position)
        )
        with store_errors("get_schedule"):
            rows = list(self.session.execute(query).scalars().all())

        workouts = {w.id: w for w in self.candidates.get_workouts(
            [r.item_id for r in rows if r.item_kind == ItemKind.WORKOUT.value]
        )}
        diets = {d.id: d for d in self.candidates.get_diets(
            [r.item_id for r in rows if r.item_kind == ItemKind.DIET.value]
        )}

        days = []
        for day in WEEK_DAYS:
            day_rows = [r for r in rows if r.day == day]
            days.append(
                ScheduleDay(
                    day=day,
                    workouts=tuple(
                        workouts[r.item_id]
                        for r in day_rows
                        if r.item_kind == ItemKind.WORKOUT.value and r.item_id in workouts
                    ),
                    diets=tuple(
                        diets[r.item_id] for r in day_rows if r.item_kind == ItemKind.DIET.value and r.item_id in diets
                    ),
                )
            )

        return WeekSchedule(
            user_id=user_id,
            week_number=week_number,
            week_start_date=rows[0].week_start_date if rows else None,
            days=tuple(days),
        )

    def clear_user(self, user_id: str) -> int:
        with store_errors("clear_schedules"):
            return self.session.execute(delete(ScheduleEntry).where(ScheduleEntry.user_id == user_id)).rowcount or 0
