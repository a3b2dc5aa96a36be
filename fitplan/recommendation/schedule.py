"""Weekly schedule distribution and assignment.

distribute_week() spreads a week's selection over days 1..7; ScheduleAssigner
persists day-tagged input as the week's only assignment and advances the
user's current-week pointer. Reads always return all seven days.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from loguru import logger

from fitplan.recommendation.errors import InvalidScheduleError
from fitplan.recommendation.models import DietCandidate, ScheduleDay, WeekSchedule, WorkoutCandidate
from fitplan.recommendation.ports import ProfileStore, ScheduleStore

DAYS_PER_WEEK = 7
WEEK_DAYS: tuple[int, ...] = tuple(range(1, DAYS_PER_WEEK + 1))


def workout_day_slots(count: int) -> list[int]:
    """Evenly spaced day numbers (1..7) for ``count`` workouts, starting Monday."""
    return [1 + (i * DAYS_PER_WEEK) // count for i in range(count)]


def distribute_week(
    workouts: Sequence[WorkoutCandidate],
    diets: Sequence[DietCandidate],
) -> tuple[ScheduleDay, ...]:
    """Spread workouts evenly over the week and cycle one meal per day.

    Args:
        workouts: Workouts selected for the week, in order
        diets: Meal pool; day d gets diets[(d - 1) % len(diets)]

    Returns:
        Seven ScheduleDay values, days 1..7
    """
    day_workouts: dict[int, list[WorkoutCandidate]] = {day: [] for day in WEEK_DAYS}
    for workout, day in zip(workouts, workout_day_slots(len(workouts)), strict=True):
        day_workouts[day].append(workout)

    return tuple(
        ScheduleDay(
            day=day,
            workouts=tuple(day_workouts[day]),
            diets=(diets[(day - 1) % len(diets)],) if diets else (),
        )
        for day in WEEK_DAYS
    )


def normalize_days(days: Iterable[ScheduleDay]) -> tuple[ScheduleDay, ...]:
    """Merge entries per day and fill missing days with empty sequences.

    Raises:
        InvalidScheduleError: If a day is outside 1..7
    """
    workouts: dict[int, list[WorkoutCandidate]] = {day: [] for day in WEEK_DAYS}
    diets: dict[int, list[DietCandidate]] = {day: [] for day in WEEK_DAYS}
    for entry in days:
        if entry.day not in workouts:
            raise InvalidScheduleError(f"Schedule day must be between 1 and {DAYS_PER_WEEK}, got {entry.day}")
        workouts[entry.day].extend(entry.workouts)
        diets[entry.day].extend(entry.diets)

    return tuple(ScheduleDay(day=day, workouts=tuple(workouts[day]), diets=tuple(diets[day])) for day in WEEK_DAYS)


def empty_week(user_id: str, week_number: int, week_start_date: date | None = None) -> WeekSchedule:
    """A week with seven empty days."""
    return WeekSchedule(
        user_id=user_id,
        week_number=week_number,
        week_start_date=week_start_date,
        days=tuple(ScheduleDay(day=day) for day in WEEK_DAYS),
    )


class ScheduleAssigner:
    """Persists and reads per-day weekly assignments.

    save() must run inside a single transaction (the engine provides it) so
    the delete of the previous week and the insert of the new one are never
    observed separately.
    """

    def __init__(self, schedules: ScheduleStore, profiles: ProfileStore):
        self.schedules = schedules
        self.profiles = profiles

    def save(
        self,
        user_id: str,
        week_number: int,
        week_start_date: date,
        days: Iterable[ScheduleDay],
    ) -> WeekSchedule:
        """Replace the stored assignment for (user, week) and advance the week pointer.

        Raises:
            InvalidScheduleError: If week_number < 1 or a day is outside 1..7
        """
        if week_number < 1:
            raise InvalidScheduleError(f"Week number must be positive, got {week_number}")
        normalized = normalize_days(days)

        # The profile row lock taken here serializes replaces for the same user.
        self.profiles.set_current_week(user_id, week_number, week_start_date)
        written = self.schedules.replace_schedule(user_id, week_number, week_start_date, normalized)

        logger.info(
            "Saved weekly schedule",
            user_id=user_id,
            week=week_number,
            entries=written,
        )
        return WeekSchedule(
            user_id=user_id,
            week_number=week_number,
            week_start_date=week_start_date,
            days=normalized,
        )

    def get(self, user_id: str, week_number: int | None = None) -> WeekSchedule:
        """Read a week (the current week when ``week_number`` is None)."""
        if week_number is None:
            week_number = self.profiles.get_current_week(user_id)
            if week_number is None:
                logger.debug("No current week recorded, returning empty schedule", user_id=user_id)
                return empty_week(user_id, 1)
        return self.schedules.get_schedule(user_id, week_number)
