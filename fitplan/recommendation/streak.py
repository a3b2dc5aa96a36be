"""Streak state machine.

Transition on an activity dated ``today`` given (streak, last_activity_date):

| day difference | next streak  |
|----------------|--------------|
| 1              | streak + 1   |
| > 1            | 0            |
| <= 0           | unchanged    |

last_activity_date becomes ``today`` on every accepted event. A missing last
date counts as an unbounded gap. reset() returns to the initial state.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from loguru import logger

from fitplan.recommendation.errors import InvalidDateFormatError
from fitplan.recommendation.models import INITIAL_STREAK, StreakState
from fitplan.recommendation.ports import StreakStore


def _utc_date(moment: datetime) -> date:
    """Calendar date in UTC; naive datetimes are taken as UTC already."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


def parse_activity_date(value: date | datetime | str | None) -> date:
    """Parse a date, datetime or ISO-8601 string into a calendar date.

    Raises:
        InvalidDateFormatError: If the value is missing or unparseable
    """
    if isinstance(value, datetime):
        return _utc_date(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidDateFormatError(f"Invalid date format: {value!r}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return _utc_date(datetime.fromisoformat(text))
    except ValueError as e:
        raise InvalidDateFormatError(f"Invalid date format: {value!r}") from e


def day_difference(last_activity_date: date | None, today: date) -> int | None:
    """Whole days from the last activity to today (None when there is no last activity)."""
    if last_activity_date is None:
        return None
    return (today - last_activity_date).days


def next_streak(state: StreakState, today: date) -> StreakState:
    """Apply one activity event to a streak state."""
    difference = day_difference(state.last_activity_date, today)

    if difference is None or difference > 1:
        streak = 0
    elif difference == 1:
        streak = state.streak + 1
    else:
        streak = state.streak

    return StreakState(streak=streak, last_activity_date=today)


class StreakTracker:
    """Reads, advances and resets persisted streaks through a StreakStore."""

    def __init__(self, store: StreakStore):
        self.store = store

    def get(self, user_id: str) -> StreakState:
        return self.store.get_streak(user_id)

    def record_activity(self, user_id: str, today: date | datetime | str) -> StreakState:
        """Advance the user's streak for an activity on ``today``.

        Raises:
            InvalidDateFormatError: If ``today`` or the stored date is unparseable;
                stored state is left unchanged
        """
        activity_date = parse_activity_date(today)
        current = self.store.get_streak(user_id, for_update=True)
        if current.last_activity_date is not None:
            current = StreakState(
                streak=current.streak,
                last_activity_date=parse_activity_date(current.last_activity_date),
            )

        updated = next_streak(current, activity_date)
        self.store.set_streak(user_id, updated)

        logger.info(
            "Streak updated",
            user_id=user_id,
            previous=current.streak,
            streak=updated.streak,
            activity_date=activity_date.isoformat(),
        )
        return updated

    def reset(self, user_id: str) -> StreakState:
        """Return the user's streak to (0, None) regardless of prior state."""
        self.store.set_streak(user_id, INITIAL_STREAK)
        logger.info("Streak reset", user_id=user_id)
        return INITIAL_STREAK
