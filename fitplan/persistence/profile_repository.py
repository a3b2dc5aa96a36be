"""Repository for user profiles, stored plans and the current-week pointer."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from fitplan.db.models import UserProfile
from fitplan.persistence.base import store_errors
from fitplan.recommendation.errors import ProfileNotFoundError
from fitplan.recommendation.models import Profile
from fitplan.recommendation.validators import build_profile


def row_to_profile(row: UserProfile) -> Profile:
    """Build a validated Profile from a stored row.

    Raises:
        InvalidProfileError: If the stored values are incomplete or out of range
    """
    return build_profile(
        weight=row.weight,
        age=row.age,
        activity_level=row.activity_level,
        workout_goals=row.workout_goals or (),
        diet_goal=row.diet_goal,
        excluded_ingredients=row.excluded_ingredients or (),
    )


class ProfileRepository:
    """SQLAlchemy-backed ProfileStore."""

    def __init__(self, session: Session):
        self.session = session

    def find_row(self, user_id: str, for_update: bool = False) -> UserProfile | None:
        query = select(UserProfile).where(UserProfile.user_id == user_id)
        if for_update:
            query = query.with_for_update()
        with store_errors("get_profile"):
            return self.session.execute(query).scalar_one_or_none()

    def get_row(self, user_id: str, for_update: bool = False) -> UserProfile:
        """Stored profile row.

        Raises:
            ProfileNotFoundError: If the user has no profile
        """
        row = self.find_row(user_id, for_update=for_update)
        if row is None:
            raise ProfileNotFoundError(user_id)
        return row

    def get_profile(self, user_id: str) -> Profile:
        return row_to_profile(self.get_row(user_id))

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
    ) -> UserProfile:
        """Create the profile or overwrite its inputs; plan and streak state are kept."""
        row = self.find_row(user_id)
        if row is None:
            row = UserProfile(user_id=user_id, streak=0)
            self.session.add(row)

        row.name = name
        row.weight = weight
        row.height = height
        row.age = age
        row.activity_level = activity_level
        row.workout_goals = list(workout_goals)
        row.diet_goal = diet_goal
        row.excluded_ingredients = list(excluded_ingredients)

        with store_errors("upsert_profile"):
            self.session.flush()
        return row

    def update_preferences(
        self,
        user_id: str,
        activity_level: str,
        workout_goals: Iterable[str],
        diet_goal: str | None,
    ) -> None:
        row = self.get_row(user_id)
        row.activity_level = activity_level
        row.workout_goals = list(workout_goals)
        row.diet_goal = diet_goal
        with store_errors("update_preferences"):
            self.session.flush()

    def set_current_week(self, user_id: str, week_number: int, week_start_date: date | None = None) -> None:
        """Advance the week pointer, holding the profile row lock until commit."""
        row = self.get_row(user_id, for_update=True)
        row.current_week = week_number
        if week_start_date is not None:
            row.week_start_date = week_start_date
        with store_errors("set_current_week"):
            self.session.flush()

    def get_current_week(self, user_id: str) -> int | None:
        return self.get_row(user_id).current_week

    def save_plan(
        self,
        user_id: str,
        workout_ids: Sequence[int],
        diet_ids: Sequence[int],
        week_start_date: date,
    ) -> None:
        row = self.get_row(user_id)
        row.workout_plan = list(workout_ids)
        row.diet_plan = list(diet_ids)
        row.week_start_date = week_start_date
        with store_errors("save_plan"):
            self.session.flush()

    def get_plan_ids(self, user_id: str) -> tuple[list[int], list[int], date | None]:
        row = self.get_row(user_id)
        return list(row.workout_plan or ()), list(row.diet_plan or ()), row.week_start_date
