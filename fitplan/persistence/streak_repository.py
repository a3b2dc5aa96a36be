"""Repository for streak state (stored on the user's profile row)."""

from __future__ import annotations

from sqlalchemy.orm import Session

from fitplan.persistence.base import store_errors
from fitplan.persistence.profile_repository import ProfileRepository
from fitplan.recommendation.models import StreakState


class StreakRepository:
    """SQLAlchemy-backed StreakStore."""

    def __init__(self, session: Session):
        self.session = session
        self.profiles = ProfileRepository(session)

    def get_streak(self, user_id: str, for_update: bool = False) -> StreakState:
        """Current streak; ``for_update`` locks the row where the backend supports it.

        Raises:
            ProfileNotFoundError: If the user has no profile
        """
        row = self.profiles.get_row(user_id, for_update=for_update)
        return StreakState(streak=row.streak or 0, last_activity_date=row.last_activity_date)

    def set_streak(self, user_id: str, state: StreakState) -> None:
        row = self.profiles.get_row(user_id)
        row.streak = state.streak
        row.last_activity_date = state.last_activity_date
        with store_errors("set_streak"):
            self.session.flush()
