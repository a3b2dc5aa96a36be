"""SQLAlchemy implementations of the engine's store contracts."""

from fitplan.persistence.base import store_errors, unit_of_work
from fitplan.persistence.candidate_repository import CandidateRepository
from fitplan.persistence.profile_repository import ProfileRepository
from fitplan.persistence.schedule_repository import ScheduleRepository
from fitplan.persistence.streak_repository import StreakRepository
from fitplan.persistence.used_item_repository import UsedItemRepository

__all__ = [
    "CandidateRepository",
    "ProfileRepository",
    "ScheduleRepository",
    "StreakRepository",
    "UsedItemRepository",
    "store_errors",
    "unit_of_work",
]
