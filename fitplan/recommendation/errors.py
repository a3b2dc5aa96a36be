"""Domain errors for the recommendation engine.

Every error names the stage that failed so callers can tell "no data exists"
apart from "write failed" and from bad input.
"""


class FitPlanError(Exception):
    """Base exception for all recommendation and scheduling errors."""

    stage = "engine"


class InvalidProfileError(FitPlanError):
    """Raised when weight, age, activity level or goals are missing or out of range."""

    stage = "validation"


class InvalidDateFormatError(FitPlanError):
    """Raised when an activity date cannot be parsed."""

    stage = "validation"


class InvalidScheduleError(FitPlanError):
    """Raised when a schedule payload is malformed (e.g., day outside 1..7)."""

    stage = "validation"


class ProfileNotFoundError(FitPlanError):
    """Raised when no profile exists for the user."""

    stage = "lookup"

    def __init__(self, user_id: str):
        super().__init__(f"No profile found for user {user_id}")
        self.user_id = user_id


class NoCandidatesAvailableError(FitPlanError):
    """Raised when both the primary and the fallback candidate requests are empty."""

    stage = "selection"


class PersistenceFailureError(FitPlanError):
    """Raised when the underlying store is unreachable or rejects a write."""

    stage = "persistence"


class PlanNotFoundError(FitPlanError):
    """Raised when the user has no generated plan yet."""

    stage = "lookup"

    def __init__(self, user_id: str):
        super().__init__(f"No workout plan found for user {user_id}")
        self.user_id = user_id
