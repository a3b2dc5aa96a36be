"""Canonical enums for recommendation dimensions.

All enums are string-based so values round-trip unchanged through JSON
payloads and the catalog tables.
"""

from enum import StrEnum


# -----------------------------
# Profile
# -----------------------------
class ActivityLevel(StrEnum):
    """Self-reported weekly activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very-active"


class WorkoutGoal(StrEnum):
    """Training goal selected by the user."""

    WEIGHT_LOSS = "weight-loss"
    MUSCLE_GAIN = "muscle-gain"
    ENDURANCE = "endurance"


# -----------------------------
# Workout catalog
# -----------------------------
class Intensity(StrEnum):
    """Workout intensity."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Level(StrEnum):
    """Workout difficulty level."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class WorkoutTag(StrEnum):
    """Workout category tag."""

    CARDIO = "Cardio"
    HIIT = "HIIT"
    ENDURANCE = "Endurance"
    STRENGTH_TRAINING = "Strength Training"
    CORE = "Core"
    FUNCTIONAL = "Functional"
    FLEXIBILITY = "Flexibility"
    BALANCE = "Balance"
    RECOVERY = "Recovery"
    YOGA = "Yoga"
    PILATES = "Pilates"
    SPORTS = "Sports"


# -----------------------------
# Persistence
# -----------------------------
class ItemKind(StrEnum):
    """Kind of catalog item referenced by used-item and schedule rows."""

    WORKOUT = "workout"
    DIET = "diet"
