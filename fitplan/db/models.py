from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import JSON, Date, DateTime, Float, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""


class UserProfile(Base):
    """Physiological and preference profile plus the user's plan state.

    One row per user (user_id is the identity provider's subject). Stores:
    - Profile inputs: weight (kg), height, age, activity_level, workout_goals,
      diet_goal, excluded_ingredients
    - Monthly plan: workout_plan / diet_plan as ordered candidate id lists
    - Week pointer: current_week, week_start_date
    - Streak state: streak, last_activity_date
    """

    __tablename__ = "user_profiles"

    user_id: Mapped[str] = mapped_column(String, primary_key=True, index=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    height: Mapped[float | None] = mapped_column(Float, nullable=True)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    activity_level: Mapped[str] = mapped_column(String, nullable=False)
    workout_goals: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    diet_goal: Mapped[str | None] = mapped_column(String, nullable=True)
    excluded_ingredients: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    workout_plan: Mapped[list | None] = mapped_column(JSON, nullable=True)
    diet_plan: Mapped[list | None] = mapped_column(JSON, nullable=True)

    current_week: Mapped[int | None] = mapped_column(Integer, nullable=True)
    week_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_activity_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class Workout(Base):
    """Workout catalog entry (read-only reference data)."""

    __tablename__ = "workouts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    tag: Mapped[str] = mapped_column(String, nullable=False, index=True)
    intensity: Mapped[str] = mapped_column(String, nullable=False, index=True)
    level: Mapped[str] = mapped_column(String, nullable=False, index=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    calories_burned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    video_url: Mapped[str | None] = mapped_column(String, nullable=True)


class Diet(Base):
    """Meal catalog entry (read-only reference data)."""

    __tablename__ = "diets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    diet_type: Mapped[str] = mapped_column(String, nullable=False, index=True)
    calories: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    ingredients: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    meal_type: Mapped[str | None] = mapped_column(String, nullable=True)
    meal_time: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    recipe_url: Mapped[str | None] = mapped_column(String, nullable=True)


class UsedItem(Base):
    """Record that a catalog item was assigned to a user in a given week.

    Rows are inserted, never updated. Duplicate prevention via unique
    constraint on (user_id, item_kind, item_id, week_number).
    """

    __tablename__ = "used_items"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    item_kind: Mapped[str] = mapped_column(String, nullable=False)
    item_id: Mapped[int] = mapped_column(Integer, nullable=False)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    date_assigned: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "item_kind", "item_id", "week_number", name="uq_used_item_user_kind_item_week"),
        Index("idx_used_items_user_week", "user_id", "week_number"),
    )


class ScheduleEntry(Base):
    """One assigned workout or diet on one day of a user's week.

    The set of rows for (user_id, week_number) is replaced as a whole;
    position keeps the caller's order within a day.
    """

    __tablename__ = "schedule_entries"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    item_kind: Mapped[str] = mapped_column(String, nullable=False)
    item_id: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("idx_schedule_entries_user_week", "user_id", "week_number"),
    )
