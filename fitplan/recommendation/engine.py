"""Recommendation engine.

Request-scoped orchestrator over the components and stores:

    profile → macros + constraints → selector (rotation-filtered)
            → distributor → schedule assigner → persisted

Every write path runs inside one unit of work so a failure leaves the stores
as they were. Selection always happens before the unit of work opens, so a
NoCandidatesAvailableError never leaves a half-written plan behind.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from contextlib import AbstractContextManager
from datetime import date, datetime, timezone
from random import Random

from loguru import logger

from fitplan.recommendation.constraints import recommend
from fitplan.recommendation.enums import ItemKind
from fitplan.recommendation.errors import InvalidScheduleError, NoCandidatesAvailableError, PlanNotFoundError
from fitplan.recommendation.models import (
    DayAssignment,
    DietCandidate,
    Plan,
    PlanResult,
    Recommendation,
    ScheduleDay,
    StreakState,
    UsedItemRecord,
    WeekSchedule,
    WorkoutCandidate,
)
from fitplan.recommendation.ports import CandidateStore, ProfileStore, ScheduleStore, StreakStore, UsedItemStore
from fitplan.recommendation.predicates import Predicate
from fitplan.recommendation.rotation import RotationTracker
from fitplan.recommendation.schedule import ScheduleAssigner, distribute_week
from fitplan.recommendation.selector import CandidateSelector
from fitplan.recommendation.streak import StreakTracker
from fitplan.recommendation.validators import build_profile

Transaction = Callable[[str], AbstractContextManager]


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


class RecommendationEngine:
    """Recommendation, weekly scheduling and streak operations for one request."""

    def __init__(
        self,
        *,
        candidates: CandidateStore,
        used_items: UsedItemStore,
        schedules: ScheduleStore,
        profiles: ProfileStore,
        streaks: StreakStore,
        transaction: Transaction,
        rng: Random | None = None,
        retention_weeks: int = 0,
        preview_size: int = 3,
    ):
        self.candidates = candidates
        self.schedules = schedules
        self.profiles = profiles
        self.transaction = transaction
        self.preview_size = preview_size

        self.selector = CandidateSelector(candidates, rng)
        self.rotation = RotationTracker(used_items, retention_weeks=retention_weeks)
        self.assigner = ScheduleAssigner(schedules, profiles)
        self.streaks = StreakTracker(streaks)

    # -----------------------------
    # Recommendation and plans
    # -----------------------------
    def recommend_for(self, user_id: str) -> Recommendation:
        """Macro targets and constraints for the user's latest stored profile."""
        return recommend(self.profiles.get_profile(user_id))

    def _select_plan(self, recommendation: Recommendation) -> tuple[list[WorkoutCandidate], list[DietCandidate]]:
        constraints = recommendation.constraints
        workouts = self.selector.select_workouts(constraints.workout_filter, constraints.quota.monthly_workouts)
        diets = self.selector.select_diets(constraints.diet_filter, constraints.quota.monthly_meals)
        return workouts, diets

    def save_profile(
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
        today: date | None = None,
    ) -> PlanResult:
        """Create or update a profile and generate its initial monthly plan.

        Raises:
            InvalidProfileError: If the submitted profile is malformed
            NoCandidatesAvailableError: If no workouts or diets can be selected
        """
        profile = build_profile(weight, age, activity_level, workout_goals, diet_goal, excluded_ingredients)
        recommendation = recommend(profile)
        workouts, diets = self._select_plan(recommendation)
        start = today or _today()

        with self.transaction("save_profile"):
            self.profiles.upsert_profile(
                user_id,
                weight=profile.weight,
                age=profile.age,
                activity_level=profile.activity_level.value,
                workout_goals=sorted(goal.value for goal in profile.workout_goals),
                diet_goal=profile.diet_goal,
                excluded_ingredients=sorted(profile.excluded_ingredients),
                name=name,
                height=height,
            )
            self.profiles.save_plan(user_id, [w.id for w in workouts], [d.id for d in diets], start)

        logger.info(
            "Profile saved with initial plan",
            user_id=user_id,
            workouts=len(workouts),
            diets=len(diets),
        )
        return PlanResult(
            user_id=user_id,
            recommendation=recommendation,
            plan=Plan(workouts=tuple(workouts), diets=tuple(diets), week_start_date=start),
        )

    def regenerate_plan(self, user_id: str, today: date | None = None) -> PlanResult:
        """Replace the stored monthly plan with a fresh selection for the latest profile."""
        recommendation = self.recommend_for(user_id)
        workouts, diets = self._select_plan(recommendation)
        start = today or _today()

        with self.transaction("regenerate_plan"):
            self.profiles.save_plan(user_id, [w.id for w in workouts], [d.id for d in diets], start)

        logger.info(
            "Plan regenerated",
            user_id=user_id,
            workouts=len(workouts),
            diets=len(diets),
        )
        return PlanResult(
            user_id=user_id,
            recommendation=recommendation,
            plan=Plan(workouts=tuple(workouts), diets=tuple(diets), week_start_date=start),
        )

    def update_preferences(
        self,
        user_id: str,
        activity_level: str,
        workout_goals: Iterable[str],
        diet_goal: str | None,
        today: date | None = None,
    ) -> PlanResult:
        """Change activity level and goals, then start over.

        Clears every stored schedule and the used-item history of the user and
        regenerates the plan, all in one unit of work.
        """
        current = self.profiles.get_profile(user_id)
        profile = build_profile(
            current.weight,
            current.age,
            activity_level,
            workout_goals,
            diet_goal,
            current.excluded_ingredients,
        )
        recommendation = recommend(profile)
        workouts, diets = self._select_plan(recommendation)
        start = today or _today()

        with self.transaction("update_preferences"):
            self.profiles.update_preferences(
                user_id,
                profile.activity_level.value,
                sorted(goal.value for goal in profile.workout_goals),
                profile.diet_goal,
            )
            self.profiles.save_plan(user_id, [w.id for w in workouts], [d.id for d in diets], start)
            cleared_schedules = self.schedules.clear_user(user_id)
            cleared_history = self.rotation.clear(user_id)

        logger.info(
            "Preferences updated, schedules and history cleared",
            user_id=user_id,
            cleared_schedules=cleared_schedules,
            cleared_history=cleared_history,
        )
        return PlanResult(
            user_id=user_id,
            recommendation=recommendation,
            plan=Plan(workouts=tuple(workouts), diets=tuple(diets), week_start_date=start),
        )

    def get_plan(self, user_id: str) -> Plan:
        """Stored monthly plan resolved to catalog candidates."""
        workout_ids, diet_ids, start = self.profiles.get_plan_ids(user_id)
        return Plan(
            workouts=tuple(self.candidates.get_workouts(workout_ids)),
            diets=tuple(self.candidates.get_diets(diet_ids)),
            week_start_date=start,
        )

    def preview(self, user_id: str, limit: int | None = None) -> tuple[Recommendation, Plan]:
        """Targets plus the first few planned workouts and diets.

        Raises:
            PlanNotFoundError: If no plan has been generated yet
        """
        size = self.preview_size if limit is None else limit
        plan = self.get_plan(user_id)
        if not plan.workouts:
            raise PlanNotFoundError(user_id)
        trimmed = Plan(workouts=plan.workouts[:size], diets=plan.diets[:size], week_start_date=plan.week_start_date)
        return self.recommend_for(user_id), trimmed

    # -----------------------------
    # Weekly schedule
    # -----------------------------
    def plan_week(
        self,
        user_id: str,
        week_number: int,
        week_start_date: date,
    ) -> WeekSchedule:
        """Build, persist and record the schedule for one week.

        Workouts come from the stored plan minus items already used this week,
        topped up by the selector when fewer than the weekly quota remain.
        """
        if week_number < 1:
            raise InvalidScheduleError(f"Week number must be positive, got {week_number}")

        recommendation = self.recommend_for(user_id)
        constraints = recommendation.constraints
        weekly = constraints.quota.workouts_per_week
        plan = self.get_plan(user_id)

        workouts = self.rotation.filter_unused(user_id, week_number, plan.workouts)[:weekly]
        if len(workouts) < weekly:
            workouts += self._top_up_workouts(user_id, week_number, constraints.workout_filter, weekly, workouts)

        diets = self.rotation.filter_unused(user_id, week_number, plan.diets)
        if not diets:
            used = self.rotation.used_item_ids(user_id, week_number, ItemKind.DIET)
            diets = self.selector.select_diets(constraints.diet_filter, constraints.quota.monthly_meals, exclude_ids=used)

        days = distribute_week(workouts, diets)

        with self.transaction("plan_week"):
            schedule = self.assigner.save(user_id, week_number, week_start_date, days)
            self.rotation.record_used(user_id, week_number, [*workouts, *diets], week_start_date)

        return schedule

    def _top_up_workouts(
        self,
        user_id: str,
        week_number: int,
        workout_filter: Predicate,
        weekly: int,
        current: Sequence[WorkoutCandidate],
    ) -> list[WorkoutCandidate]:
        exclude = self.rotation.used_item_ids(user_id, week_number, ItemKind.WORKOUT) | {w.id for w in current}
        try:
            return self.selector.select_workouts(workout_filter, weekly - len(current), exclude_ids=exclude)
        except NoCandidatesAvailableError:
            if not current:
                raise
            logger.warning(
                "No fresh workouts left for week, keeping partial selection",
                user_id=user_id,
                week=week_number,
                selected=len(current),
                quota=weekly,
            )
            return []

    def save_schedule(
        self,
        user_id: str,
        week_number: int,
        week_start_date: date,
        days: Iterable[DayAssignment],
    ) -> WeekSchedule:
        """Persist a caller-built schedule, replacing the stored week.

        Raises:
            InvalidScheduleError: If a day is outside 1..7 or an id is not in the catalog
        """
        days = list(days)
        workout_ids = [i for d in days for i in d.workout_ids]
        diet_ids = [i for d in days for i in d.diet_ids]
        workouts = {w.id: w for w in self.candidates.get_workouts(workout_ids)}
        diets = {d.id: d for d in self.candidates.get_diets(diet_ids)}

        unknown = sorted({i for i in workout_ids if i not in workouts} | {i for i in diet_ids if i not in diets})
        if unknown:
            raise InvalidScheduleError(f"Unknown catalog ids in schedule: {unknown}")

        schedule_days = [
            ScheduleDay(
                day=d.day,
                workouts=tuple(workouts[i] for i in d.workout_ids),
                diets=tuple(diets[i] for i in d.diet_ids),
            )
            for d in days
        ]
        with self.transaction("save_schedule"):
            return self.assigner.save(user_id, week_number, week_start_date, schedule_days)

    def get_schedule(self, user_id: str, week_number: int | None = None) -> WeekSchedule:
        return self.assigner.get(user_id, week_number)

    def record_used_items(
        self,
        user_id: str,
        week_number: int,
        item_kind: ItemKind,
        item_ids: Iterable[int],
        date_assigned: date,
    ) -> int:
        """Record caller-reported used items; duplicates are ignored."""
        with self.transaction("record_used_items"):
            return self.rotation.record_used_ids(user_id, week_number, item_kind, item_ids, date_assigned)

    def used_items(self, user_id: str) -> list[UsedItemRecord]:
        return self.rotation.history(user_id)

    # -----------------------------
    # Streak
    # -----------------------------
    def get_streak(self, user_id: str) -> StreakState:
        return self.streaks.get(user_id)

    def record_activity(self, user_id: str, today: date | datetime | str) -> StreakState:
        with self.transaction("update_streak"):
            return self.streaks.record_activity(user_id, today)

    def reset_streak(self, user_id: str) -> StreakState:
        with self.transaction("reset_streak"):
            return self.streaks.reset(user_id)
