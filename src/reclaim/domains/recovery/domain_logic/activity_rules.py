"""Scoring rules for logged activities: check-ins, workouts, weekly streaks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from reclaim.domains.recovery.domain_logic.metrics_engine import (
    compute_gamification_points,
    compute_one_rep_max,
)
from reclaim.domains.recovery.domain_logic.recovery_models import (
    HEALTHY_CRAVING_BELOW,
    HEALTHY_MOOD_ABOVE,
    ActivityType,
    GamificationPoints,
)
from reclaim.domains.recovery.domain_logic.validation import (
    ValidationError,
    bounded_int,
    finite_number,
    whole_number,
)


@dataclass(frozen=True)
class Exercise:
    """One exercise inside a workout log."""

    name: str
    sets: int
    reps: int
    rpe: int                      # rate of perceived exertion, 1-10
    weight: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Exercise:
        name = str(data.get("name", "")).strip()
        if not name:
            raise ValidationError("name", "is required")
        weight = data.get("weight")
        return cls(
            name=name,
            sets=whole_number(data.get("sets", 1), "sets"),
            reps=whole_number(data.get("reps", 0), "reps"),
            rpe=bounded_int(data.get("rpe", 5), "rpe", 1, 10),
            weight=None if weight is None else finite_number(weight, "weight"),
        )


@dataclass(frozen=True)
class WorkoutScore:
    points: GamificationPoints
    estimated_one_rep_max: dict[str, float] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "points": self.points.as_dict(),
            "estimated_one_rep_max": dict(self.estimated_one_rep_max),
        }


def is_healthy_checkin(mood: int, craving: int) -> bool:
    """A check-in is healthy with mood above 7 and craving below 4 (1-10 scales)."""
    mood = bounded_int(mood, "mood", 1, 10)
    craving = bounded_int(craving, "craving", 1, 10)
    return mood > HEALTHY_MOOD_ABOVE and craving < HEALTHY_CRAVING_BELOW


def score_checkin(mood: int, craving: int, streak_days: int = 0) -> GamificationPoints | None:
    """Points for a mood/craving check-in, or None when it is not healthy."""
    if not is_healthy_checkin(mood, craving):
        return None
    return compute_gamification_points(ActivityType.HEALTHY_CHECK_IN, streak_days)


def score_workout(
    exercises: Iterable[Exercise | Mapping[str, Any]],
    streak_days: int = 0,
) -> WorkoutScore:
    """Workout points plus an Epley 1RM estimate for each weighted exercise.

    When an exercise appears twice, the heavier estimate is kept.
    """
    estimates: dict[str, float] = {}
    for item in exercises:
        exercise = item if isinstance(item, Exercise) else Exercise.from_dict(item)
        if exercise.weight is None:
            continue
        one_rm = compute_one_rep_max(exercise.weight, exercise.reps).estimated_one_rep_max
        estimates[exercise.name] = max(one_rm, estimates.get(exercise.name, one_rm))

    return WorkoutScore(
        points=compute_gamification_points(ActivityType.WORKOUT, streak_days),
        estimated_one_rep_max=estimates,
    )


def weekly_streak_bonus(streak_days: int) -> int:
    """Total weekly-streak points earned: one award per completed 7-day block.

    Each award is priced at the streak length when it was earned, so the
    first week pays 50 and later weeks pay the multiplied 75.
    """
    days = max(0, whole_number(streak_days, "streak_days"))
    return sum(
        compute_gamification_points(ActivityType.WEEKLY_STREAK, 7 * week).total_points
        for week in range(1, days // 7 + 1)
    )
