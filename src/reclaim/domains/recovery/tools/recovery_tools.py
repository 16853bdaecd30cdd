"""MCP tools exposing the recovery metrics engine.

Tools are stateless calculators: callers pass the profile fields they hold
(typically loaded from their own store) and get JSON back. ``now`` may be
passed explicitly; otherwise the server clock is read here, at the edge,
never inside the engine.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable

from fastmcp import Context, FastMCP

from reclaim.domains.recovery.domain_logic.activity_rules import (
    score_checkin as _score_checkin,
    score_workout as _score_workout,
    weekly_streak_bonus,
)
from reclaim.domains.recovery.domain_logic.dashboard import build_recovery_dashboard
from reclaim.domains.recovery.domain_logic.metrics_engine import (
    compute_dopamine_level,
    compute_gamification_points,
    compute_one_rep_max,
    compute_savings_metrics,
    compute_streak,
    project_savings,
)
from reclaim.domains.recovery.domain_logic.recovery_models import SubstanceProfile
from reclaim.domains.recovery.domain_logic.validation import ValidationError

if TYPE_CHECKING:
    from reclaim.core.config.settings import Settings

logger = logging.getLogger(__name__)


def _error(tool: str, exc: ValidationError) -> str:
    logger.info("%s rejected input: %s", tool, exc)
    return json.dumps(exc.as_dict())


def register_recovery_tools(
    mcp: FastMCP,
    settings: Settings,
    clock: Callable[[], datetime],
) -> None:
    """Register recovery metric tools on the MCP server."""

    def _now(now: str) -> datetime | str:
        return now or clock()

    @mcp.tool
    async def recovery_savings_metrics(
        ctx: Context,
        start_date: str,
        unit_price: float,
        substance_type: str,
        unit: str,
        prior_daily_consumption: float = 1,
        currency: str = "",
        conversion_factor: float = 1,
        now: str = "",
    ) -> str:
        """Money saved, quantity avoided and years of life recovered since a start date.

        Args:
            start_date: Abstinence start date (YYYY-MM-DD).
            unit_price: Price of one unit (e.g. one pack).
            substance_type: 'nicotine' or 'methamphetamine'.
            unit: Unit label (e.g. 'pack', 'gram').
            prior_daily_consumption: Units consumed per day before stopping.
            currency: 3-letter currency code. Defaults to the server default.
            conversion_factor: Multiplier from unit to medical reference dose.
            now: Current time (ISO 8601). Defaults to the server clock.
        """
        try:
            metrics = compute_savings_metrics(
                start_date,
                prior_daily_consumption,
                unit_price,
                currency or settings.default_currency,
                substance_type,
                unit,
                conversion_factor,
                now=_now(now),
            )
        except ValidationError as exc:
            return _error("recovery_savings_metrics", exc)
        return json.dumps(metrics.as_dict())

    @mcp.tool
    async def recovery_dopamine_level(ctx: Context, days_since_reference: int) -> str:
        """Dopamine level tier and progress toward the next tier.

        Args:
            days_since_reference: Days of abstinence.
        """
        try:
            level = compute_dopamine_level(days_since_reference)
        except ValidationError as exc:
            return _error("recovery_dopamine_level", exc)
        return json.dumps(level.as_dict())

    @mcp.tool
    async def one_rep_max(ctx: Context, weight: float, reps: int) -> str:
        """Estimate a one-rep max from a submaximal set (Epley formula).

        Args:
            weight: Weight lifted.
            reps: Repetitions completed.
        """
        try:
            result = compute_one_rep_max(weight, reps)
        except ValidationError as exc:
            return _error("one_rep_max", exc)
        return json.dumps(result.as_dict())

    @mcp.tool
    async def gamification_points(ctx: Context, activity_type: str, streak_days: int = 0) -> str:
        """Points earned for an activity, with the streak multiplier applied.

        Args:
            activity_type: 'healthy_check_in', 'workout' or 'weekly_streak'.
            streak_days: Current streak length in days.
        """
        try:
            points = compute_gamification_points(activity_type, streak_days)
        except ValidationError as exc:
            return _error("gamification_points", exc)
        return json.dumps(points.as_dict())

    @mcp.tool
    async def abstinence_streak(
        ctx: Context,
        start_date: str,
        last_relapse_date: str = "",
        now: str = "",
    ) -> str:
        """Current clean streak in days, reset by the most recent relapse.

        Args:
            start_date: Abstinence start date (YYYY-MM-DD).
            last_relapse_date: Date of the most recent relapse, if any.
            now: Current time (ISO 8601). Defaults to the server clock.
        """
        try:
            streak = compute_streak(start_date, last_relapse_date or None, now=_now(now))
        except ValidationError as exc:
            return _error("abstinence_streak", exc)
        return json.dumps({
            "streak_days": streak,
            "weekly_streak_points": weekly_streak_bonus(streak),
        })

    @mcp.tool
    async def savings_projection(
        ctx: Context,
        daily_savings: float,
        horizons: list[int] | None = None,
    ) -> str:
        """Projected money saved over future horizons.

        Args:
            daily_savings: Money saved per day.
            horizons: Day counts to project. Defaults to the configured horizons.
        """
        try:
            projections = project_savings(
                daily_savings,
                horizons if horizons is not None else settings.projection_horizons,
            )
        except ValidationError as exc:
            return _error("savings_projection", exc)
        return json.dumps({str(k): v for k, v in projections.items()})

    @mcp.tool
    async def recovery_dashboard(
        ctx: Context,
        profile: dict[str, Any],
        last_relapse_date: str = "",
        now: str = "",
    ) -> str:
        """Full recovery summary for a stored substance profile.

        Args:
            profile: Substance configuration record (substance_type, unit,
                unit_price, currency, abstinence_start_date and optionally
                prior_daily_consumption, conversion_factor).
            last_relapse_date: Date of the most recent relapse, if any.
            now: Current time (ISO 8601). Defaults to the server clock.
        """
        try:
            dashboard = build_recovery_dashboard(
                SubstanceProfile.from_record(profile),
                now=_now(now),
                last_relapse_date=last_relapse_date or None,
                horizons=settings.projection_horizons,
            )
        except ValidationError as exc:
            return _error("recovery_dashboard", exc)
        logger.info(
            "Dashboard built: %s, %d days, level %s",
            dashboard.substance_type,
            dashboard.savings.days_since_reference,
            dashboard.dopamine_level.level_name,
        )
        return json.dumps(dashboard.as_dict())

    @mcp.tool
    async def score_checkin(ctx: Context, mood: int, craving: int, streak_days: int = 0) -> str:
        """Score a mood/craving check-in. Healthy check-ins earn points.

        Args:
            mood: Mood on a 1-10 scale.
            craving: Craving intensity on a 1-10 scale.
            streak_days: Current streak length in days.
        """
        try:
            points = _score_checkin(mood, craving, streak_days)
        except ValidationError as exc:
            return _error("score_checkin", exc)
        return json.dumps({
            "healthy": points is not None,
            "points": points.as_dict() if points is not None else None,
        })

    @mcp.tool
    async def score_workout(
        ctx: Context,
        exercises: list[dict[str, Any]],
        streak_days: int = 0,
    ) -> str:
        """Score a workout and estimate a one-rep max per weighted exercise.

        Args:
            exercises: Exercises with name, sets, reps, rpe (1-10) and optional weight.
            streak_days: Current streak length in days.
        """
        try:
            score = _score_workout(exercises, streak_days)
        except ValidationError as exc:
            return _error("score_workout", exc)
        return json.dumps(score.as_dict())
