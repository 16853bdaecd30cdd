"""Deterministic recovery metrics: savings, dopamine level, 1RM, points, streaks.

Every function is pure. The current time is always passed in as ``now``;
nothing here reads the clock, so identical inputs give identical outputs.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable

from reclaim.domains.recovery.domain_logic.recovery_models import (
    BASE_POINTS,
    DOPAMINE_TIERS,
    STREAK_MULTIPLIER,
    STREAK_MULTIPLIER_THRESHOLD_DAYS,
    SUBSTANCE_CONSTANTS,
    ActivityType,
    DopamineLevel,
    GamificationPoints,
    OneRepMaxResult,
    SavingsMetrics,
    SubstanceProfile,
    SubstanceType,
)
from reclaim.domains.recovery.domain_logic.validation import (
    ValidationError,
    coerce_now,
    elapsed_days,
    finite_number,
    non_negative_number,
    parse_calendar_date,
    parse_substance_type,
    positive_number,
    round_half_away,
    whole_number,
)

logger = logging.getLogger(__name__)

Now = datetime | date | str


# ---------------------------------------------------------------------------
# Savings
# ---------------------------------------------------------------------------

def compute_savings_metrics(
    start_date: date | str,
    prior_daily_consumption: float,
    unit_price: float,
    currency: str,
    substance_type: SubstanceType | str,
    unit: str,
    conversion_factor: float = 1,
    *,
    now: Now,
) -> SavingsMetrics:
    """Compute money saved, quantity avoided and life-time recovered.

    Formulas:
        money_saved      = days * prior_daily_consumption * unit_price
        quantity_avoided = days * prior_daily_consumption * conversion_factor
        time_recovered   = quantity_avoided / unit_base_medical_dose * years_lost_per_unit

    ``days`` is negative for a start date after ``now``; the results are then
    negative too and it is up to the caller how to surface that.

    Raises:
        ValidationError: For a malformed date, non-finite or negative amounts,
            a non-positive conversion factor or an unknown substance.
    """
    start = parse_calendar_date(start_date, "start_date")
    consumption = non_negative_number(prior_daily_consumption, "prior_daily_consumption")
    price = non_negative_number(unit_price, "unit_price")
    factor = positive_number(conversion_factor, "conversion_factor")
    substance = parse_substance_type(substance_type)
    current = coerce_now(now)

    days = elapsed_days(start, current)
    constants = SUBSTANCE_CONSTANTS[substance]

    money_saved = days * consumption * price
    quantity_avoided = days * consumption * factor
    time_recovered = (quantity_avoided / constants.unit_base_medical_dose) * constants.years_lost_per_unit

    logger.debug(
        "Savings for %s since %s: %d days, %s %s avoided",
        substance.value, start, days, quantity_avoided, unit,
    )
    return SavingsMetrics(
        days_since_reference=days,
        money_saved=round_half_away(money_saved),
        quantity_avoided=round_half_away(quantity_avoided),
        time_recovered=round_half_away(time_recovered),
        currency=currency,
    )


def savings_for_profile(profile: SubstanceProfile, *, now: Now) -> SavingsMetrics:
    """Run ``compute_savings_metrics`` from a stored profile."""
    return compute_savings_metrics(
        profile.abstinence_start_date,
        profile.prior_daily_consumption,
        profile.unit_price,
        profile.currency,
        profile.substance_type,
        profile.unit,
        profile.conversion_factor,
        now=now,
    )


def daily_savings(profile: SubstanceProfile) -> float:
    """Money no longer spent per day of abstinence."""
    return profile.prior_daily_consumption * profile.unit_price


def project_savings(daily_amount: float, horizons: Iterable[int]) -> dict[int, float]:
    """Projected money saved at each horizon (in days).

    Keys follow the order of ``horizons``; a repeated horizon keeps its first
    position and the last computed value.
    """
    amount = finite_number(daily_amount, "daily_savings")
    projections: dict[int, float] = {}
    for horizon in horizons:
        days = whole_number(horizon, "horizons")
        projections[days] = round_half_away(amount * days)
    return projections


# ---------------------------------------------------------------------------
# Dopamine level
# ---------------------------------------------------------------------------

def compute_dopamine_level(days_since_reference: int) -> DopamineLevel:
    """Classify abstinence days into the dopamine ladder.

    Days outside every tier (negative values) fall back to the first tier.
    Progress is the position within the tier as a 0-100 percentage; the
    open-ended last tier always reports 100 and echoes ``days`` as its max.
    """
    days = whole_number(days_since_reference, "days_since_reference")
    tier = next((t for t in DOPAMINE_TIERS if t.contains(days)), DOPAMINE_TIERS[0])

    if tier.bounded:
        span = tier.max_days - tier.min_days
        progress = int(round_half_away((days - tier.min_days) / span * 100, 0))
        progress = max(0, min(progress, 100))
        max_days = int(tier.max_days)
    else:
        progress = 100
        max_days = days

    return DopamineLevel(
        level_name=tier.name,
        min_days=tier.min_days,
        max_days=max_days,
        progress_percent=progress,
    )


def next_dopamine_level(days_since_reference: int) -> str | None:
    """Name of the tier after the current one, or None at the top."""
    current = compute_dopamine_level(days_since_reference).level_name
    names = [t.name for t in DOPAMINE_TIERS]
    index = names.index(current)
    return names[index + 1] if index + 1 < len(names) else None


# ---------------------------------------------------------------------------
# Strength
# ---------------------------------------------------------------------------

def compute_one_rep_max(weight: float, reps: int) -> OneRepMaxResult:
    """Estimate a one-rep max with the Epley formula: weight * (1 + reps / 30)."""
    load = finite_number(weight, "weight")
    count = whole_number(reps, "reps")
    return OneRepMaxResult(
        weight=load,
        reps=count,
        estimated_one_rep_max=round_half_away(load * (1 + count / 30)),
    )


# ---------------------------------------------------------------------------
# Gamification and streaks
# ---------------------------------------------------------------------------

def compute_gamification_points(
    activity_type: ActivityType | str,
    streak_days: int = 0,
) -> GamificationPoints:
    """Points for one activity, x1.5 once the streak is longer than 7 days."""
    try:
        activity = ActivityType.parse(activity_type)
    except ValueError as exc:
        raise ValidationError("activity_type", str(exc)) from None
    streak = finite_number(streak_days, "streak_days")

    base = BASE_POINTS[activity]
    multiplier = STREAK_MULTIPLIER if streak > STREAK_MULTIPLIER_THRESHOLD_DAYS else 1.0
    return GamificationPoints(
        activity_type=activity,
        daily_points=base,
        streak_multiplier=multiplier,
        total_points=int(round_half_away(base * multiplier, 0)),
    )


def compute_streak(
    start_date: date | str,
    last_relapse_date: date | str | None = None,
    *,
    now: Now,
) -> int:
    """Days clean since the last relapse, or since the start date without one.

    Never negative.
    """
    if last_relapse_date:
        reference = parse_calendar_date(last_relapse_date, "last_relapse_date")
    else:
        reference = parse_calendar_date(start_date, "start_date")
    return max(0, elapsed_days(reference, coerce_now(now)))
