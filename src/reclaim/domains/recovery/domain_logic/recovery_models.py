"""Recovery metric models and domain constants."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class SubstanceType(str, Enum):
    """Substances a recovery profile can track."""

    NICOTINE = "nicotine"
    METHAMPHETAMINE = "methamphetamine"


class ActivityType(str, Enum):
    """Activities that earn gamification points."""

    HEALTHY_CHECK_IN = "healthy_check_in"
    WORKOUT = "workout"
    WEEKLY_STREAK = "weekly_streak"

    @classmethod
    def parse(cls, value: ActivityType | str) -> ActivityType:
        """Resolve a member from itself, its value, or its spelled name.

        ``"Workout"``, ``"HealthyCheckIn"`` and ``"weekly-streak"`` all resolve.

        Raises:
            ValueError: If nothing matches.
        """
        if isinstance(value, cls):
            return value
        key = _squash(str(value))
        for member in cls:
            if key in (_squash(member.value), _squash(member.name)):
                return member
        raise ValueError(f"Unknown activity type: {value!r}")


def _squash(text: str) -> str:
    return re.sub(r"[^a-z0-9]", "", text.lower())


# ---------------------------------------------------------------------------
# Per-substance recovery constants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SubstanceConstants:
    """Clinical reference values used for the time-recovered estimate."""

    unit_base_medical_dose: float   # reference daily dose (1 pack / 1 gram)
    years_lost_per_unit: float      # life-years lost per reference dose


# Nicotine: ~12-13 years lost for a pack-a-day smoker.
# Methamphetamine: ~35 years lost in chronic use.
SUBSTANCE_CONSTANTS: Mapping[SubstanceType, SubstanceConstants] = MappingProxyType({
    SubstanceType.NICOTINE: SubstanceConstants(unit_base_medical_dose=1, years_lost_per_unit=0.5),
    SubstanceType.METHAMPHETAMINE: SubstanceConstants(unit_base_medical_dose=1, years_lost_per_unit=2),
})


# ---------------------------------------------------------------------------
# Dopamine level ladder
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DopamineTier:
    name: str
    min_days: int
    max_days: float  # math.inf for the last tier

    @property
    def bounded(self) -> bool:
        return not math.isinf(self.max_days)

    def contains(self, days: int) -> bool:
        return self.min_days <= days <= self.max_days


DOPAMINE_TIERS: tuple[DopamineTier, ...] = (
    DopamineTier("Initial Recovery", 0, 7),
    DopamineTier("Stable Momentum", 8, 30),
    DopamineTier("Consolidated Strength", 31, 90),
    DopamineTier("Neurological Mastery", 91, 365),
    DopamineTier("Legendary Dopamine", 366, math.inf),
)


# ---------------------------------------------------------------------------
# Gamification
# ---------------------------------------------------------------------------

BASE_POINTS: Mapping[ActivityType, int] = MappingProxyType({
    ActivityType.HEALTHY_CHECK_IN: 10,
    ActivityType.WORKOUT: 20,
    ActivityType.WEEKLY_STREAK: 50,
})

STREAK_MULTIPLIER = 1.5
STREAK_MULTIPLIER_THRESHOLD_DAYS = 7  # strictly greater than this earns the multiplier

# Check-in is "healthy" when mood is above and craving below these marks (1-10 scales)
HEALTHY_MOOD_ABOVE = 7
HEALTHY_CRAVING_BELOW = 4

DEFAULT_PROJECTION_HORIZONS: tuple[int, ...] = (7, 30, 90, 365)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SubstanceProfile:
    """A user's substance-tracking configuration."""

    substance_type: SubstanceType
    unit: str
    unit_price: float
    currency: str
    abstinence_start_date: date
    prior_daily_consumption: float = 1.0
    conversion_factor: float = 1.0

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> SubstanceProfile:
        """Build a profile from a stored configuration record.

        Accepts snake_case or camelCase keys. The unit price may be stored as
        a decimal string.

        Raises:
            ValidationError: If any field violates the input contract.
        """
        from reclaim.domains.recovery.domain_logic.validation import profile_from_record

        return profile_from_record(record)

    def as_dict(self) -> dict[str, Any]:
        return {
            "substance_type": self.substance_type.value,
            "unit": self.unit,
            "unit_price": self.unit_price,
            "currency": self.currency,
            "abstinence_start_date": self.abstinence_start_date.isoformat(),
            "prior_daily_consumption": self.prior_daily_consumption,
            "conversion_factor": self.conversion_factor,
        }


@dataclass(frozen=True)
class SavingsMetrics:
    days_since_reference: int
    money_saved: float
    quantity_avoided: float
    time_recovered: float    # years
    currency: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "days_since_reference": self.days_since_reference,
            "money_saved": self.money_saved,
            "quantity_avoided": self.quantity_avoided,
            "time_recovered": self.time_recovered,
            "currency": self.currency,
        }


@dataclass(frozen=True)
class DopamineLevel:
    level_name: str
    min_days: int
    max_days: int
    progress_percent: int    # 0-100 toward the next tier

    def as_dict(self) -> dict[str, Any]:
        return {
            "level_name": self.level_name,
            "min_days": self.min_days,
            "max_days": self.max_days,
            "progress_percent": self.progress_percent,
        }


@dataclass(frozen=True)
class OneRepMaxResult:
    weight: float
    reps: int
    estimated_one_rep_max: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "weight": self.weight,
            "reps": self.reps,
            "estimated_one_rep_max": self.estimated_one_rep_max,
        }


@dataclass(frozen=True)
class GamificationPoints:
    activity_type: ActivityType
    daily_points: int
    streak_multiplier: float
    total_points: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "activity_type": self.activity_type.value,
            "daily_points": self.daily_points,
            "streak_multiplier": self.streak_multiplier,
            "total_points": self.total_points,
        }
