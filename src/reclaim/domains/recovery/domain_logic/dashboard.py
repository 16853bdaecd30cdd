"""Home-screen summary assembled from a profile and an optional relapse date."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable

from reclaim.domains.recovery.domain_logic.metrics_engine import (
    Now,
    compute_dopamine_level,
    compute_streak,
    daily_savings,
    next_dopamine_level,
    project_savings,
    savings_for_profile,
)
from reclaim.domains.recovery.domain_logic.recovery_models import (
    DEFAULT_PROJECTION_HORIZONS,
    DopamineLevel,
    SavingsMetrics,
    SubstanceProfile,
)


@dataclass(frozen=True)
class RecoveryDashboard:
    substance_type: str
    unit: str
    savings: SavingsMetrics
    projections: dict[int, float]
    dopamine_level: DopamineLevel
    next_level: str | None
    streak_days: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "substance_type": self.substance_type,
            "unit": self.unit,
            "savings": self.savings.as_dict(),
            "projections": {str(k): v for k, v in self.projections.items()},
            "dopamine_level": self.dopamine_level.as_dict(),
            "next_level": self.next_level,
            "streak_days": self.streak_days,
        }


def build_recovery_dashboard(
    profile: SubstanceProfile,
    *,
    now: Now,
    last_relapse_date: date | str | None = None,
    horizons: Iterable[int] = DEFAULT_PROJECTION_HORIZONS,
) -> RecoveryDashboard:
    """Compose savings, projections, dopamine level and streak for one profile.

    The dopamine level follows days since the abstinence start date; a relapse
    only resets the streak.
    """
    savings = savings_for_profile(profile, now=now)
    return RecoveryDashboard(
        substance_type=profile.substance_type.value,
        unit=profile.unit,
        savings=savings,
        projections=project_savings(daily_savings(profile), horizons),
        dopamine_level=compute_dopamine_level(savings.days_since_reference),
        next_level=next_dopamine_level(savings.days_since_reference),
        streak_days=compute_streak(
            profile.abstinence_start_date, last_relapse_date, now=now
        ),
    )
