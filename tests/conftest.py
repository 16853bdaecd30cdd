"""Shared test fixtures for Reclaim tests."""

from __future__ import annotations

import sys
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

_SETTINGS_ENV = (
    "RECLAIM_HOST",
    "RECLAIM_PORT",
    "RECLAIM_LOG_LEVEL",
    "RECLAIM_ALLOW_INSECURE_BIND",
    "DEFAULT_CURRENCY",
    "PROJECTION_HORIZONS",
)


@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of Settings()
    monkeypatch.chdir(tmp_path)

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from reclaim.domains.recovery.domain_logic.recovery_models import (  # noqa: E402
    SubstanceProfile,
    SubstanceType,
)

FIXED_NOW = datetime(2024, 1, 11, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    """2024-01-11 09:30 UTC."""
    return FIXED_NOW


@pytest.fixture
def nicotine_profile() -> SubstanceProfile:
    """Pack-a-day smoker at 10 USD a pack, quit 2024-01-01."""
    return SubstanceProfile(
        substance_type=SubstanceType.NICOTINE,
        unit="pack",
        unit_price=10.0,
        currency="USD",
        abstinence_start_date=date(2024, 1, 1),
        prior_daily_consumption=1.0,
    )


@pytest.fixture
def meth_profile() -> SubstanceProfile:
    """Half a gram a day at 40 EUR a gram, quit 2023-01-01."""
    return SubstanceProfile(
        substance_type=SubstanceType.METHAMPHETAMINE,
        unit="gram",
        unit_price=40.0,
        currency="EUR",
        abstinence_start_date=date(2023, 1, 1),
        prior_daily_consumption=0.5,
    )
