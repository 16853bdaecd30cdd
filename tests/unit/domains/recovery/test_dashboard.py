"""Tests for the composed recovery dashboard."""

from __future__ import annotations

import json

from reclaim.domains.recovery.domain_logic.dashboard import build_recovery_dashboard


class TestRecoveryDashboard:
    def test_fresh_profile(self, nicotine_profile, fixed_now):
        dashboard = build_recovery_dashboard(nicotine_profile, now=fixed_now)
        assert dashboard.savings.days_since_reference == 10
        assert dashboard.savings.money_saved == 100.0
        assert dashboard.projections == {7: 70.0, 30: 300.0, 90: 900.0, 365: 3650.0}
        assert dashboard.dopamine_level.level_name == "Stable Momentum"
        assert dashboard.next_level == "Consolidated Strength"
        assert dashboard.streak_days == 10

    def test_relapse_resets_streak_but_not_level(self, nicotine_profile, fixed_now):
        dashboard = build_recovery_dashboard(
            nicotine_profile, now=fixed_now, last_relapse_date="2024-01-09",
        )
        assert dashboard.streak_days == 2
        assert dashboard.dopamine_level.level_name == "Stable Momentum"

    def test_top_tier(self, meth_profile, fixed_now):
        dashboard = build_recovery_dashboard(meth_profile, now=fixed_now)
        assert dashboard.savings.days_since_reference == 375
        assert dashboard.savings.money_saved == 7500.0
        assert dashboard.savings.time_recovered == 375.0
        assert dashboard.dopamine_level.level_name == "Legendary Dopamine"
        assert dashboard.next_level is None

    def test_custom_horizons(self, nicotine_profile, fixed_now):
        dashboard = build_recovery_dashboard(nicotine_profile, now=fixed_now, horizons=[1, 14])
        assert list(dashboard.projections) == [1, 14]

    def test_as_dict_is_json_serializable(self, nicotine_profile, fixed_now):
        payload = build_recovery_dashboard(nicotine_profile, now=fixed_now).as_dict()
        decoded = json.loads(json.dumps(payload))
        assert decoded["substance_type"] == "nicotine"
        assert decoded["projections"]["30"] == 300.0
        assert decoded["savings"]["currency"] == "USD"
