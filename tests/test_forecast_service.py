"""Tests for capacity forecasts."""

import pytest

from scrummer.models.schemas import RoleInput
from scrummer.services.forecast_service import forecast_role_capacity, forecast_team_capacity


class TestTeamForecast:
    def test_scales_velocity_by_available_days(self):
        result = forecast_team_capacity(10, 5, 5, 10, [40, 45, 50])
        assert result.raw_capacity == 50
        assert result.effective_days == pytest.approx(40.5)
        assert result.forecast_sp == pytest.approx(36.45)

    def test_ignores_missing_velocities(self):
        result = forecast_team_capacity(10, 2, 0, 0, [0, 30, 0])
        assert result.forecast_sp == pytest.approx(30)

    def test_zero_capacity(self):
        result = forecast_team_capacity(0, 5, 0, 0, [40])
        assert result.raw_capacity == 0
        assert result.forecast_sp == 0


class TestRoleForecast:
    def test_per_role_breakdown(self):
        roles = [RoleInput(name="Dev", members=3, unavailable=2), RoleInput(name="QA", members=1)]
        result = forecast_role_capacity(10, 1, 0.5, roles)

        dev, qa = result.roles
        assert dev.adjusted_days == 9
        assert dev.capacity_days == 27
        assert qa.capacity_sp == 10
        assert result.total_members == 4
        assert result.total_capacity_days == 37
        assert result.total_sp == 37

    def test_weight_clamped(self):
        result = forecast_role_capacity(10, 2, 5, [RoleInput(name="Dev", members=1, unavailable=4)])
        assert result.roles[0].adjusted_days == 6
        assert result.total_sp == 12

    def test_no_roles(self):
        result = forecast_role_capacity(10, 1, 1, [])
        assert result.total_sp == 0
        assert result.roles == []
