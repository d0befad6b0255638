"""
Capacity forecast endpoints.

Team mode scales recent velocity by available person-days; role mode sums
per-role capacity from a fixed story-points-per-day rate.
"""

from fastapi import APIRouter

from scrummer.models.schemas import RoleForecast, RoleForecastRequest, TeamForecast, TeamForecastRequest
from scrummer.services import forecast_service

router = APIRouter(prefix="/forecast", tags=["forecast"])


@router.post("/team", response_model=TeamForecast)
async def forecast_team(request: TeamForecastRequest) -> TeamForecast:
    return forecast_service.forecast_team_capacity(
        sprint_days=request.sprint_days,
        team_members=request.team_members,
        leave_days=request.leave_days,
        interrupt_pct=request.interrupt_pct,
        velocities=request.velocities,
    )


@router.post("/roles", response_model=RoleForecast)
async def forecast_roles(request: RoleForecastRequest) -> RoleForecast:
    return forecast_service.forecast_role_capacity(
        total_days=request.total_days,
        sp_per_day=request.sp_per_day,
        unavailable_weight=request.unavailable_weight,
        roles=request.roles,
    )
