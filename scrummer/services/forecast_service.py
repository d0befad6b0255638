"""Capacity forecasts for an existing team or a role-based model."""

from scrummer.core.numbers import clamp, mean
from scrummer.models.schemas import RoleCapacity, RoleForecast, RoleInput, TeamForecast


def forecast_team_capacity(
    sprint_days: float,
    team_members: float,
    leave_days: float,
    interrupt_pct: float,
    velocities: list[float],
) -> TeamForecast:
    """
    Forecast story points for the next sprint from recent velocity.

    Velocity per person-day is scaled by the person-days left after leave
    and the expected interrupt share.
    """
    raw = sprint_days * team_members
    effective = (raw - leave_days) * (1 - interrupt_pct / 100)
    avg_velocity = mean([v for v in velocities if v > 0])
    velocity_per_day = avg_velocity / raw if raw else 0.0
    return TeamForecast(
        raw_capacity=raw,
        effective_days=effective,
        forecast_sp=effective * velocity_per_day,
    )


def forecast_role_capacity(
    total_days: float,
    sp_per_day: float,
    unavailable_weight: float,
    roles: list[RoleInput],
) -> RoleForecast:
    weight = clamp(unavailable_weight, 0, 1)

    breakdown = []
    for role in roles:
        adjusted = total_days - role.unavailable * weight
        capacity_days = adjusted * role.members
        breakdown.append(
            RoleCapacity(
                name=role.name or "Role",
                members=role.members,
                unavailable=role.unavailable,
                adjusted_days=adjusted,
                capacity_days=capacity_days,
                capacity_sp=capacity_days * sp_per_day,
            )
        )

    return RoleForecast(
        total_members=sum(r.members for r in breakdown),
        total_capacity_days=sum(r.capacity_days for r in breakdown),
        total_sp=sum(r.capacity_sp for r in breakdown),
        roles=breakdown,
    )
