"""
Pydantic models for API request/response schemas.

These models define the contract between the sprint health service and the
dashboard UI, and the shape of what gets persisted to the local store.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from scrummer.core.numbers import safe_number


class RiskBand(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class CapacityHealth(str, Enum):
    HEALTHY = "Healthy"
    AT_RISK = "At Risk"
    CRITICAL = "Critical"


class SprintMode(str, Enum):
    STABLE = "stable"
    WATCH = "watch"
    RESCUE = "rescue"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class Ceremony(str, Enum):
    PLANNING = "planning"
    DAILY = "daily"
    REFINE = "refine"
    REVIEW = "review"
    RETRO = "retro"


class Tone(str, Enum):
    OK = "ok"
    WARN = "warn"
    DANGER = "danger"
    NEUTRAL = "neutral"


def _setup_field(name: str, camel: str) -> Any:
    return Field(0.0, validation_alias=AliasChoices(name, camel))


class SetupRecord(BaseModel):
    """
    Sprint setup captured from the launchpad form.

    Every field is coerced to a finite non-negative number; anything else
    becomes 0. Both snake_case and the browser's camelCase keys are accepted.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    sprint_days: float = _setup_field("sprint_days", "sprintDays")
    team_members: float = _setup_field("team_members", "teamMembers")
    leave_days: float = _setup_field("leave_days", "leaveDays")
    committed_sp: float = _setup_field("committed_sp", "committedSP")
    v1: float = 0.0
    v2: float = 0.0
    v3: float = 0.0

    @field_validator("*", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> float:
        return safe_number(value)


class SetupUpdate(BaseModel):
    """Partial setup used to merge a few fields into the stored record."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    sprint_days: Optional[Any] = Field(None, validation_alias=AliasChoices("sprint_days", "sprintDays"))
    team_members: Optional[Any] = Field(None, validation_alias=AliasChoices("team_members", "teamMembers"))
    leave_days: Optional[Any] = Field(None, validation_alias=AliasChoices("leave_days", "leaveDays"))
    committed_sp: Optional[Any] = Field(None, validation_alias=AliasChoices("committed_sp", "committedSP"))
    v1: Optional[Any] = None
    v2: Optional[Any] = None
    v3: Optional[Any] = None


class RiskComponents(BaseModel):
    """The three clamped penalty contributions that sum to the risk score."""

    model_config = ConfigDict(frozen=True)

    over: float
    cap: float
    vola: float


class SignalsRecord(BaseModel):
    """Everything derived from one setup record."""

    model_config = ConfigDict(frozen=True)

    # Coerced inputs
    sprint_days: float
    team_members: float
    leave_days: float
    committed_sp: float
    velocities: tuple[float, ...]

    # Velocity
    avg_velocity: float
    vol: float

    # Capacity
    ideal_person_days: float
    available_person_days: float
    availability_ratio: float
    focus_factor: float
    capacity_sp: float

    # Ratios
    overcommit_ratio: float
    capacity_shortfall_ratio: float

    # Scores and labels
    risk_score: int
    confidence: int
    risk_band: RiskBand
    capacity_health: Optional[CapacityHealth] = None
    components: RiskComponents


class Snapshot(BaseModel):
    """One persisted, timestamped record of computed signals."""

    model_config = ConfigDict(frozen=True)

    sprint_id: str
    timestamp: int = Field(description="Epoch milliseconds")
    risk_score: float
    confidence: float
    overcommit_ratio: float
    avg_velocity: float
    committed_sp: float
    capacity_sp: float
    mode: SprintMode


class SaveResult(BaseModel):
    """Outcome of a snapshot save; a duplicate is a normal negative result."""

    ok: bool
    reason: Optional[str] = None
    snapshot: Optional[Snapshot] = None


class SprintIdResponse(BaseModel):
    sprint_id: str


class TrendResponse(BaseModel):
    metric: str
    trend: Trend


class HistoryResponse(BaseModel):
    sprint_id: str
    snapshots: list[Snapshot]


class CeremonyBrief(BaseModel):
    """Talking points for a Scrum ceremony."""

    ceremony: Ceremony
    title: str
    why: str
    checklist: list[str]


class RecommendationResponse(BaseModel):
    recommended: Ceremony
    scope_ratio: float
    capacity_ratio: float
    confidence: int
    risk_score: int
    brief: CeremonyBrief


class Suggestion(BaseModel):
    title: str
    message: str
    tone: Tone


class RiskDriver(BaseModel):
    title: str
    description: str
    score: float
    max_score: float
    impact_pct: float


class Predictability(BaseModel):
    score: Optional[str] = None
    hint: str


class StabilityIndex(BaseModel):
    index: int
    label: str


class HealthSummary(BaseModel):
    """History-level health derived from the snapshot log."""

    snapshot_count: int
    latest: Optional[Snapshot] = None
    stability: Optional[StabilityIndex] = None
    overcommit_streak: int
    predictability: Predictability
    narrative: list[str]


class TeamForecastRequest(BaseModel):
    sprint_days: float = 0.0
    team_members: float = 0.0
    leave_days: float = 0.0
    interrupt_pct: float = 0.0
    velocities: list[float] = Field(default_factory=list)

    @field_validator("sprint_days", "team_members", "leave_days", "interrupt_pct", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> float:
        return safe_number(value)


class TeamForecast(BaseModel):
    raw_capacity: float
    effective_days: float
    forecast_sp: float


class RoleInput(BaseModel):
    name: str = "Role"
    members: float = 0.0
    unavailable: float = 0.0


class RoleForecastRequest(BaseModel):
    total_days: float = 0.0
    sp_per_day: float = 0.0
    unavailable_weight: float = 0.0
    roles: list[RoleInput] = Field(default_factory=list)


class RoleCapacity(BaseModel):
    name: str
    members: float
    unavailable: float
    adjusted_days: float
    capacity_days: float
    capacity_sp: float


class RoleForecast(BaseModel):
    total_members: float
    total_capacity_days: float
    total_sp: float
    roles: list[RoleCapacity]


class XpMetrics(BaseModel):
    """Signals remembered from the last award, for the improvement bonus."""

    risk_score: float
    confidence: float
    overcommit_ratio: float
    vol: float


class XpState(BaseModel):
    """
    Persisted progress of the daily check-in game.

    Damaged values load as their defaults rather than failing.
    """

    model_config = ConfigDict(extra="ignore")

    total_xp: int = 0
    streak: int = 0
    best_streak: int = 0
    last_award_day: str = ""
    last_metrics: Optional[XpMetrics] = None

    @field_validator("total_xp", "streak", "best_streak", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        return int(safe_number(value))

    @field_validator("last_award_day", mode="before")
    @classmethod
    def _coerce_day(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("last_metrics", mode="before")
    @classmethod
    def _coerce_metrics(cls, value: Any) -> Any:
        if isinstance(value, XpMetrics):
            return value
        if not isinstance(value, dict):
            return None
        try:
            return XpMetrics.model_validate(value)
        except ValueError:
            return None


class LevelInfo(BaseModel):
    level: int
    in_level: int
    next: int
    title: str


class XpStatus(BaseModel):
    state: XpState
    level: LevelInfo


class XpAward(BaseModel):
    """Result of a daily award. gained is 0 with no reasons if today was already awarded."""

    gained: int
    reasons: list[str]
    state: XpState
    level: LevelInfo


class CeremonyNotes(BaseModel):
    """Notes captured for one ceremony, keyed by form field."""

    ceremony: Ceremony
    fields: list[str]
    notes: dict[str, str]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"


class ConfigResponse(BaseModel):
    """Application configuration exposed to frontend."""

    history_limit: int
    dedup_window_seconds: int
    version: str
