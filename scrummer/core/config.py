"""
Application configuration using pydantic-settings.

Settings are loaded from environment variables with sensible defaults.
Scoring weights are fixed constants, not settings.
"""

from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict

VERSION = "1.0.0"


@dataclass(frozen=True)
class SignalWeights:
    """Multipliers, caps and thresholds used by the signal engine."""

    # Overcommit penalty: (committed / avg velocity - 1) * scale, capped
    over_scale: float = 60.0
    over_cap: float = 50.0

    # Capacity shortfall penalty: (committed / capacity - 1) * scale, capped
    cap_scale: float = 50.0
    cap_cap: float = 35.0

    # Volatility penalty: CV * scale, capped
    vola_scale: float = 30.0
    vola_cap: float = 15.0

    # Confidence loses CV * scale points
    confidence_vol_scale: float = 50.0

    # Risk bands
    low_band_max: float = 30.0
    moderate_band_max: float = 60.0

    # Capacity health (capacity / committed)
    healthy_ratio: float = 1.0
    at_risk_ratio: float = 0.85


DEFAULT_WEIGHTS = SignalWeights()


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="SCRUMMER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # SQLite store configuration
    db_path: str = ".data/scrummer.db"
    db_timeout: int = 30  # Connection timeout in seconds

    # History log
    history_limit: int = 30
    dedup_window_seconds: int = 60

    # CORS configuration
    cors_origins: list[str] = ["http://localhost:3000"]

    # Server configuration
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"


# Global settings instance
settings = Settings()
