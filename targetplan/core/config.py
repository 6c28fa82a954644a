"""Application configuration."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from targetplan.domain.types import DEFAULT_MONTHLY_WEIGHTS, DEFAULT_THRESHOLD_RULE, RoundingMode


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "Target Pacing API"
    app_env: str = "development"
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    weight_sum_tolerance: float = Field(default=1e-6, gt=0)
    default_rounding: RoundingMode = RoundingMode.NONE
    # Operator-editable monthly profile; validated by the pacing service before use.
    default_monthly_weights: Annotated[list[float], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_MONTHLY_WEIGHTS)
    )
    achievement_good_min: float = DEFAULT_THRESHOLD_RULE.achievement.good_min
    achievement_warning_min: float = DEFAULT_THRESHOLD_RULE.achievement.warning_min
    growth_good_min: float = DEFAULT_THRESHOLD_RULE.growth.good_min
    growth_warning_min: float = DEFAULT_THRESHOLD_RULE.growth.warning_min

    # Keep .env support for comma-separated values (non-JSON).
    allowed_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("default_monthly_weights", mode="before")
    @classmethod
    def parse_weights(cls, value: str | list[float]) -> list[float]:
        if isinstance(value, str):
            cleaned = value.strip().strip("[]")
            return [float(part) for part in cleaned.split(",") if part.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""

    return Settings()
