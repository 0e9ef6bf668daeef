# cpe_calculator/core/config.py
from datetime import time
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_ROUNDING_INCREMENTS = (1.0, 0.5, 0.2)


class Settings(BaseSettings):
    """
    Global calculator configuration.

    Values are loaded from environment variables (or a local `.env` file)
    at runtime. Every value can still be overridden per run by passing it
    explicitly to `run_cpe_calculation`.
    """

    SESSION_START: time | None = Field(
        default=None,
        description="Session start time of day (HH:MM). Clamping is skipped when unset.",
    )
    SESSION_END: time | None = Field(
        default=None,
        description="Session end time of day (HH:MM). Clamping is skipped when unset.",
    )

    ROUNDING_INCREMENT: float = Field(
        default=0.5,
        description="Credit granularity; one of 1.0, 0.5 or 0.2.",
    )

    # --- Email resolution ---
    MATCH_THRESHOLD: float = Field(
        default=0.65,
        ge=0.0,
        le=1.0,
        description="Minimum similarity score for a registrant to be a candidate.",
    )
    AMBIGUITY_GAP: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Score lead the best candidate needs over the runner-up to be unambiguous.",
    )
    MAX_MATCH_CANDIDATES: int = Field(
        default=3,
        ge=2,
        description="Number of candidates reported for an ambiguous match.",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("ROUNDING_INCREMENT")
    @classmethod
    def _check_rounding_increment(cls, value: float) -> float:
        if value not in SUPPORTED_ROUNDING_INCREMENTS:
            raise ValueError(
                f"ROUNDING_INCREMENT must be one of {SUPPORTED_ROUNDING_INCREMENTS}, got {value}"
            )
        return value


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for calculator settings.

    Settings are read and validated only once per process; tests call
    `get_settings.cache_clear()` after changing the environment.
    """
    return Settings()
