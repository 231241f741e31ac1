"""
SoulSort — Application Configuration

Loads configuration from environment variables (and an optional .env file)
using Pydantic Settings.  A cached ``get_settings()`` helper is provided so that
FastAPI dependency-injection and the scoring services always receive the same
validated instance without re-parsing the environment on every request.

Every field carries a default: the scoring engine must run in-process with no
environment at all.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the SoulSort scoring engine and its API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------ #
    # Versioning (stamped onto every trace)
    # ------------------------------------------------------------------ #
    SCORING_VERSION: str = "v3"
    SCHEMA_VERSION: int = 3

    # ------------------------------------------------------------------ #
    # Scoring tunables
    # ------------------------------------------------------------------ #
    RMS_PENALTY_FACTOR: float = 1.3   # base = 100 - rms * factor
    DELTA_LIMIT: float = 0.2          # |delta| ceiling for LLM adjustments
    LOW_EVIDENCE_MIN_WORDS: int = 8   # any answer below this → low evidence

    # ------------------------------------------------------------------ #
    # Runtime environment
    # ------------------------------------------------------------------ #
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ------------------------------------------------------------------ #
    # CORS
    # ------------------------------------------------------------------ #
    ALLOWED_ORIGINS: str = "*"

    # ------------------------------------------------------------------ #
    # Derived helpers
    # ------------------------------------------------------------------ #
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list split on commas."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @field_validator("RMS_PENALTY_FACTOR")
    @classmethod
    def _factor_must_be_positive(cls, v: float) -> float:
        if v <= 0.0:
            raise ValueError(f"RMS_PENALTY_FACTOR must be positive, got {v}")
        return v

    @field_validator("DELTA_LIMIT")
    @classmethod
    def _delta_limit_in_unit_range(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError(f"DELTA_LIMIT must be in (0, 1], got {v}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, validated ``Settings`` instance.

    Using ``@lru_cache`` guarantees the .env file is read and validated
    exactly once per process lifetime::

        from soulsort.config import get_settings
        settings = get_settings()
    """
    return Settings()
