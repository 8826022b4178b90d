"""
Tameshi Configuration

Loads run defaults from environment variables and a .env file.

    TAMESHI_SEED=12345 pytest tests/      # replay every property with one seed
    TAMESHI_MAX_SUCCESS=1000 pytest       # check harder
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from tameshi.constants import (
    RUN_DISCARD_RATIO_DEFAULT,
    RUN_SIZE_MAX_DEFAULT,
    RUN_SUCCESS_COUNT_DEFAULT,
    SHRINK_ATTEMPTS_COUNT_MAX,
)


class Settings(BaseSettings):
    """Tameshi settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TAMESHI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Seed pinning every run (unset: fresh seed per run)
    seed: int | None = None

    # Trial budget
    max_success: int = RUN_SUCCESS_COUNT_DEFAULT
    max_size: int = RUN_SIZE_MAX_DEFAULT
    max_discard_ratio: float = RUN_DISCARD_RATIO_DEFAULT
    size_ramp: str = "linear"  # linear | sqrt

    # Shrinking
    max_shrinks: int = SHRINK_ATTEMPTS_COUNT_MAX

    # Run-level timeout, checked between trials (unset: none)
    timeout_secs: float | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
