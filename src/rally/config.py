"""
Configuration management for Rally.

Uses Pydantic Settings to load configuration from environment variables
with sensible defaults for development. Values can also be set via a .env
file in the project root.

Usage:
    from rally.config import settings
    print(settings.database_url)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly or via a .env file
    in the project root directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ==========================================================================
    # Database Configuration
    # ==========================================================================

    # Rating state store (owned by the profile service, SQLite for local dev)
    database_url: str = Field(
        default="sqlite:///rally.db",
        description="SQLAlchemy connection URL for the rating state database",
    )

    # Pool settings (ignored for SQLite)
    db_pool_size: int = Field(
        default=5,
        description="Number of connections to keep in the pool",
    )
    db_max_overflow: int = Field(
        default=10,
        description="Max additional connections beyond pool_size",
    )

    # ==========================================================================
    # Rating Engine Overrides
    # ==========================================================================

    # See rally/rating/params.py for how these feed RatingParams
    rating_tie_policy: str = Field(
        default="no_change",
        description="What to do when set wins are tied: 'no_change' or 'side_b'",
    )
    rating_deviation_shrink_mode: str = Field(
        default="flat",
        description="Post-match deviation shrink: 'flat' (5%) or 'opponent_weighted'",
    )
    rating_idle_decay_constant: Optional[float] = Field(
        default=None,
        description="Idle decay constant c in sqrt(RD^2 + c^2 * t); default 30",
    )
    rating_idle_decay_period_days: Optional[float] = Field(
        default=None,
        description="Length of one idle-decay period t in days; default 30.44",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: str = Field(
        default="console",
        description="Log format: 'json' for production, 'console' for dev",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Ensure log format is one we know how to render."""
        lower_v = v.lower()
        if lower_v not in {"json", "console"}:
            raise ValueError("log_format must be 'json' or 'console'")
        return lower_v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once,
    which is important because loading from .env can be slow.
    """
    return Settings()


# Convenience alias for importing
settings = get_settings()
