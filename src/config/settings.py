"""
Centralized settings management using pydantic-settings.

Environment-driven knobs for the confidence engine: feature flags, display
limits and logging. Use get_settings() to access the cached instance.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field has a default, so the engine runs without any .env file.

    Optional environment variables:
        - ENVIRONMENT: Environment name (development, staging, production)
        - LOG_LEVEL: Minimum log level (default: INFO)
        - JSON_LOGS: Emit JSON log lines instead of console output
        - EXPLANATIONS_ENABLED: Allow "why this works" explanations
        - EXPLANATIONS_ALLOW_SHOES: Allow explanations on shoe pairs
        - MODE_B_STRONG_MEDIUM_FALLBACK: Allow Mode B guidance
        - SILHOUETTE_ENABLED: Compute the silhouette (V) signal
        - MAX_MATCHES_SHOWN: Display limit for HIGH matches
        - TELEMETRY_ENABLED: Emit confidence_* telemetry events
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    # ==========================================================================
    # Logging
    # ==========================================================================
    log_level: str = Field(default="INFO", description="Minimum log level")
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            if v not in _LOG_LEVELS:
                raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return v

    # ==========================================================================
    # Engine Feature Flags
    # ==========================================================================
    explanations_enabled: bool = Field(
        default=True,
        description="Allow 'why this works' explanations on HIGH pairs"
    )
    explanations_allow_shoes: bool = Field(
        default=False,
        description="Allow explanations on pairs that involve shoes"
    )
    mode_b_strong_medium_fallback: bool = Field(
        default=True,
        description="Allow Mode B 'make it work' guidance"
    )
    silhouette_enabled: bool = Field(
        default=False,
        description="Compute the optional silhouette (V) signal"
    )

    # ==========================================================================
    # Display
    # ==========================================================================
    max_matches_shown: int = Field(
        default=100,
        ge=1,
        description="Maximum HIGH matches returned in an outfit evaluation"
    )

    # ==========================================================================
    # Telemetry
    # ==========================================================================
    telemetry_enabled: bool = Field(
        default=True,
        description="Emit confidence_* telemetry events to the registered sink"
    )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings; get_settings.cache_clear() forces a reload."""
    return Settings()


def get_test_settings(**overrides) -> Settings:
    """Uncached settings for tests: environment=testing, debug on, then overrides."""
    return Settings(**{"environment": "testing", "debug": True, **overrides})
