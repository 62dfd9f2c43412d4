"""Configuration system for Tally Core.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the computation core.

Usage:
    from tally_core.config import TallyConfig

    # Load from environment variables and .env file
    config = TallyConfig()

    # Access advisory thresholds
    print(config.advisory.balance_warning_ratio)
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AdvisoryConfig(BaseSettings):
    """Thresholds for the advisory rules run after a tax computation.

    Environment Variables:
        TALLY_ADVISORY_BALANCE_WARNING_RATIO: Amount due, as a fraction of gross
            income, above which a warning is raised
        TALLY_ADVISORY_DEDUCTION_SUGGESTION_RATIO: Deductions, as a fraction of
            gross income, below which a review is suggested
        TALLY_ADVISORY_EFFECTIVE_RATE_SUGGESTION_THRESHOLD: Effective rate above
            which tax planning is suggested
    """

    model_config = SettingsConfigDict(
        env_prefix="TALLY_ADVISORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    balance_warning_ratio: Decimal = Field(
        default=Decimal("0.10"),
        ge=0,
        le=1,
        description="Warn when amount due exceeds this share of gross income",
    )
    deduction_suggestion_ratio: Decimal = Field(
        default=Decimal("0.10"),
        ge=0,
        le=1,
        description="Suggest a deduction review below this share of gross income",
    )
    effective_rate_suggestion_threshold: Decimal = Field(
        default=Decimal("0.25"),
        ge=0,
        le=1,
        description="Suggest tax planning above this effective rate",
    )


class TallyConfig(BaseSettings):
    """Root configuration for Tally Core.

    Environment Variables:
        TALLY_ENV: Environment name (development, staging, production, test)
        TALLY_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        TALLY_LOG_FORMAT: Log renderer (console or json); derived from the
            environment when unset

    Example:
        config = TallyConfig(advisory=AdvisoryConfig(balance_warning_ratio=Decimal("0.2")))
    """

    model_config = SettingsConfigDict(
        env_prefix="TALLY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Optional[str] = Field(
        default=None,
        description="Log renderer: console or json",
    )

    advisory: AdvisoryConfig = Field(default_factory=AdvisoryConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: Optional[str]) -> Optional[str]:
        """Validate the log renderer name."""
        if v is None:
            return None
        v_lower = v.lower().strip()
        if v_lower not in {"console", "json"}:
            raise ValueError(f"Invalid log format: {v}. Must be console or json")
        return v_lower

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.env == "development"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"

    @property
    def use_json_logs(self) -> bool:
        """JSON logs unless explicitly console, or unset outside development."""
        if self.log_format is not None:
            return self.log_format == "json"
        return not self.is_development
