"""
Configuration management with environment variable support and validation.

Design principles:
- Validation at load time (fail fast on bad scheduling defaults)
- Type safety with Pydantic
- Every setting has a working default, so an empty environment is valid
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from medschedule.domain.models import TIME_PATTERN

# Load environment variables from .env file
load_dotenv()


class SchedulingConfig(BaseModel):
    """Fallbacks and thresholds used when medication data is incomplete."""

    default_frequency_hours: int = Field(
        default=6, gt=0, description="Interval used when a frequency cannot be parsed"
    )
    default_start_time: str = Field(
        default="08:00", pattern=TIME_PATTERN, description="First dose time when none is set"
    )
    expiring_soon_days: int = Field(
        default=7, ge=0, description="Days before the end date that count as expiring soon"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration."""

    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    scheduling_config = SchedulingConfig(
        default_frequency_hours=int(os.getenv("DEFAULT_FREQUENCY_HOURS", "6")),
        default_start_time=os.getenv("DEFAULT_START_TIME", "08:00").strip(),
        expiring_soon_days=int(os.getenv("EXPIRING_SOON_DAYS", "7")),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        scheduling=scheduling_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()
