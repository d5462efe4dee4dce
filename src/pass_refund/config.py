"""Refund rule constants and runtime settings.

Rule constants are fixed by the fare regulations and are not configurable.
Runtime settings (environment name, log level) come from environment variables.
"""

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Refund processing fee in yen, charged on every refund
PROCESSING_FEE = 220

# Refunds within this many elapsed days use the day-rate rule
GRACE_PERIOD_DAYS = 7

# Length of a "jun" (decade) billing block for section changes
DECADE_DAYS = 10

# Latest section-change refund date, in months after the start date
SECTION_CHANGE_MAX_MONTHS = 6

# A used day is billed as a round trip
ROUND_TRIP_MULTIPLIER = 2

# Log level names accepted by PASS_REFUND_LOG_LEVEL and --log-level
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Runtime settings read from the environment."""

    model_config = ConfigDict(frozen=True)

    environment: str = Field(
        default="dev", description="Deployment environment name, tagged on every log line"
    )
    log_level: str = Field(default="INFO", description="Package log level for the CLI")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        if value not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the shared Settings instance.

    Reads PASS_REFUND_ENV and PASS_REFUND_LOG_LEVEL once per process.

    Returns:
        Settings: Cached settings.
    """
    return Settings(
        environment=os.environ.get("PASS_REFUND_ENV", "dev"),
        log_level=os.environ.get("PASS_REFUND_LOG_LEVEL", "INFO").upper(),
    )
