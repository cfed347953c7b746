"""faultline/config.py

Application configuration using environment-driven settings.

Every field can be overridden with a ``FAULTLINE_``-prefixed environment
variable or a ``.env`` file.
"""
from functools import lru_cache
from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.error_types import ErrorSeverity


class Settings(BaseSettings):
    app_name: str = "faultline"
    environment: str = "development"

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(levelname)-5.5s [%(name)s] %(message)s"

    # Escalation thresholds: escalate every N occurrences of a severity
    alert_threshold_critical: int = Field(default=1, ge=1)
    alert_threshold_high: int = Field(default=5, ge=1)
    alert_threshold_medium: int = Field(default=20, ge=1)
    alert_threshold_low: int = Field(default=100, ge=1)

    # Periodic counter reset, disabled when unset
    metrics_reset_interval_minutes: Optional[int] = Field(default=None, ge=1)

    # HTTP error responses
    expose_technical_details: bool = False  # Development only
    retry_after_seconds: int = 30
    rate_limit_retry_after_seconds: int = 60

    model_config = SettingsConfigDict(
        env_prefix="FAULTLINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def alert_thresholds(self) -> Dict[ErrorSeverity, int]:
        return {
            ErrorSeverity.CRITICAL: self.alert_threshold_critical,
            ErrorSeverity.HIGH: self.alert_threshold_high,
            ErrorSeverity.MEDIUM: self.alert_threshold_medium,
            ErrorSeverity.LOW: self.alert_threshold_low,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()

