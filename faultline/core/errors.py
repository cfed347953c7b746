"""
Application error types.

Raising these instead of bare exceptions gives the classifier precise
signals: ``ValidationError`` is the declared input-validation kind and
every ``AppError`` carries the HTTP status it should surface as.
"""

from datetime import datetime, timezone
from typing import Optional


class AppError(Exception):
    """Application-specific error with an HTTP status and a stable code."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: str = "INTERNAL_ERROR",
        is_operational: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.is_operational = is_operational
        self.timestamp = datetime.now(timezone.utc).isoformat()

    @property
    def status(self) -> int:
        return self.status_code


class ValidationError(AppError):
    """Caller-supplied input failed validation."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, status_code=400, code="VALIDATION_ERROR")
        self.field = field
