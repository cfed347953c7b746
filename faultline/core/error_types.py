"""
Error types and data structures for classification
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    VALIDATION = "VALIDATION"              # Input validation errors
    AUTHENTICATION = "AUTHENTICATION"      # Auth/authorization errors
    BUSINESS_LOGIC = "BUSINESS_LOGIC"      # Domain-specific errors
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"  # Third-party service errors
    DATABASE = "DATABASE"                  # Database connection/query errors
    NETWORK = "NETWORK"                    # Network connectivity errors
    SYSTEM = "SYSTEM"                      # System resource errors
    SECURITY = "SECURITY"                  # Security-related errors
    RATE_LIMIT = "RATE_LIMIT"              # Rate limiting errors
    UNKNOWN = "UNKNOWN"                    # Unclassified errors


class ErrorSeverity(str, Enum):
    """Urgency of a failure. Members compare by rank, LOW < CRITICAL."""
    LOW = "LOW"            # Expected errors, user input issues
    MEDIUM = "MEDIUM"      # Service degradation, retryable failures
    HIGH = "HIGH"          # Service outages, data corruption
    CRITICAL = "CRITICAL"  # System-wide failures, security breaches

    @property
    def rank(self) -> int:
        return list(ErrorSeverity).index(self)

    def __lt__(self, other):
        if isinstance(other, ErrorSeverity):
            return self.rank < other.rank
        return NotImplemented

    def __le__(self, other):
        if isinstance(other, ErrorSeverity):
            return self.rank <= other.rank
        return NotImplemented

    def __gt__(self, other):
        if isinstance(other, ErrorSeverity):
            return self.rank > other.rank
        return NotImplemented

    def __ge__(self, other):
        if isinstance(other, ErrorSeverity):
            return self.rank >= other.rank
        return NotImplemented


DEFAULT_USER_MESSAGE = "An error occurred. Please try again."
UNKNOWN_USER_MESSAGE = "An unexpected error occurred. Please try again."
UNKNOWN_ERROR_CODE = "UNKNOWN_ERROR"


@dataclass(frozen=True)
class Classification:
    """Structured verdict for a single error occurrence"""
    category: ErrorCategory
    severity: ErrorSeverity
    is_retryable: bool
    is_user_error: bool
    requires_alert: bool
    user_message: str
    technical_message: str
    error_code: str
    suggested_action: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.category, ErrorCategory):
            raise TypeError(f"category must be an ErrorCategory, got {self.category!r}")
        if not isinstance(self.severity, ErrorSeverity):
            raise TypeError(f"severity must be an ErrorSeverity, got {self.severity!r}")
        if not self.error_code:
            raise ValueError("error_code must be a non-empty string")

    @property
    def metrics_key(self) -> str:
        return f"{self.category.value}:{self.error_code}"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        data["severity"] = self.severity.value
        return data


@dataclass
class ErrorPattern:
    """
    Defines a pattern for matching error messages.

    Fields left at their defaults act as a partial classification and
    resolve to the unknown-error policy.
    """
    pattern: str
    category: ErrorCategory = ErrorCategory.UNKNOWN
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    is_retryable: bool = False
    is_user_error: bool = False
    requires_alert: bool = True
    user_message: str = DEFAULT_USER_MESSAGE
    error_code: str = UNKNOWN_ERROR_CODE
    suggested_action: Optional[str] = None
    description: str = ""

    def to_classification(self, technical_message: str) -> Classification:
        return Classification(
            category=self.category,
            severity=self.severity,
            is_retryable=self.is_retryable,
            is_user_error=self.is_user_error,
            requires_alert=self.requires_alert,
            user_message=self.user_message,
            technical_message=technical_message,
            error_code=self.error_code,
            suggested_action=self.suggested_action,
        )


class ErrorContext:
    """Context information for error handling."""
    def __init__(self, operation: Optional[str] = None, user_id: Optional[str] = None,
                 resource: Optional[str] = None):
        self.operation = operation
        self.user_id = user_id
        self.resource = resource

    def __str__(self) -> str:
        parts = [self.operation or "unknown operation"]
        if self.resource:
            parts.append(f"resource={self.resource}")
        if self.user_id:
            parts.append(f"user_id={self.user_id}")
        return ", ".join(parts)

    def __repr__(self) -> str:
        return f"ErrorContext({self})"

    def to_dict(self) -> Dict[str, str]:
        return {
            key: value
            for key, value in (
                ("operation", self.operation),
                ("user_id", self.user_id),
                ("resource", self.resource),
            )
            if value
        }


@dataclass
class ReportedError:
    """An error known only by its reported fields, e.g. from a log line or an API call."""
    message: str
    name: str = "Error"
    stack: str = ""
    status: Optional[int] = None
