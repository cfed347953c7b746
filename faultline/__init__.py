"""
faultline: error classification and metrics.

Classifies runtime failures into category, severity, retry and alert
decisions, and counts classified failures to escalate repeated ones.
"""

from .core.error_types import (
    Classification,
    ErrorCategory,
    ErrorContext,
    ErrorPattern,
    ErrorSeverity,
    ReportedError,
)
from .core.errors import AppError, ValidationError
from .services.alerting_service import log_level_for, should_alert
from .services.error_classification_service import (
    ErrorClassifier,
    classify_error,
    get_technical_details,
    get_user_message,
)
from .services.error_metrics_service import Escalation, ErrorMetrics, MetricsSnapshot
from .services.error_patterns_service import DEFAULT_PATTERNS, PatternRegistry

__version__ = "0.1.0"

__all__ = [
    # Model
    "Classification",
    "ErrorCategory",
    "ErrorContext",
    "ErrorPattern",
    "ErrorSeverity",
    "ReportedError",
    "AppError",
    "ValidationError",
    # Classification
    "DEFAULT_PATTERNS",
    "PatternRegistry",
    "ErrorClassifier",
    "classify_error",
    "get_user_message",
    "get_technical_details",
    # Alerting and metrics
    "should_alert",
    "log_level_for",
    "ErrorMetrics",
    "MetricsSnapshot",
    "Escalation",
]
