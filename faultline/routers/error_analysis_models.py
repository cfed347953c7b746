"""
API-specific models for error analysis endpoints
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel

from ..core.error_types import Classification, ErrorCategory, ErrorSeverity
from ..services.alerting_service import should_alert
from ..services.error_metrics_service import MetricsSnapshot


class ClassificationResponse(BaseModel):
    """A classification as returned by the classify endpoint"""
    original_message: str
    category: ErrorCategory
    severity: ErrorSeverity
    is_retryable: bool
    is_user_error: bool
    requires_alert: bool
    should_alert: bool
    user_message: str
    error_code: str
    suggested_action: Optional[str] = None

    @classmethod
    def from_classification(cls, message: str, classification: Classification) -> "ClassificationResponse":
        return cls(
            original_message=message,
            category=classification.category,
            severity=classification.severity,
            is_retryable=classification.is_retryable,
            is_user_error=classification.is_user_error,
            requires_alert=classification.requires_alert,
            should_alert=should_alert(classification),
            user_message=classification.user_message,
            error_code=classification.error_code,
            suggested_action=classification.suggested_action,
        )


class MetricsResponse(BaseModel):
    counts: Dict[str, int]
    last_reset: datetime

    @classmethod
    def from_snapshot(cls, snapshot: MetricsSnapshot) -> "MetricsResponse":
        return cls(counts=snapshot.counts, last_reset=snapshot.last_reset)


class MetricsSummaryResponse(BaseModel):
    total_errors: int
    by_category: Dict[str, int]
    category_distribution: Dict[str, float]
    last_reset: Optional[datetime] = None
