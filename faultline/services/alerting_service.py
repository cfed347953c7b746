"""
Alert gate: decides whether a single classified failure should be surfaced
to an operator right away. Count-based escalation lives in ErrorMetrics.
"""

import logging

from ..core.error_types import Classification, ErrorSeverity

URGENT_SEVERITIES = frozenset({ErrorSeverity.HIGH, ErrorSeverity.CRITICAL})

_LOG_LEVELS = {
    ErrorSeverity.CRITICAL: logging.ERROR,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.LOW: logging.INFO,
}


def should_alert(classification: Classification) -> bool:
    """True for rule-flagged classifications and for HIGH/CRITICAL severity."""
    return classification.requires_alert or classification.severity in URGENT_SEVERITIES


def log_level_for(classification: Classification) -> int:
    return _LOG_LEVELS[classification.severity]
