"""
Error metrics collector for monitoring and alerting

Counts classified failures per ``CATEGORY:ERROR_CODE`` key and escalates
when a count reaches a positive multiple of its severity threshold, so a
single CRITICAL failure escalates immediately while LOW-severity noise is
summarised every hundred occurrences.

Counts are per instance and in memory only. With several service
instances each one escalates on its own counts.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..core.error_types import Classification, ErrorContext, ErrorSeverity

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLDS: Dict[ErrorSeverity, int] = {
    ErrorSeverity.CRITICAL: 1,  # Alert immediately
    ErrorSeverity.HIGH: 5,      # Alert every 5 occurrences
    ErrorSeverity.MEDIUM: 20,   # Alert every 20 occurrences
    ErrorSeverity.LOW: 100,     # Alert every 100 occurrences
}


@dataclass(frozen=True)
class Escalation:
    """Repeated-failure signal handed to escalation handlers."""
    category: str
    error_code: str
    severity: ErrorSeverity
    count: int
    threshold: int
    context: Optional[ErrorContext] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "error_code": self.error_code,
            "severity": self.severity.value,
            "count": self.count,
            "threshold": self.threshold,
            "context": self.context.to_dict() if self.context else None,
        }


@dataclass(frozen=True)
class MetricsSnapshot:
    counts: Dict[str, int] = field(default_factory=dict)
    last_reset: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "counts": dict(self.counts),
            "last_reset": self.last_reset.isoformat() if self.last_reset else None,
        }


EscalationHandler = Callable[[Escalation], None]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ErrorMetrics:
    """
    In-memory error counters with threshold-based escalation.

    Safe to share between threads: record, get_metrics and reset serialise
    on one lock, so no increment is lost and snapshots are consistent.
    """

    def __init__(
        self,
        thresholds: Optional[Mapping[ErrorSeverity, int]] = None,
        escalation_handlers: Optional[List[EscalationHandler]] = None,
    ):
        self.thresholds = dict(DEFAULT_THRESHOLDS)
        if thresholds:
            self.thresholds.update(thresholds)
        for severity, threshold in self.thresholds.items():
            if threshold < 1:
                raise ValueError(f"Threshold for {severity.value} must be >= 1, got {threshold}")

        self._lock = threading.Lock()
        self._counts: Dict[str, int] = {}
        self._last_reset = _now()
        self._handlers: List[EscalationHandler] = list(escalation_handlers or [])

    def add_escalation_handler(self, handler: EscalationHandler) -> None:
        self._handlers.append(handler)

    def record(self, classification: Classification, context: Optional[ErrorContext] = None) -> None:
        """Record an error occurrence"""
        key = classification.metrics_key
        with self._lock:
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count

        logger.info(
            "Error recorded: category=%s code=%s severity=%s count=%d context=%s",
            classification.category.value,
            classification.error_code,
            classification.severity.value,
            count,
            context,
        )
        self._check_thresholds(classification, count, context)

    def _check_thresholds(
        self,
        classification: Classification,
        count: int,
        context: Optional[ErrorContext],
    ) -> None:
        threshold = self.thresholds[classification.severity]
        if count % threshold != 0:
            return

        escalation = Escalation(
            category=classification.category.value,
            error_code=classification.error_code,
            severity=classification.severity,
            count=count,
            threshold=threshold,
            context=context,
        )
        logger.error(
            "Error threshold exceeded: category=%s code=%s severity=%s count=%d threshold=%d",
            escalation.category,
            escalation.error_code,
            escalation.severity.value,
            count,
            threshold,
            extra={"escalation": escalation.to_dict()},
        )
        for handler in list(self._handlers):
            try:
                handler(escalation)
            except Exception as e:
                logger.error(f"Escalation handler {handler!r} failed: {e}")

    def get_metrics(self) -> MetricsSnapshot:
        """Get current error metrics"""
        with self._lock:
            return MetricsSnapshot(counts=dict(self._counts), last_reset=self._last_reset)

    def get_count(self, key: Union[Classification, str]) -> int:
        if isinstance(key, Classification):
            key = key.metrics_key
        with self._lock:
            return self._counts.get(key, 0)

    def reset(self) -> None:
        """Reset error counters"""
        with self._lock:
            self._counts = {}
            # Never move backwards if the wall clock does
            self._last_reset = max(_now(), self._last_reset)
        logger.info("Error metrics reset")

    def summary(self) -> Dict[str, Any]:
        """Totals per category and their share of all recorded errors"""
        snapshot = self.get_metrics()
        total = sum(snapshot.counts.values())

        by_category: Dict[str, int] = {}
        for key, count in snapshot.counts.items():
            category = key.split(":", 1)[0]
            by_category[category] = by_category.get(category, 0) + count

        return {
            "total_errors": total,
            "by_category": by_category,
            "category_distribution": {
                category: count / total * 100 for category, count in by_category.items()
            } if total else {},
            "last_reset": snapshot.last_reset.isoformat() if snapshot.last_reset else None,
        }
