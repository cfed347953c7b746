"""
API endpoints for error classification and metrics
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.dependencies import get_classifier, get_error_metrics
from ..core.error_types import ReportedError
from ..services.error_classification_service import ErrorClassifier
from ..services.error_metrics_service import ErrorMetrics
from .error_analysis_models import (
    ClassificationResponse,
    MetricsResponse,
    MetricsSummaryResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/errors", tags=["error-analysis"])


@router.get("/classify", response_model=ClassificationResponse)
async def classify_error(
    error_message: str = Query(..., description="Error message to classify"),
    kind: Optional[str] = Query(None, description="Error kind name, e.g. ValidationError"),
    status: Optional[int] = Query(None, description="HTTP status attached to the error"),
    classifier: ErrorClassifier = Depends(get_classifier),
):
    """Classify a single error message"""
    error = ReportedError(message=error_message, name=kind or "Error", status=status)
    classification = classifier.classify(error)
    return ClassificationResponse.from_classification(error_message, classification)


@router.get("/metrics", response_model=MetricsResponse)
async def get_metrics(metrics: ErrorMetrics = Depends(get_error_metrics)):
    """Current error counters"""
    return MetricsResponse.from_snapshot(metrics.get_metrics())


@router.get("/metrics/summary", response_model=MetricsSummaryResponse)
async def get_metrics_summary(metrics: ErrorMetrics = Depends(get_error_metrics)):
    """Error totals per category"""
    return metrics.summary()


@router.post("/metrics/reset", response_model=MetricsResponse)
async def reset_metrics(metrics: ErrorMetrics = Depends(get_error_metrics)):
    """Clear all error counters"""
    metrics.reset()
    logger.info("Error metrics reset via API")
    return MetricsResponse.from_snapshot(metrics.get_metrics())
