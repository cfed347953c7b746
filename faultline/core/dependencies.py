"""
Dependency functions for routers.

The classifier and the metrics aggregator are created once per application
in ``create_app`` and stored on ``app.state``; endpoints receive them
through these dependencies instead of importing module-level singletons.

Usage:
    from faultline.core.dependencies import get_error_metrics

    @router.get("/endpoint")
    async def my_endpoint(metrics: ErrorMetrics = Depends(get_error_metrics)):
        ...
"""

from fastapi import Request

from ..services.error_classification_service import ErrorClassifier, get_default_classifier
from ..services.error_metrics_service import ErrorMetrics


def get_classifier(request: Request) -> ErrorClassifier:
    return getattr(request.app.state, "classifier", None) or get_default_classifier()


def get_error_metrics(request: Request) -> ErrorMetrics:
    """
    Metrics aggregator owned by the running application.

    Raises:
        RuntimeError: If the application was not built with create_app
    """
    metrics = getattr(request.app.state, "error_metrics", None)
    if metrics is None:
        raise RuntimeError("Error metrics have not been initialized. Build the app with create_app().")
    return metrics
