"""
Error handling for the HTTP boundary.

Every unhandled exception is classified, recorded in the application's
ErrorMetrics and turned into a JSON body that only carries the
classification's user message and code. Technical details go to the log.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import Settings, get_settings
from ..services.alerting_service import log_level_for
from ..services.error_classification_service import (
    ErrorClassifier,
    error_status,
    get_default_classifier,
    is_validation_error,
)
from ..services.error_metrics_service import ErrorMetrics
from .error_types import Classification, ErrorCategory, ErrorContext
from .errors import AppError

logger = logging.getLogger(__name__)

CATEGORY_STATUS_CODES = {
    ErrorCategory.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.AUTHENTICATION: status.HTTP_401_UNAUTHORIZED,
    ErrorCategory.RATE_LIMIT: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCategory.EXTERNAL_SERVICE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCategory.DATABASE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCategory.NETWORK: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def generate_error_id() -> str:
    """Unique id for correlating a response with its log record."""
    return f"err_{uuid.uuid4().hex[:12]}"


def status_code_for(error: Any, classification: Classification) -> int:
    """
    HTTP status for a classified error.

    Explicit statuses win: AppError's own status, 422 for request validation,
    400 for other declared validation errors, then any attached status.
    Otherwise the status follows the classification category.
    """
    if isinstance(error, AppError):
        return error.status_code
    if isinstance(error, RequestValidationError):
        return 422
    if is_validation_error(error):
        return status.HTTP_400_BAD_REQUEST

    attached = error_status(error)
    if attached is not None and attached >= 400:
        return attached
    return CATEGORY_STATUS_CODES.get(classification.category, status.HTTP_500_INTERNAL_SERVER_ERROR)


def build_error_response(
    error: Any,
    classification: Classification,
    status_code: int,
    error_id: str,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """
    Client-facing error body.

    Args:
        error: The exception that occurred
        classification: Its classification
        status_code: HTTP status the response will carry
        error_id: Correlation id, also written to the log
        settings: Settings to read retry hints and exposure flags from

    Returns:
        JSON-serialisable dictionary
    """
    settings = settings or get_settings()

    body: Dict[str, Any] = {
        "error": classification.user_message,
        "code": error.code if isinstance(error, AppError) else classification.error_code,
        "error_id": error_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    if isinstance(error, RequestValidationError):
        body["details"] = [
            {
                "field": ".".join(str(part) for part in item.get("loc", ())),
                "message": item.get("msg", ""),
                "type": item.get("type", ""),
            }
            for item in error.errors()
        ]

    if classification.is_retryable:
        body["retryable"] = True
        body["retry_after"] = (
            settings.rate_limit_retry_after_seconds
            if status_code == status.HTTP_429_TOO_MANY_REQUESTS
            else settings.retry_after_seconds
        )

    if classification.suggested_action:
        body["suggested_action"] = classification.suggested_action

    if settings.expose_technical_details:
        body["technical"] = ErrorClassifier.get_technical_details(error, classification)

    return body


def _request_context(request: Request) -> ErrorContext:
    user_id = getattr(request.state, "user_id", None) or "anonymous"
    return ErrorContext(operation=f"{request.method} {request.url.path}", user_id=user_id)


async def handle_classified_error(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler: classify, record, log and respond."""
    state = request.app.state
    classifier: ErrorClassifier = getattr(state, "classifier", None) or get_default_classifier()
    metrics: Optional[ErrorMetrics] = getattr(state, "error_metrics", None)
    settings: Settings = getattr(state, "settings", None) or get_settings()

    context = _request_context(request)
    classification = classifier.classify(exc, context)
    if metrics is not None:
        metrics.record(classification, context)

    status_code = status_code_for(exc, classification)
    error_id = generate_error_id()

    logger.log(
        log_level_for(classification),
        f"Request error {error_id} ({context}): status={status_code} "
        f"code={classification.error_code} {classification.technical_message}",
        extra={
            "error_id": error_id,
            "technical_details": classifier.get_technical_details(exc, classification),
        },
    )

    body = build_error_response(exc, classification, status_code, error_id, settings)

    headers = dict(getattr(exc, "headers", None) or {})
    if "retry_after" in body:
        headers.setdefault("Retry-After", str(body["retry_after"]))

    return JSONResponse(status_code=status_code, content=body, headers=headers or None)


def register_exception_handlers(app: FastAPI) -> None:
    """Route HTTP, request-validation and unhandled errors through the classifier."""
    app.add_exception_handler(StarletteHTTPException, handle_classified_error)
    app.add_exception_handler(RequestValidationError, handle_classified_error)
    app.add_exception_handler(Exception, handle_classified_error)
