"""
Error Classification System

Turns an exception (or any object exposing a message, a kind name and
optionally a stack and an HTTP status) into a Classification. The lookup
order is fixed: declared validation kind, attached HTTP status, the ordered
pattern table, and finally the unknown-error fallback.
"""

import logging
import numbers
import traceback
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError as PydanticValidationError

from ..core.error_types import (
    UNKNOWN_ERROR_CODE,
    UNKNOWN_USER_MESSAGE,
    Classification,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
)
from ..core.errors import ValidationError
from .alerting_service import should_alert
from .error_patterns_service import PatternRegistry

logger = logging.getLogger(__name__)

# Kind names treated as declared validation failures when the error type
# itself cannot be imported here (e.g. FastAPI's RequestValidationError)
VALIDATION_ERROR_KINDS = frozenset({"ValidationError", "RequestValidationError"})


def error_message(error: Any) -> str:
    message = getattr(error, "message", None)
    if isinstance(message, str):
        return message
    return str(error)


def safe_error_message(error: Any) -> str:
    """error_message for values whose ``message`` or ``__str__`` may raise."""
    try:
        return error_message(error)
    except Exception:
        pass
    try:
        return str(error)
    except Exception:
        return ""


def error_kind(error: Any) -> str:
    # Exception attributes such as ImportError.name are not the kind
    if not isinstance(error, BaseException):
        name = getattr(error, "name", None)
        if isinstance(name, str) and name:
            return name
    return type(error).__name__


def _safe_kind(error: Any) -> str:
    try:
        return error_kind(error)
    except Exception:
        return type(error).__name__


def error_stack(error: Any) -> str:
    stack = getattr(error, "stack", None)
    if isinstance(stack, str):
        return stack
    tb = getattr(error, "__traceback__", None)
    if tb is None:
        return ""
    # Frame locations only; source lines and their comments are not the error
    return "\n".join(
        f'File "{frame.filename}", line {frame.lineno}, in {frame.name}'
        for frame in traceback.extract_tb(tb)
    )


def _as_status(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def error_status(error: Any) -> Optional[int]:
    """
    HTTP status attached to the error, from ``status`` then ``status_code``.

    Integral numbers, whole floats (``503.0``) and digit-only strings
    (``"503"``) count. Booleans and anything else are ignored.
    """
    for attr in ("status", "status_code"):
        status = _as_status(getattr(error, attr, None))
        if status is not None:
            return status
    return None


def is_validation_error(error: Any) -> bool:
    """True when the error declares itself an input-validation failure."""
    if isinstance(error, (ValidationError, PydanticValidationError)):
        return True
    return error_kind(error) in VALIDATION_ERROR_KINDS


def unknown_classification(technical_message: str) -> Classification:
    return Classification(
        category=ErrorCategory.UNKNOWN,
        severity=ErrorSeverity.MEDIUM,
        is_retryable=False,
        is_user_error=False,
        requires_alert=True,
        user_message=UNKNOWN_USER_MESSAGE,
        technical_message=technical_message,
        error_code=UNKNOWN_ERROR_CODE,
    )


class ErrorClassifier:
    """Rule-based error classifier backed by an ordered PatternRegistry"""

    def __init__(self, registry: Optional[PatternRegistry] = None):
        self.registry = registry if registry is not None else PatternRegistry()

    def classify(self, error: Any, context: Optional[ErrorContext] = None) -> Classification:
        """
        Classify an error

        Args:
            error: Exception or exception-like object
            context: Optional request context, used for logging only

        Returns:
            Classification for this occurrence. Never raises.
        """
        try:
            return self._classify(error, context)
        except Exception:
            logger.warning("Could not inspect error of type %s", type(error).__name__, exc_info=True)
            return unknown_classification(safe_error_message(error))

    def _classify(self, error: Any, context: Optional[ErrorContext]) -> Classification:
        message = error_message(error)

        if is_validation_error(error):
            return Classification(
                category=ErrorCategory.VALIDATION,
                severity=ErrorSeverity.LOW,
                is_retryable=False,
                is_user_error=True,
                requires_alert=False,
                user_message="Please check your input and try again.",
                technical_message=message,
                error_code="VALIDATION_ERROR",
            )

        status = error_status(error)
        if status is not None:
            if 400 <= status < 500:
                return Classification(
                    category=ErrorCategory.VALIDATION,
                    severity=ErrorSeverity.LOW,
                    is_retryable=False,
                    is_user_error=True,
                    requires_alert=False,
                    user_message="Invalid request. Please check your input.",
                    technical_message=message,
                    error_code=f"HTTP_{status}",
                )
            if status >= 500:
                return Classification(
                    category=ErrorCategory.EXTERNAL_SERVICE,
                    severity=ErrorSeverity.HIGH,
                    is_retryable=True,
                    is_user_error=False,
                    requires_alert=True,
                    user_message="Service temporarily unavailable. Please try again.",
                    technical_message=message,
                    error_code=f"HTTP_{status}",
                )

        pattern = self.registry.match(message, error_kind(error), error_stack(error))
        if pattern is not None:
            classification = pattern.to_classification(message)
            logger.debug(
                "Error classified: pattern=%s code=%s context=%s",
                pattern.pattern,
                classification.error_code,
                context,
            )
            return classification

        return unknown_classification(message)

    @staticmethod
    def should_alert(classification: Classification) -> bool:
        return should_alert(classification)

    @staticmethod
    def get_user_message(classification: Classification) -> str:
        return classification.user_message

    @staticmethod
    def get_technical_details(error: Any, classification: Classification) -> Dict[str, Any]:
        """Technical error details for internal logs. Never send to clients. Never raises."""
        try:
            stack = error_stack(error)
        except Exception:
            stack = ""
        return {
            "message": safe_error_message(error),
            "name": _safe_kind(error),
            "stack": stack,
            "classification": {
                "category": classification.category.value,
                "severity": classification.severity.value,
                "error_code": classification.error_code,
                "is_retryable": classification.is_retryable,
                "requires_alert": classification.requires_alert,
            },
        }

    def get_error_statistics(self, errors: Iterable[Any]) -> Dict:
        """
        Classify a batch of errors and return summary statistics

        Args:
            errors: Exceptions or exception-like objects

        Returns:
            Dictionary with analysis results
        """
        errors = list(errors)
        if not errors:
            return {
                'total_errors': 0,
                'categories': {},
                'category_distribution': {}
            }

        total_errors = len(errors)
        categories = {
            category.value: {'count': 0, 'alerts': 0, 'examples': []}
            for category in ErrorCategory
        }

        for error in errors:
            classification = self.classify(error)
            category_data = categories[classification.category.value]
            category_data['count'] += 1
            if should_alert(classification):
                category_data['alerts'] += 1

            # Store example messages (up to 3 per category)
            if len(category_data['examples']) < 3:
                category_data['examples'].append({
                    'message': classification.technical_message,
                    'error_code': classification.error_code,
                })

        return {
            'total_errors': total_errors,
            'categories': categories,
            'category_distribution': {
                cat: data['count'] / total_errors * 100
                for cat, data in categories.items()
            }
        }


_default_classifier: Optional[ErrorClassifier] = None


def get_default_classifier() -> ErrorClassifier:
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = ErrorClassifier()
    return _default_classifier


# Convenience functions for easy import
def classify_error(error: Any, context: Optional[ErrorContext] = None) -> Classification:
    """Classify a single error with the default pattern table"""
    return get_default_classifier().classify(error, context)


def get_user_message(classification: Classification) -> str:
    return classification.user_message


def get_technical_details(error: Any, classification: Classification) -> Dict[str, Any]:
    return ErrorClassifier.get_technical_details(error, classification)


def analyze_errors(errors: Iterable[Any]) -> Dict:
    """Classify a batch of errors and return summary statistics"""
    return get_default_classifier().get_error_statistics(errors)
