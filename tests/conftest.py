"""
Shared fixtures for the faultline test suite.
"""

import pytest
from fastapi.testclient import TestClient

from faultline.app import create_app
from faultline.config import Settings
from faultline.core.error_types import Classification, ErrorCategory, ErrorSeverity
from faultline.services.error_classification_service import ErrorClassifier
from faultline.services.error_metrics_service import ErrorMetrics


@pytest.fixture
def classifier():
    """Classifier with the default pattern table"""
    return ErrorClassifier()


@pytest.fixture
def metrics():
    """Fresh, isolated metrics aggregator"""
    return ErrorMetrics()


@pytest.fixture
def settings():
    return Settings(metrics_reset_interval_minutes=None, expose_technical_details=False)


@pytest.fixture
def app(settings, metrics):
    return create_app(settings=settings, metrics=metrics)


@pytest.fixture
def client(app):
    """Test client that returns 500 responses instead of re-raising"""
    return TestClient(app, raise_server_exceptions=False)


def _make_classification(
    severity: ErrorSeverity = ErrorSeverity.HIGH,
    category: ErrorCategory = ErrorCategory.NETWORK,
    error_code: str = "NETWORK_ERROR",
    requires_alert: bool = False,
) -> Classification:
    return Classification(
        category=category,
        severity=severity,
        is_retryable=False,
        is_user_error=False,
        requires_alert=requires_alert,
        user_message="Something went wrong.",
        technical_message="test failure",
        error_code=error_code,
    )


@pytest.fixture
def make_classification():
    """Factory for hand-built classifications"""
    return _make_classification
