"""
Tests for the classifying exception handlers at the HTTP boundary.
"""

import re

import pytest
from fastapi import HTTPException, Request
from fastapi.testclient import TestClient

from faultline.app import create_app
from faultline.config import Settings
from faultline.core.error_handlers import build_error_response, generate_error_id, status_code_for
from faultline.core.error_types import ErrorCategory, ReportedError
from faultline.core.errors import AppError, ValidationError
from faultline.services.error_classification_service import ErrorClassifier


class UpstreamFailure(Exception):
    """Raised by test routes. An empty stack keeps traceback frames out of matching."""
    stack = ""


class Unprintable(Exception):
    stack = ""

    def __str__(self):
        raise RuntimeError("no str")


def _add_failing_routes(app):
    @app.get("/orders/{order_id}")
    def get_order(order_id: int):
        raise AppError(f"Order {order_id} not found", status_code=404, code="ORDER_NOT_FOUND")

    @app.post("/orders")
    def create_order():
        raise ValidationError("quantity must be positive", field="quantity")

    @app.get("/fail")
    def fail(message: str, request: Request):
        request.state.user_id = "u42"
        raise UpstreamFailure(message)

    @app.get("/unprintable")
    def unprintable():
        raise Unprintable()

    @app.get("/forbidden")
    def forbidden():
        raise HTTPException(status_code=403, detail="Not allowed")


@pytest.fixture
def failing_client(app):
    _add_failing_routes(app)
    return TestClient(app, raise_server_exceptions=False)


# ==========================================
# Responses
# ==========================================
def test_network_failure_is_retryable(failing_client):
    response = failing_client.get("/fail", params={"message": "Network connection timeout"})

    assert response.status_code == 503
    assert response.headers["retry-after"] == "30"
    data = response.json()
    assert data["code"] == "NETWORK_ERROR"
    assert data["error"] == "Network error occurred. Please try again."
    assert data["retryable"] is True
    assert data["retry_after"] == 30
    assert data["suggested_action"]
    assert re.fullmatch(r"err_[0-9a-f]{12}", data["error_id"])
    assert "timestamp" in data
    assert "technical" not in data


def test_rate_limit_retry_after(failing_client):
    response = failing_client.get("/fail", params={"message": "Rate limit exceeded"})

    assert response.status_code == 429
    assert response.headers["retry-after"] == "60"
    assert response.json()["retry_after"] == 60


def test_unknown_failure(failing_client):
    response = failing_client.get("/fail", params={"message": "Something odd happened"})

    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "UNKNOWN_ERROR"
    assert data["error"] == "An unexpected error occurred. Please try again."
    assert "retryable" not in data
    assert "Something odd" not in response.text


def test_app_error_keeps_status_and_code(failing_client):
    response = failing_client.get("/orders/42")

    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "ORDER_NOT_FOUND"
    assert "Order 42" not in response.text


def test_declared_validation_error(failing_client):
    response = failing_client.post("/orders")

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert response.json()["error"] == "Please check your input and try again."


def test_request_validation_error(failing_client):
    response = failing_client.get("/orders/not-a-number")

    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["details"][0]["field"] == "path.order_id"


def test_http_exception(failing_client):
    response = failing_client.get("/forbidden")

    assert response.status_code == 403
    assert response.json()["code"] == "HTTP_403"


def test_unknown_route(client):
    response = client.get("/no/such/route")

    assert response.status_code == 404
    assert response.json()["code"] == "HTTP_404"


# ==========================================
# Metrics and escalation
# ==========================================
def test_failures_are_recorded(failing_client, metrics):
    failing_client.get("/fail", params={"message": "Network connection timeout"})
    failing_client.get("/fail", params={"message": "Network connection timeout"})
    failing_client.get("/orders/42")

    assert metrics.get_count("NETWORK:NETWORK_ERROR") == 2
    assert metrics.get_count("VALIDATION:HTTP_404") == 1


def test_escalation_carries_request_context(failing_client, metrics):
    escalated = []
    metrics.add_escalation_handler(escalated.append)

    response = failing_client.get("/fail", params={"message": "Security violation detected"})

    assert response.status_code == 500
    assert response.json()["code"] == "SECURITY_ERROR"
    assert len(escalated) == 1
    assert escalated[0].context.operation == "GET /fail"
    assert escalated[0].context.user_id == "u42"


def test_technical_details_when_exposed(metrics):
    app = create_app(
        settings=Settings(metrics_reset_interval_minutes=None, expose_technical_details=True),
        metrics=metrics,
    )
    _add_failing_routes(app)
    client = TestClient(app, raise_server_exceptions=False)

    data = client.get("/fail", params={"message": "Network connection timeout"}).json()

    assert data["technical"]["message"] == "Network connection timeout"
    assert data["technical"]["name"] == "UpstreamFailure"
    assert data["technical"]["classification"]["error_code"] == "NETWORK_ERROR"


def test_unprintable_error_still_gets_a_body(metrics):
    app = create_app(
        settings=Settings(metrics_reset_interval_minutes=None, expose_technical_details=True),
        metrics=metrics,
    )
    _add_failing_routes(app)
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/unprintable")

    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "UNKNOWN_ERROR"
    assert re.fullmatch(r"err_[0-9a-f]{12}", data["error_id"])
    assert data["technical"]["message"] == ""
    assert data["technical"]["name"] == "Unprintable"
    assert metrics.get_count("UNKNOWN:UNKNOWN_ERROR") == 1


# ==========================================
# Helpers
# ==========================================
@pytest.mark.parametrize(
    "error, expected",
    [
        (AppError("boom", status_code=409, code="CONFLICT"), 409),
        (ValidationError("bad"), 400),
        (ReportedError(message="Not Found", status=404), 404),
        (ReportedError(message="Unauthorized"), 401),
        (ReportedError(message="Rate limit exceeded"), 429),
        (ReportedError(message="Database unavailable"), 503),
        (ReportedError(message="Security violation"), 500),
        (ReportedError(message="Something odd happened"), 500),
    ],
)
def test_status_code_for(classifier, error, expected):
    assert status_code_for(error, classifier.classify(error)) == expected


def test_build_error_response_omits_retry_hints_for_permanent_errors(classifier, settings):
    error = ReportedError(message="Unauthorized")
    classification = classifier.classify(error)

    body = build_error_response(error, classification, 401, generate_error_id(), settings)

    assert body["code"] == "AUTH_ERROR"
    assert body["error"] == "Authentication failed. Please log in again."
    assert "retryable" not in body
    assert "retry_after" not in body
    assert "suggested_action" not in body
    assert ErrorClassifier.get_technical_details(error, classification)["name"] == "Error"


def test_categories_map_to_statuses(classifier):
    error = ReportedError(message="OpenAI API error")
    classification = classifier.classify(error)
    assert classification.category == ErrorCategory.EXTERNAL_SERVICE
    assert status_code_for(error, classification) == 503
