"""
Tests for the default pattern table and PatternRegistry.
"""

import threading

import pytest

from faultline.core.error_types import ErrorCategory, ErrorPattern, ErrorSeverity
from faultline.services.error_classification_service import ErrorClassifier
from faultline.services.error_patterns_service import DEFAULT_PATTERNS, PatternRegistry


def test_default_table_order():
    """Declaration order is part of the contract"""
    assert [pattern.category for pattern in DEFAULT_PATTERNS] == [
        ErrorCategory.VALIDATION,
        ErrorCategory.AUTHENTICATION,
        ErrorCategory.RATE_LIMIT,
        ErrorCategory.NETWORK,
        ErrorCategory.DATABASE,
        ErrorCategory.EXTERNAL_SERVICE,
        ErrorCategory.SECURITY,
        ErrorCategory.SYSTEM,
    ]


@pytest.mark.parametrize(
    "category, severity, retryable, user_error, alert",
    [
        (ErrorCategory.VALIDATION, ErrorSeverity.LOW, False, True, False),
        (ErrorCategory.AUTHENTICATION, ErrorSeverity.MEDIUM, False, True, False),
        (ErrorCategory.RATE_LIMIT, ErrorSeverity.MEDIUM, True, False, True),
        (ErrorCategory.NETWORK, ErrorSeverity.HIGH, True, False, True),
        (ErrorCategory.DATABASE, ErrorSeverity.HIGH, True, False, True),
        (ErrorCategory.EXTERNAL_SERVICE, ErrorSeverity.HIGH, True, False, True),
        (ErrorCategory.SECURITY, ErrorSeverity.CRITICAL, False, False, True),
        (ErrorCategory.SYSTEM, ErrorSeverity.CRITICAL, False, False, True),
    ],
)
def test_default_policies(category, severity, retryable, user_error, alert):
    pattern = next(p for p in DEFAULT_PATTERNS if p.category == category)

    assert pattern.severity == severity
    assert pattern.is_retryable is retryable
    assert pattern.is_user_error is user_error
    assert pattern.requires_alert is alert
    assert pattern.error_code


def test_match_checks_every_text():
    registry = PatternRegistry()

    assert registry.match("boom", "", "at pool (mongodb/driver.js)").category == ErrorCategory.DATABASE
    assert registry.match("", "", "") is None
    assert registry.match("nothing here") is None


def test_added_pattern_goes_last():
    registry = PatternRegistry()
    registry.add(ErrorPattern(
        pattern=r"quota",
        category=ErrorCategory.BUSINESS_LOGIC,
        error_code="QUOTA_EXCEEDED",
    ))

    assert len(registry) == len(DEFAULT_PATTERNS) + 1
    assert list(registry)[-1].error_code == "QUOTA_EXCEEDED"
    # Earlier defaults still win
    assert registry.match("invalid quota").category == ErrorCategory.VALIDATION
    assert registry.match("quota reached").category == ErrorCategory.BUSINESS_LOGIC


def test_inserted_pattern_takes_precedence():
    registry = PatternRegistry()
    registry.add(
        ErrorPattern(
            pattern=r"payment.?declined",
            category=ErrorCategory.BUSINESS_LOGIC,
            severity=ErrorSeverity.LOW,
            requires_alert=False,
            is_user_error=True,
            error_code="PAYMENT_DECLINED",
        ),
        index=0,
    )

    assert registry.match("Payment declined: invalid card").error_code == "PAYMENT_DECLINED"


def test_adding_does_not_touch_defaults():
    PatternRegistry().add(ErrorPattern(pattern="quota", error_code="QUOTA"))
    assert len(PatternRegistry()) == len(DEFAULT_PATTERNS)


def test_concurrent_adds_are_not_lost():
    registry = PatternRegistry()

    def worker(worker_id):
        for n in range(50):
            registry.add(ErrorPattern(pattern=f"rule-{worker_id}-{n}", error_code=f"RULE_{worker_id}_{n}"))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(registry) == len(DEFAULT_PATTERNS) + 400
    assert len({pattern.error_code for pattern in registry}) == len(DEFAULT_PATTERNS) + 400


def test_partial_pattern_uses_fallback_policy():
    classifier = ErrorClassifier(PatternRegistry([
        ErrorPattern(pattern=r"quota", category=ErrorCategory.BUSINESS_LOGIC, error_code="QUOTA_EXCEEDED"),
    ]))

    classification = classifier.classify(Exception("monthly quota used up"))

    assert classification.category == ErrorCategory.BUSINESS_LOGIC
    assert classification.severity == ErrorSeverity.MEDIUM
    assert classification.is_retryable is False
    assert classification.is_user_error is False
    assert classification.requires_alert is True
    assert classification.error_code == "QUOTA_EXCEEDED"


def test_invalid_regex_is_rejected():
    with pytest.raises(ValueError):
        PatternRegistry([ErrorPattern(pattern=r"(unclosed", error_code="BROKEN")])


def test_empty_error_code_is_rejected():
    registry = PatternRegistry()
    with pytest.raises(ValueError):
        registry.add(ErrorPattern(pattern=r"quota", error_code=""))
    assert len(registry) == len(DEFAULT_PATTERNS)
