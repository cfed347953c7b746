"""
Error pattern definitions for classification
Separated from main classification logic for better maintainability

Order matters: the first matching pattern wins, so more specific or more
urgent signals have to be declared ahead of general ones.
"""

import re
import threading
from typing import Iterable, Iterator, List, Optional, Tuple

from ..core.error_types import ErrorCategory, ErrorPattern, ErrorSeverity

# Pattern definitions organized by category
VALIDATION_PATTERNS = [
    ErrorPattern(
        pattern=r"validation|invalid|required|missing",
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.LOW,
        is_retryable=False,
        is_user_error=True,
        requires_alert=False,
        user_message="Please check your input and try again.",
        error_code="VALIDATION_ERROR",
        description="Input validation failures",
    ),
]

AUTHENTICATION_PATTERNS = [
    ErrorPattern(
        pattern=r"unauthorized|forbidden|token|auth",
        category=ErrorCategory.AUTHENTICATION,
        severity=ErrorSeverity.MEDIUM,
        is_retryable=False,
        is_user_error=True,
        requires_alert=False,
        user_message="Authentication failed. Please log in again.",
        error_code="AUTH_ERROR",
        description="Authentication and authorization failures",
    ),
]

RATE_LIMIT_PATTERNS = [
    ErrorPattern(
        pattern=r"rate.?limit|too.?many.?requests",
        category=ErrorCategory.RATE_LIMIT,
        severity=ErrorSeverity.MEDIUM,
        is_retryable=True,
        is_user_error=False,
        requires_alert=True,
        user_message="Service is busy. Please try again in a moment.",
        error_code="RATE_LIMIT_ERROR",
        suggested_action="Check request volume against upstream quotas",
        description="Rate limiting by this service or a dependency",
    ),
]

NETWORK_PATTERNS = [
    ErrorPattern(
        pattern=r"network|connection|timeout|timed.?out|econnreset|enotfound|getaddrinfo",
        category=ErrorCategory.NETWORK,
        severity=ErrorSeverity.HIGH,
        is_retryable=True,
        is_user_error=False,
        requires_alert=True,
        user_message="Network error occurred. Please try again.",
        error_code="NETWORK_ERROR",
        suggested_action="Check connectivity and DNS resolution to downstream hosts",
        description="Network connectivity, DNS and timeout failures",
    ),
]

DATABASE_PATTERNS = [
    ErrorPattern(
        pattern=r"database|firestore|mongodb|connection.?pool",
        category=ErrorCategory.DATABASE,
        severity=ErrorSeverity.HIGH,
        is_retryable=True,
        is_user_error=False,
        requires_alert=True,
        user_message="Database error occurred. Please try again.",
        error_code="DATABASE_ERROR",
        suggested_action="Check document store health and connection pool usage",
        description="Database and document store failures",
    ),
]

EXTERNAL_SERVICE_PATTERNS = [
    ErrorPattern(
        pattern=r"openai|external.?service|api.?error",
        category=ErrorCategory.EXTERNAL_SERVICE,
        severity=ErrorSeverity.HIGH,
        is_retryable=True,
        is_user_error=False,
        requires_alert=True,
        user_message="AI service is temporarily unavailable. Please try again.",
        error_code="EXTERNAL_SERVICE_ERROR",
        suggested_action="Check the status page of the upstream provider",
        description="Third-party API failures",
    ),
]

SECURITY_PATTERNS = [
    ErrorPattern(
        pattern=r"security|malicious|injection|xss|csrf",
        category=ErrorCategory.SECURITY,
        severity=ErrorSeverity.CRITICAL,
        is_retryable=False,
        is_user_error=False,
        requires_alert=True,
        user_message="Security error detected. Request blocked.",
        error_code="SECURITY_ERROR",
        suggested_action="Review the request source and recent access logs",
        description="Suspected attacks and security violations",
    ),
]

SYSTEM_PATTERNS = [
    ErrorPattern(
        pattern=r"memory|disk|cpu|system|resource",
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.CRITICAL,
        is_retryable=False,
        is_user_error=False,
        requires_alert=True,
        user_message="System error occurred. Please try again later.",
        error_code="SYSTEM_ERROR",
        suggested_action="Check host memory, disk and CPU headroom",
        description="Host resource exhaustion",
    ),
]

# Combine all patterns
DEFAULT_PATTERNS: List[ErrorPattern] = (
    VALIDATION_PATTERNS +
    AUTHENTICATION_PATTERNS +
    RATE_LIMIT_PATTERNS +
    NETWORK_PATTERNS +
    DATABASE_PATTERNS +
    EXTERNAL_SERVICE_PATTERNS +
    SECURITY_PATTERNS +
    SYSTEM_PATTERNS
)


def _compile(pattern: ErrorPattern) -> Tuple[re.Pattern, ErrorPattern]:
    if not pattern.error_code:
        raise ValueError(f"Pattern {pattern.pattern!r} has an empty error_code")
    try:
        return re.compile(pattern.pattern, re.IGNORECASE), pattern
    except re.error as e:
        raise ValueError(f"Invalid error pattern {pattern.pattern!r}: {e}") from e


class PatternRegistry:
    """Ordered table of compiled error patterns. First match wins."""

    def __init__(self, patterns: Optional[Iterable[ErrorPattern]] = None):
        if patterns is None:
            patterns = DEFAULT_PATTERNS
        self._compiled: Tuple[Tuple[re.Pattern, ErrorPattern], ...] = tuple(
            _compile(pattern) for pattern in patterns
        )
        self._write_lock = threading.Lock()

    def add(self, pattern: ErrorPattern, index: Optional[int] = None) -> None:
        """
        Register a pattern.

        Appended after the existing patterns unless ``index`` is given, in
        which case it is inserted at that position and takes precedence over
        everything declared after it.
        """
        entry = _compile(pattern)
        # Writers serialise; readers never lock and see the old or the new tuple
        with self._write_lock:
            compiled = list(self._compiled)
            if index is None:
                compiled.append(entry)
            else:
                compiled.insert(index, entry)
            self._compiled = tuple(compiled)

    def match(self, *texts: str) -> Optional[ErrorPattern]:
        """Return the first pattern matching any of ``texts``, or None."""
        candidates = [text for text in texts if text]
        for compiled_pattern, pattern in self._compiled:
            if any(compiled_pattern.search(text) for text in candidates):
                return pattern
        return None

    def __iter__(self) -> Iterator[ErrorPattern]:
        return iter([pattern for _, pattern in self._compiled])

    def __len__(self) -> int:
        return len(self._compiled)
