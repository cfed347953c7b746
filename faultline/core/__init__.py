"""
Core package for faultline.

Holds the classification data model, the application error types, and the
HTTP-facing pieces (exception handlers, dependencies, scheduler registry).
The HTTP modules import FastAPI and are not imported here; import them
directly when needed, e.g. ``from faultline.core.error_handlers import ...``.
"""

from . import error_types
from . import errors

__all__ = [
    "error_types",
    "errors",
]
