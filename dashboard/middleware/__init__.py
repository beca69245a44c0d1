"""
Middleware package for the dashboard API.

This package contains middleware components for cross-cutting concerns:
request logging and error handling.
"""

from .error_handling import ErrorHandlingMiddleware
from .logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
]
