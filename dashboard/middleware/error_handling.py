"""
Error handling middleware for the dashboard API.

Turns New Relic data-access errors into JSON error responses with the
status code each error type carries; anything else becomes a 500.
"""

import logging
import traceback
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from dashboard.infrastructure.newrelic.exceptions import NewRelicError
from dashboard.schemas.widgets import ErrorResponse

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for centralized error handling."""

    def __init__(self, app, enable_error_logging: bool = True):
        """
        Initialize the error handling middleware.

        Args:
            app: FastAPI application instance
            enable_error_logging: Whether to log full tracebacks for unexpected errors
        """
        super().__init__(app)
        self.enable_error_logging = enable_error_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except NewRelicError as e:
            return self._handle_newrelic_error(request, e)
        except Exception as e:
            return self._handle_unexpected_exception(request, e)

    def _handle_newrelic_error(self, request: Request, exc: NewRelicError) -> JSONResponse:
        logger.warning(
            f"🚨 {exc.error_code} for {request.method} {request.url.path}: {exc.detail}"
        )

        error_response = ErrorResponse(
            error=exc.detail,
            error_code=exc.error_code,
            details={
                "path": str(request.url.path),
                "method": request.method,
                "status_code": exc.status_code,
            },
        )
        return JSONResponse(status_code=exc.status_code, content=error_response.model_dump(mode="json"))

    def _handle_unexpected_exception(self, request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"💥 Unexpected error for {request.method} {request.url.path}: {str(exc)}"
        )

        if self.enable_error_logging:
            logger.error(f"📋 Full traceback:\n{traceback.format_exc()}")

        error_response = ErrorResponse(
            error="Internal server error",
            error_code="INTERNAL_ERROR",
            details={
                "path": str(request.url.path),
                "method": request.method,
                "error_type": type(exc).__name__,
            },
        )
        return JSONResponse(status_code=500, content=error_response.model_dump(mode="json"))
