"""
Request logging middleware for the dashboard API.

Logs every widget request with its timing. The New Relic API key is
masked wherever query params are logged.
"""

import json
import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

SENSITIVE_PARAMS = {"apikey", "api_key"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging with timing information."""

    def __init__(self, app, enable_detailed_logging: bool = False):
        """
        Initialize the logging middleware.

        Args:
            app: FastAPI application instance
            enable_detailed_logging: Whether to log query params at debug level
        """
        super().__init__(app)
        self.enable_detailed_logging = enable_detailed_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        logger.info(
            f"📥 {request.method} {request.url.path} - {request.client.host if request.client else None}"
        )

        if self.enable_detailed_logging:
            logger.debug(f"📋 Request details: {json.dumps(self._extract_request_info(request), indent=2)}")

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"💥 {request.method} {request.url.path} - ERROR - {process_time:.3f}s - {str(e)}"
            )
            # Re-raise the exception for error handling middleware
            raise

        process_time = time.time() - start_time
        logger.info(
            f"📤 {request.method} {request.url.path} - {response.status_code} - "
            f"{process_time:.3f}s"
        )

        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Timestamp"] = datetime.now().isoformat()
        return response

    def _extract_request_info(self, request: Request) -> Dict[str, Any]:
        return {
            "method": request.method,
            "path": str(request.url.path),
            "query_params": {
                k: ("***" if k.lower() in SENSITIVE_PARAMS else v)
                for k, v in request.query_params.items()
            },
            "user_agent": request.headers.get("user-agent"),
            "timestamp": datetime.now().isoformat(),
        }
