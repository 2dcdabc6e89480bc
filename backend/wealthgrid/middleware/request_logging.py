"""Request/response logging middleware."""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging all API requests and responses.

    Provides:
    - Request ID tracking (echoed back as X-Request-ID)
    - Response time monitoring
    - Failed request logging
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start_time = time.time()

        method = request.method
        path = request.url.path

        logger.info(f"Request started | id={request_id} | method={method} | path={path}")

        request.state.request_id = request_id

        try:
            response = await call_next(request)
            duration_ms = int((time.time() - start_time) * 1000)

            logger.info(
                f"Request completed | "
                f"id={request_id} | "
                f"method={method} | "
                f"path={path} | "
                f"status={response.status_code} | "
                f"duration={duration_ms}ms"
            )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)

            logger.error(
                f"Request failed | "
                f"id={request_id} | "
                f"method={method} | "
                f"path={path} | "
                f"duration={duration_ms}ms | "
                f"error={type(e).__name__}: {str(e)}"
            )
            raise
