"""Error handler middleware returning safe 500 responses."""

import logging
from typing import Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from wealthgrid.config import settings

logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware for handling uncaught exceptions.

    - Logs the error with request context
    - Returns a generic message to clients unless DEBUG is on
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Handle request and catch any uncaught exceptions."""
        try:
            response = await call_next(request)
            return response

        except Exception as exc:
            context = {
                "method": request.method,
                "url": str(request.url),
                "client_host": request.client.host if request.client else None,
                "request_id": getattr(request.state, "request_id", None),
            }

            logger.error(
                "Unhandled %s: %s",
                type(exc).__name__,
                exc,
                exc_info=True,
                extra={"context": context},
            )

            if settings.DEBUG:
                error_detail = {
                    "error": str(exc),
                    "type": type(exc).__name__,
                    "detail": "An error occurred processing your request",
                }
            else:
                error_detail = {
                    "error": "Internal server error",
                    "detail": "An unexpected error occurred. Please try again later.",
                }

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_detail
            )
