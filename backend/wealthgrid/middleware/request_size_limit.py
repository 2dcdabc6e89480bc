"""Middleware to limit request body size."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Middleware to limit request body size.

    Asset histories are posted in full, so the limit bounds how much
    snapshot data a single request may carry.
    """

    def __init__(self, app, max_request_size: int = 10 * 1024 * 1024):
        """
        Initialize middleware.

        Args:
            app: FastAPI application
            max_request_size: Maximum request size in bytes (default: 10MB)
        """
        super().__init__(app)
        self.max_request_size = max_request_size

    def _too_large(self) -> JSONResponse:
        max_mb = f"{self.max_request_size / (1024 * 1024):.1f}MB"
        return JSONResponse(
            status_code=413,
            content={"detail": f"Request body too large. Maximum size is {max_mb}"},
        )

    async def dispatch(self, request: Request, call_next):
        """Check request size before processing."""
        # Fast path: Content-Length header
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > self.max_request_size:
                return self._too_large()

        # Content-Length can be omitted with chunked encoding
        if request.method in ("POST", "PUT", "PATCH"):
            body = await request.body()
            if len(body) > self.max_request_size:
                return self._too_large()

        response: Response = await call_next(request)
        return response
