"""Unit tests for request size limit middleware."""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import Request
from starlette.datastructures import Headers

from wealthgrid.middleware.request_size_limit import RequestSizeLimitMiddleware


@pytest.mark.unit
class TestRequestSizeLimitMiddleware:
    """Test request size limit middleware."""

    @pytest.fixture
    def middleware(self):
        """Create middleware instance with default 10MB limit."""
        app = Mock()
        return RequestSizeLimitMiddleware(app)

    @pytest.fixture
    def small_middleware(self):
        """Create middleware instance with a 1KB limit."""
        app = Mock()
        return RequestSizeLimitMiddleware(app, max_request_size=1024)

    @pytest.fixture
    def mock_call_next(self):
        """Create mock call_next."""
        async def call_next(request):
            response = Mock()
            response.status_code = 200
            return response

        return call_next

    def _request(self, method: str = "GET", headers: dict = None, body: bytes = b""):
        request = Mock(spec=Request)
        request.method = method
        request.headers = Headers(headers or {})
        request.body = AsyncMock(return_value=body)
        return request

    @pytest.mark.asyncio
    async def test_allows_requests_without_content_length(self, middleware, mock_call_next):
        """Should allow requests without Content-Length header."""
        response = await middleware.dispatch(self._request(), mock_call_next)
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_allows_requests_at_size_limit(self, middleware, mock_call_next):
        """Should allow requests exactly at the size limit."""
        request = self._request(headers={"content-length": str(10 * 1024 * 1024)})
        response = await middleware.dispatch(request, mock_call_next)
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_rejects_oversized_content_length(self, middleware, mock_call_next):
        """Should reject requests whose Content-Length exceeds the limit."""
        request = self._request(headers={"content-length": str(10 * 1024 * 1024 + 1)})
        response = await middleware.dispatch(request, mock_call_next)

        assert response.status_code == 413
        assert b"10.0MB" in response.body

    @pytest.mark.asyncio
    async def test_rejects_oversized_body_without_header(self, small_middleware, mock_call_next):
        """Should check the actual body for POST requests."""
        request = self._request(method="POST", body=b"x" * 2048)
        response = await small_middleware.dispatch(request, mock_call_next)
        assert response.status_code == 413

    @pytest.mark.asyncio
    async def test_allows_small_post_body(self, small_middleware, mock_call_next):
        request = self._request(method="POST", headers={"content-length": "10"}, body=b"{}")
        response = await small_middleware.dispatch(request, mock_call_next)
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_ignores_malformed_content_length(self, middleware, mock_call_next):
        request = self._request(headers={"content-length": "abc"})
        response = await middleware.dispatch(request, mock_call_next)
        assert response.status_code == 200
