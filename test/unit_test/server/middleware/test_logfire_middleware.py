"""
Unit tests for the Logfire request middleware.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Request
from starlette.responses import Response

from corporate_advisor.server.middleware.logfire_middleware import LogfireMiddleware

MODULE = "corporate_advisor.server.middleware.logfire_middleware"


@pytest.fixture
def mock_request():
    request = AsyncMock(spec=Request)
    request.method = "POST"
    request.url.path = "/api/v1/projects/p1/analyze"
    request.state = MagicMock()
    return request


@pytest.fixture
def middleware():
    return LogfireMiddleware(app=AsyncMock())


def _clock(*values):
    clock = MagicMock()
    clock.time.side_effect = list(values)
    return clock


class TestLogfireMiddlewareDispatch:
    async def test_successful_request(self, middleware, mock_request):
        async def call_next(request):
            return Response(content="ok", status_code=200)

        with patch(f"{MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(mock_request, call_next)

        assert response.status_code == 200
        assert "X-Process-Time" in response.headers
        kwargs = mock_log.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["path"] == "/api/v1/projects/p1/analyze"
        assert kwargs["status_code"] == 200

    async def test_duration_and_start_time(self, middleware, mock_request):
        async def call_next(request):
            return Response(status_code=201)

        with patch(f"{MODULE}.time", _clock(100.0, 100.25)), patch(f"{MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(mock_request, call_next)

        assert mock_log.call_args.kwargs["duration_ms"] == pytest.approx(250.0)
        assert float(response.headers["X-Process-Time"]) == pytest.approx(250.0)
        assert mock_request.state.start_time == 100.0

    async def test_slow_request_warning(self, middleware, mock_request):
        async def call_next(request):
            return Response(status_code=200)

        with (
            patch(f"{MODULE}.time", _clock(100.0, 102.0)),
            patch(f"{MODULE}.log_api_request"),
            patch(f"{MODULE}.logger") as mock_logger,
        ):
            await middleware.dispatch(mock_request, call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args.args[0]

    async def test_fast_request_has_no_warning(self, middleware, mock_request):
        async def call_next(request):
            return Response(status_code=200)

        with (
            patch(f"{MODULE}.time", _clock(100.0, 100.1)),
            patch(f"{MODULE}.log_api_request"),
            patch(f"{MODULE}.logger") as mock_logger,
        ):
            await middleware.dispatch(mock_request, call_next)

        mock_logger.warning.assert_not_called()

    async def test_exception_is_logged_and_reraised(self, middleware, mock_request):
        async def call_next(request):
            raise RuntimeError("downstream failure")

        with patch(f"{MODULE}.log_api_request") as mock_log, patch(f"{MODULE}.logger") as mock_logger:
            with pytest.raises(RuntimeError):
                await middleware.dispatch(mock_request, call_next)

        assert mock_log.call_args.kwargs["status_code"] == 500
        assert mock_logger.error.call_args.kwargs["extra"]["error"] == "downstream failure"
