"""
Unit tests for FastAPI application lifespan management.
"""

from unittest.mock import AsyncMock, patch

from fastapi import FastAPI

from corporate_advisor.server.main import lifespan


class TestLifespan:
    async def test_startup_initializes_database(self):
        with patch("corporate_advisor.server.main.init_db", new_callable=AsyncMock) as mock_init:
            async with lifespan(FastAPI()):
                mock_init.assert_awaited_once()

    async def test_startup_failure_keeps_server_running(self):
        with (
            patch("corporate_advisor.server.main.init_db", new_callable=AsyncMock) as mock_init,
            patch("corporate_advisor.server.main.logger") as mock_logger,
        ):
            mock_init.side_effect = ConnectionError("database unreachable")

            async with lifespan(FastAPI()):
                pass

        mock_logger.error.assert_called_once()
        assert "database unreachable" in mock_logger.error.call_args.args[0]

    async def test_shutdown_is_logged(self):
        with (
            patch("corporate_advisor.server.main.init_db", new_callable=AsyncMock),
            patch("corporate_advisor.server.main.logger") as mock_logger,
        ):
            async with lifespan(FastAPI()):
                pass

        messages = [call.args[0] for call in mock_logger.info.call_args_list]
        assert any("Shutting down" in message for message in messages)
