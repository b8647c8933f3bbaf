"""Tests for main entry point."""

from unittest.mock import MagicMock, patch


class TestMain:
    """Tests for __main__ module."""

    def test_runs_with_http_transport_by_default(self) -> None:
        """Server runs with HTTP transport by default."""
        mock_mcp = MagicMock()
        mock_settings = MagicMock()
        mock_settings.transport = "http"
        mock_settings.log_level = "INFO"
        mock_settings.max_concurrency = 10
        mock_settings.http_host = "127.0.0.1"
        mock_settings.http_port = 8000

        with patch("installer_mcp.__main__.mcp", mock_mcp), \
             patch("installer_mcp.__main__.get_settings", return_value=mock_settings):
            from installer_mcp.__main__ import run_server
            run_server()

        mock_mcp.run.assert_called_once_with(
            transport="http",
            host="127.0.0.1",
            port=8000,
        )

    def test_runs_with_stdio_when_configured(self) -> None:
        """Server runs with STDIO transport when configured."""
        mock_mcp = MagicMock()
        mock_settings = MagicMock()
        mock_settings.transport = "stdio"
        mock_settings.log_level = "INFO"
        mock_settings.max_concurrency = 10

        with patch("installer_mcp.__main__.mcp", mock_mcp), \
             patch("installer_mcp.__main__.get_settings", return_value=mock_settings):
            from installer_mcp.__main__ import run_server
            run_server()

        mock_mcp.run.assert_called_once_with(transport="stdio")
