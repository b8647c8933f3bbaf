"""Tests for reverse hostname lookup."""

import socket
from unittest.mock import patch

import pytest

from installer_mcp.utils.hostname import resolve_hostname


@pytest.mark.asyncio
async def test_resolves_name() -> None:
    with patch(
        "installer_mcp.utils.hostname.socket.gethostbyaddr",
        return_value=("pc01.corp.example.com", [], ["10.0.0.5"]),
    ) as mock_lookup:
        assert await resolve_hostname("10.0.0.5") == "pc01.corp.example.com"

    mock_lookup.assert_called_once_with("10.0.0.5")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [socket.herror("Unknown host"), socket.gaierror("bad address"), OSError()],
)
async def test_lookup_failure_returns_none(error: Exception) -> None:
    with patch(
        "installer_mcp.utils.hostname.socket.gethostbyaddr", side_effect=error
    ):
        assert await resolve_hostname("10.0.0.99") is None
