"""Tests for host reachability probes."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from installer_mcp.config import Settings
from installer_mcp.services import reset_state, set_settings
from installer_mcp.utils.ping import (
    _ping_command,
    check_hosts_online,
    check_winrm_listener,
    is_online,
)


def make_process(returncode: int) -> MagicMock:
    proc = MagicMock()
    proc.wait = AsyncMock(return_value=returncode)
    return proc


def test_ping_command_windows() -> None:
    with patch("installer_mcp.utils.ping.sys.platform", "win32"):
        assert _ping_command("pc01", 2.0) == ["ping", "-n", "1", "-w", "2000", "pc01"]


def test_ping_command_posix() -> None:
    with patch("installer_mcp.utils.ping.sys.platform", "linux"):
        assert _ping_command("pc01", 0.5) == ["ping", "-c", "1", "-W", "1", "pc01"]


@pytest.mark.asyncio
async def test_is_online_reply() -> None:
    """Exit status 0 means the host answered."""
    with patch(
        "asyncio.create_subprocess_exec",
        new_callable=AsyncMock,
        return_value=make_process(0),
    ) as mock_exec:
        assert await is_online("192.168.1.10") is True

    args = mock_exec.call_args.args
    assert args[0] == "ping"
    assert args[-1] == "192.168.1.10"


@pytest.mark.asyncio
async def test_is_online_no_reply() -> None:
    with patch(
        "asyncio.create_subprocess_exec",
        new_callable=AsyncMock,
        return_value=make_process(1),
    ):
        assert await is_online("192.168.1.10") is False


@pytest.mark.asyncio
async def test_is_online_missing_binary() -> None:
    """No ping binary is reported as offline."""
    with patch(
        "asyncio.create_subprocess_exec",
        new_callable=AsyncMock,
        side_effect=FileNotFoundError("ping"),
    ):
        assert await is_online("192.168.1.10") is False


@pytest.mark.asyncio
async def test_is_online_hung_ping_is_killed() -> None:
    proc = MagicMock()
    waits = 0

    async def wait() -> int:
        nonlocal waits
        waits += 1
        if waits == 1:
            await asyncio.sleep(10)
        return -9

    proc.wait = wait
    with patch(
        "asyncio.create_subprocess_exec", new_callable=AsyncMock, return_value=proc
    ):
        assert await is_online("192.168.1.10", timeout=0.01) is False

    proc.kill.assert_called_once()


@pytest.mark.asyncio
async def test_check_hosts_online_multiple() -> None:
    async def fake_is_online(address: str, timeout: float) -> bool:
        return address == "pc01"

    with patch("installer_mcp.utils.ping.is_online", side_effect=fake_is_online):
        results = await check_hosts_online(["pc01", "pc02"])

    assert results == {"pc01": True, "pc02": False}


@pytest.mark.asyncio
async def test_check_hosts_online_empty() -> None:
    assert await check_hosts_online([]) == {}


@pytest.mark.asyncio
@pytest.mark.parametrize("address", ["-f", "--help", "-c100"])
async def test_is_online_rejects_option_like_address(address: str) -> None:
    """An address that ping would parse as a flag is never passed to it."""
    with patch(
        "asyncio.create_subprocess_exec", new_callable=AsyncMock
    ) as mock_exec:
        assert await is_online(address) is False

    mock_exec.assert_not_called()


@pytest.mark.asyncio
async def test_winrm_listener_reachable() -> None:
    mock_writer = MagicMock()
    mock_writer.wait_closed = AsyncMock()

    with patch("asyncio.open_connection", new_callable=AsyncMock) as mock_conn:
        mock_conn.return_value = (MagicMock(), mock_writer)

        assert await check_winrm_listener("pc01", 5986, timeout=1.0) is True

    mock_conn.assert_called_once_with("pc01", 5986)
    mock_writer.close.assert_called_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [TimeoutError(), ConnectionRefusedError(), OSError()])
async def test_winrm_listener_unreachable(error: Exception) -> None:
    with patch(
        "asyncio.open_connection", new_callable=AsyncMock, side_effect=error
    ):
        assert await check_winrm_listener("pc01", 5985, timeout=1.0) is False


@pytest.mark.asyncio
async def test_winrm_listener_defaults_from_settings() -> None:
    """Port and timeout come from the configured settings when omitted."""
    reset_state()
    set_settings(Settings(winrm_port=5986, ping_timeout=0.5))
    mock_writer = MagicMock()
    mock_writer.wait_closed = AsyncMock()
    try:
        with patch(
            "asyncio.open_connection",
            new_callable=AsyncMock,
            return_value=(MagicMock(), mock_writer),
        ) as mock_conn, patch(
            "installer_mcp.utils.ping.asyncio.wait_for", wraps=asyncio.wait_for
        ) as mock_wait:
            assert await check_winrm_listener("pc01") is True
    finally:
        reset_state()

    mock_conn.assert_called_once_with("pc01", 5986)
    assert mock_wait.call_args.kwargs["timeout"] == 0.5
