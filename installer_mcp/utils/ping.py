"""Host reachability probes.

Fail-closed: every error is reported as "offline".
"""

import asyncio
import logging
import sys

logger = logging.getLogger(__name__)


def _ping_command(address: str, timeout: float) -> list[str]:
    if sys.platform == "win32":
        return ["ping", "-n", "1", "-w", str(int(timeout * 1000)), address]
    return ["ping", "-c", "1", "-W", str(max(1, int(timeout))), address]


async def is_online(address: str, timeout: float = 2.0) -> bool:
    """Send one ICMP echo request through the system ping binary.

    Args:
        address: Host name or IP address
        timeout: Seconds to wait for the reply

    Returns:
        True if the host answered, False otherwise.
    """
    if address.startswith("-"):
        # Would be parsed as a ping option
        logger.debug("Refusing to ping %r", address)
        return False

    try:
        proc = await asyncio.create_subprocess_exec(
            *_ping_command(address, timeout),
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as e:
        logger.debug("Cannot run ping for %s: %s", address, e)
        return False

    try:
        returncode = await asyncio.wait_for(proc.wait(), timeout=timeout + 1)
    except TimeoutError:
        proc.kill()
        await proc.wait()
        return False
    return returncode == 0


async def check_hosts_online(
    addresses: list[str],
    timeout: float = 2.0,
) -> dict[str, bool]:
    """Ping multiple hosts concurrently.

    Args:
        addresses: Host names or IP addresses.
        timeout: Reply timeout per host.

    Returns:
        Dict of {address: is_online}.
    """
    if not addresses:
        return {}

    results = await asyncio.gather(*(is_online(a, timeout) for a in addresses))
    return dict(zip(addresses, results))


async def check_winrm_listener(
    target: str,
    port: int | None = None,
    timeout: float | None = None,
) -> bool:
    """Check whether the target's WinRM listener accepts TCP connections.

    Args:
        target: Computer name or address.
        port: Listener port; defaults to INSTALLER_WINRM_PORT.
        timeout: Connect timeout; defaults to INSTALLER_PING_TIMEOUT.

    Returns:
        True if the connection was accepted, False otherwise.
    """
    if port is None or timeout is None:
        from installer_mcp.services.state import get_settings

        settings = get_settings()
        port = settings.winrm_port if port is None else port
        timeout = settings.ping_timeout if timeout is None else timeout

    connect = asyncio.open_connection(target, port)
    try:
        _, writer = await asyncio.wait_for(connect, timeout=timeout)
    except (TimeoutError, OSError) as e:
        logger.debug("WinRM listener %s:%d not reachable: %s", target, port, e)
        return False

    writer.close()
    await writer.wait_closed()
    return True
