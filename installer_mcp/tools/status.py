"""target_status tool: pre-flight probes for a list of targets."""

import asyncio
import ipaddress
import logging

from installer_mcp.services import get_settings
from installer_mcp.utils import (
    check_hosts_online,
    check_winrm_listener,
    identity_exists,
    resolve_hostname,
)

logger = logging.getLogger(__name__)


def _is_ip_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


async def _probe_target(target: str, online: bool) -> str:
    settings = get_settings()

    winrm_open = False
    if online:
        winrm_open = await check_winrm_listener(target)

    host_name: str | None = target
    if _is_ip_address(target):
        host_name = await resolve_hostname(target)

    directory = "n/a"
    if settings.directory_server:
        directory = "no"
        # Directory accounts are keyed by the short computer name
        if host_name and await identity_exists(host_name.split(".")[0]):
            directory = "yes"

    status_icon = "✓" if online and winrm_open else "✗"
    return (
        f"  [{status_icon}] {target} "
        f"online={'yes' if online else 'no'} "
        f"winrm={'open' if winrm_open else 'closed'} "
        f"name={host_name or '?'} "
        f"directory={directory}"
    )


async def target_status(targets: list[str]) -> str:
    """Check reachability of remote Windows machines before an install.

    For each target: ICMP echo, WinRM listener port, reverse DNS (for IP
    addresses) and, when INSTALLER_DIRECTORY_SERVER is set, whether a
    computer account exists in the directory.

    Args:
        targets: Computer names or addresses.

    Returns:
        One status line per target.
    """
    if not targets:
        return "Error: at least one target is required."

    settings = get_settings()
    online_status = await check_hosts_online(targets, timeout=settings.ping_timeout)

    lines = await asyncio.gather(
        *(_probe_target(t, online_status.get(t, False)) for t in targets)
    )
    return "\n".join(["Target status:", *lines])
