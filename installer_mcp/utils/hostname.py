"""Reverse hostname lookup."""

import asyncio
import logging
import socket

logger = logging.getLogger(__name__)


async def resolve_hostname(ip_address: str) -> str | None:
    """Resolve an IP address to its host name via reverse DNS.

    Fail-closed probe: any lookup error yields None.

    Args:
        ip_address: IPv4 or IPv6 address

    Returns:
        Host name, or None when it cannot be resolved
    """
    try:
        host_name, _, _ = await asyncio.to_thread(socket.gethostbyaddr, ip_address)
    except Exception as e:
        logger.debug("Reverse lookup of %s failed: %s", ip_address, e)
        return None
    return host_name
