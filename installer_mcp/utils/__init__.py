"""Utilities for installer_mcp."""

from installer_mcp.utils.console import ColorfulFormatter, MCPRequestFormatter
from installer_mcp.utils.directory import identity_exists
from installer_mcp.utils.hostname import resolve_hostname
from installer_mcp.utils.ping import check_hosts_online, check_winrm_listener, is_online

__all__ = [
    "check_hosts_online",
    "check_winrm_listener",
    "ColorfulFormatter",
    "identity_exists",
    "is_online",
    "MCPRequestFormatter",
    "resolve_hostname",
]
