"""MCP tools for installer_mcp."""

from installer_mcp.tools.copy import remote_copy
from installer_mcp.tools.install import remote_install
from installer_mcp.tools.status import target_status

__all__ = ["remote_copy", "remote_install", "target_status"]
