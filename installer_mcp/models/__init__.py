"""Data models for installer_mcp."""

from installer_mcp.models.copy import CopyResult
from installer_mcp.models.install import InstallKind, RemoteInstallResult
from installer_mcp.models.session import InvocationOutput
from installer_mcp.models.target import WinRMTarget

__all__ = [
    "CopyResult",
    "InstallKind",
    "InvocationOutput",
    "RemoteInstallResult",
    "WinRMTarget",
]
