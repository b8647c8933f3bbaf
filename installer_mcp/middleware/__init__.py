"""installer_mcp middleware components."""

from installer_mcp.middleware.base import InstallerMiddleware
from installer_mcp.middleware.errors import ErrorHandlingMiddleware
from installer_mcp.middleware.logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "InstallerMiddleware",
    "LoggingMiddleware",
]
