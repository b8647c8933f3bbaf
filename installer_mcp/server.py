"""installer_mcp FastMCP server.

This is a thin wrapper that wires together the MCP server with its tools.
All business logic is delegated to the tools/ and services/ modules.
"""

import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from installer_mcp.dependencies import Dependencies
from installer_mcp.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from installer_mcp.services import get_settings, set_session_factory, set_settings
from installer_mcp.tools import remote_copy, remote_install, target_status
from installer_mcp.utils.console import MCPRequestFormatter

NOISY_LOGGERS = [
    "pypsrp",
    "spnego",
    "requests_credssp",
    "urllib3",
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "httpcore",
    "fastmcp",
    "starlette",
    "anyio",
]


def _configure_logging() -> None:
    """Configure colorful logging for the installer_mcp package.

    Called at module load time so logging is ready before any loggers are
    used, regardless of how the server is started.
    """
    log_level = os.getenv("INSTALLER_LOG_LEVEL", "INFO").upper()
    use_colors = os.getenv("INSTALLER_LOG_COLORS", "true").lower() != "false"

    if not sys.stderr.isatty():
        use_colors = False

    package_logger = logging.getLogger("installer_mcp")
    package_logger.setLevel(getattr(logging, log_level, logging.INFO))

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(MCPRequestFormatter(use_colors=use_colors))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    for noisy_logger in NOISY_LOGGERS:
        lg = logging.getLogger(noisy_logger)
        lg.setLevel(logging.WARNING)
        lg.handlers = []
        lg.propagate = False

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(logging.WARNING)


_configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Build the dependency container and publish it to the tools.

    Args:
        server: The FastMCP server instance

    Yields:
        Dict with the effective transport settings
    """
    logger.info("installer_mcp server starting up")

    deps = Dependencies.from_settings(get_settings())
    server.deps = deps
    set_settings(deps.settings)
    set_session_factory(deps.session_factory)

    settings = deps.settings
    logger.info(
        "WinRM endpoint: port=%d, auth=%s, configuration=%s",
        settings.winrm_port,
        settings.winrm_auth,
        settings.winrm_configuration_name,
    )
    if settings.directory_server:
        logger.info("Directory lookups via %s", settings.directory_server)
    logger.info("installer_mcp server ready to accept connections")

    try:
        yield {
            "winrm_port": settings.winrm_port,
            "max_concurrency": settings.max_concurrency,
        }
    finally:
        logger.info("installer_mcp server shutting down")


def configure_middleware(server: FastMCP) -> None:
    """Configure middleware stack for the server.

    Adds middleware in order: ErrorHandling -> Logging (with integrated timing)

    Environment variables:
        INSTALLER_LOG_PAYLOADS: Set to "true" to log request/response payloads
        INSTALLER_SLOW_THRESHOLD_MS: Threshold for slow request warnings
        INSTALLER_INCLUDE_TRACEBACK: Set to "true" to include tracebacks

    Args:
        server: The FastMCP server to configure.
    """
    settings = get_settings()

    # First added = innermost
    server.add_middleware(
        ErrorHandlingMiddleware(include_traceback=settings.include_traceback)
    )
    server.add_middleware(
        LoggingMiddleware(
            include_payloads=settings.log_payloads,
            slow_threshold_ms=settings.slow_threshold_ms,
        )
    )


def create_server() -> FastMCP:
    """Create and configure the MCP server with middleware and tools.

    Returns:
        Configured FastMCP server instance
    """
    server = FastMCP(
        "installer_mcp",
        lifespan=app_lifespan,
    )

    configure_middleware(server)

    # Tools return plain text reports
    server.tool(output_schema=None)(remote_install)
    server.tool(output_schema=None)(remote_copy)
    server.tool(output_schema=None)(target_status)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Health check from %s", client_host)
        return PlainTextResponse("OK")

    return server


# Default server instance
mcp = create_server()
