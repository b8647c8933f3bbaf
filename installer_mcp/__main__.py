"""Run the installer_mcp server: ``python -m installer_mcp``."""

import logging

from installer_mcp.server import mcp  # Importing the server configures logging
from installer_mcp.services import get_settings

logger = logging.getLogger(__name__)


def run_server() -> None:
    """Serve over the transport selected by INSTALLER_TRANSPORT."""
    settings = get_settings()
    logger.info(
        "Starting installer_mcp (transport=%s, log_level=%s, max_concurrency=%d)",
        settings.transport,
        settings.log_level,
        settings.max_concurrency,
    )

    if settings.transport == "stdio":
        mcp.run(transport="stdio")
        return

    logger.info("Listening on %s:%d", settings.http_host, settings.http_port)
    mcp.run(transport="http", host=settings.http_host, port=settings.http_port)


if __name__ == "__main__":
    run_server()
