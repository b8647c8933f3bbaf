"""Shared base for installer_mcp middleware."""

import logging

from fastmcp.server.middleware import Middleware

MIDDLEWARE_LOGGER = "installer_mcp.middleware"


class InstallerMiddleware(Middleware):
    """Middleware with an injectable logger.

    Tests pass a mock logger; the server uses the package middleware logger
    so the console formatter colors all middleware lines alike.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(MIDDLEWARE_LOGGER)
