"""Error reporting middleware."""

import logging
import traceback
from collections import Counter
from collections.abc import Callable
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from installer_mcp.middleware.base import InstallerMiddleware

ErrorCallback = Callable[[Exception, MiddlewareContext], None]


class ErrorHandlingMiddleware(InstallerMiddleware):
    """Report unexpected exceptions and re-raise them unchanged.

    Services fold remote failures into result records, so an exception
    reaching this layer means a malformed request or a bug. Each one is
    logged, counted by type and handed to the optional callback.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_traceback: bool = False,
        error_callback: ErrorCallback | None = None,
    ) -> None:
        """Initialize error handling middleware.

        Args:
            logger: Optional custom logger.
            include_traceback: Append the formatted traceback to the log line.
            error_callback: Called with (exception, context) for every error.
        """
        super().__init__(logger=logger)
        self.include_traceback = include_traceback
        self.error_callback = error_callback
        self._counts: Counter[str] = Counter()

    def get_error_stats(self) -> dict[str, int]:
        """Errors seen so far, keyed by exception type name."""
        return dict(self._counts)

    def reset_stats(self) -> None:
        self._counts.clear()

    def _report(self, error: Exception, context: MiddlewareContext) -> None:
        error_type = type(error).__name__
        self._counts[error_type] += 1

        message = "Error in %s: %s: %s"
        args: list[Any] = [context.method, error_type, error]
        if self.include_traceback:
            message += "\n%s"
            args.append(traceback.format_exc())
        self.logger.error(message, *args)

        if self.error_callback is None:
            return
        try:
            self.error_callback(error, context)
        except Exception as callback_error:
            self.logger.warning("Error callback failed: %s", callback_error)

    async def on_message(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        try:
            return await call_next(context)
        except Exception as e:
            self._report(e, context)
            raise
