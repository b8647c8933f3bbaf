"""Request logging middleware for MCP tool calls."""

import json
import logging
import re
import time
from collections.abc import Mapping
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from installer_mcp.middleware.base import InstallerMiddleware

# on_message leaves these to their dedicated hooks
HANDLED_METHODS = frozenset({"tools/call", "tools/list"})

# Matches the closing line of the tool reports
REPORT_SUMMARY = re.compile(r"(\d+/\d+ targets succeeded)")

MAX_LISTED_ITEMS = 3
MAX_ARG_CHARS = 50


def describe_arguments(args: Mapping[str, Any] | None) -> str:
    """Render tool arguments compactly: long strings cut, long lists counted."""
    if not args:
        return "()"
    parts = []
    for key, value in args.items():
        if isinstance(value, str) and len(value) > MAX_ARG_CHARS:
            value = value[:MAX_ARG_CHARS] + "..."
        elif isinstance(value, (list, tuple)) and len(value) > MAX_LISTED_ITEMS:
            shown = ", ".join(repr(v) for v in value[:MAX_LISTED_ITEMS])
            parts.append(f"{key}=[{shown}, +{len(value) - MAX_LISTED_ITEMS}]")
            continue
        parts.append(f"{key}={value!r}")
    return f"({', '.join(parts)})"


def summarize_result(result: Any) -> str:
    """One-line description of a tool result for the completion log."""
    if result is None:
        return "null"
    if isinstance(result, str):
        match = REPORT_SUMMARY.search(result)
        if match:
            return match.group(1)
        lines = result.count("\n") + 1
        return f"{len(result)} chars" + (f", {lines} lines" if lines > 1 else "")
    if isinstance(result, (list, tuple)):
        return f"{len(result)} items"
    if isinstance(result, dict):
        return f"{len(result)} keys"
    content = getattr(result, "content", None)
    if isinstance(content, (list, tuple)):
        return f"{len(content)} content item(s)"
    return type(result).__name__


class LoggingMiddleware(InstallerMiddleware):
    """Log every tool call with its arguments, outcome and duration.

    Remote installs routinely take minutes, so only calls above
    ``slow_threshold_ms`` are raised to WARNING with a SLOW marker.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_payloads: bool = False,
        max_payload_length: int = 1000,
        slow_threshold_ms: float = 1000.0,
    ) -> None:
        """Initialize logging middleware.

        Args:
            logger: Optional custom logger.
            include_payloads: Also log full arguments and results at DEBUG.
            max_payload_length: Payload characters kept before truncation.
            slow_threshold_ms: Duration above which a call is flagged SLOW.
        """
        super().__init__(logger=logger)
        self.include_payloads = include_payloads
        self.max_payload_length = max_payload_length
        self.slow_threshold_ms = slow_threshold_ms

    def _truncate(self, data: Any) -> str:
        try:
            text = json.dumps(data, default=str)
        except (TypeError, ValueError):
            text = str(data)
        if len(text) <= self.max_payload_length:
            return text
        return text[: self.max_payload_length] + "... [truncated]"

    def _is_slow(self, elapsed_ms: float) -> bool:
        return elapsed_ms >= self.slow_threshold_ms

    def _format_duration(self, elapsed_ms: float) -> str:
        suffix = " SLOW!" if self._is_slow(elapsed_ms) else ""
        return f"{elapsed_ms:.1f}ms{suffix}"

    async def _timed(
        self,
        label: str,
        context: MiddlewareContext,
        call_next: Any,
    ) -> tuple[Any, float]:
        """Run the next handler, logging a failure line if it raises."""
        start = time.perf_counter()
        try:
            result = await call_next(context)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.logger.error(
                "!!! %s -> %s: %s [%s]",
                label,
                type(e).__name__,
                e,
                self._format_duration(elapsed_ms),
            )
            raise
        return result, (time.perf_counter() - start) * 1000

    async def on_call_tool(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        tool_name = getattr(context.message, "name", "unknown")
        args = getattr(context.message, "arguments", None)

        self.logger.info(">>> TOOL: %s%s", tool_name, describe_arguments(args))
        if self.include_payloads and args:
            self.logger.debug("    Args: %s", self._truncate(args))

        result, elapsed_ms = await self._timed(f"TOOL: {tool_name}", context, call_next)

        self.logger.log(
            logging.WARNING if self._is_slow(elapsed_ms) else logging.INFO,
            "<<< TOOL: %s -> %s [%s]",
            tool_name,
            summarize_result(result),
            self._format_duration(elapsed_ms),
        )
        if self.include_payloads and result is not None:
            self.logger.debug("    Result: %s", self._truncate(result))
        return result

    async def on_list_tools(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        self.logger.info(">>> LIST TOOLS")
        result, elapsed_ms = await self._timed("LIST TOOLS", context, call_next)

        tools = getattr(result, "tools", result)
        count = len(tools) if isinstance(tools, (list, tuple, dict)) else "?"
        self.logger.info(
            "<<< LIST TOOLS -> %s tool(s) [%s]", count, self._format_duration(elapsed_ms)
        )
        return result

    async def on_message(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Log protocol traffic other than tool calls at DEBUG."""
        method = context.method
        if method in HANDLED_METHODS:
            return await call_next(context)

        self.logger.debug(">>> MCP: %s", method)
        result, elapsed_ms = await self._timed(f"MCP: {method}", context, call_next)
        self.logger.debug("<<< MCP: %s [%s]", method, self._format_duration(elapsed_ms))
        return result
