"""Tests for logging middleware."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from installer_mcp.middleware.logging import (
    LoggingMiddleware,
    describe_arguments,
    summarize_result,
)


@pytest.fixture
def mock_tool_context() -> MagicMock:
    """Create a mock middleware context for tool calls."""
    context = MagicMock()
    context.method = "tools/call"
    context.source = "client"
    context.message = MagicMock()
    context.message.name = "remote_install"
    context.message.arguments = {"targets": ["pc01"], "kind": "msi"}
    return context


@pytest.fixture
def mock_generic_context() -> MagicMock:
    context = MagicMock()
    context.method = "initialize"
    context.message = MagicMock()
    return context


@pytest.mark.asyncio
async def test_logs_tool_call(mock_tool_context: MagicMock) -> None:
    """Tool calls are logged on entry and on completion."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(return_value="report")

    result = await middleware.on_call_tool(mock_tool_context, call_next)

    assert result == "report"
    all_info_calls = str(mock_logger.info.call_args_list)
    all_log_calls = str(mock_logger.log.call_args_list)
    assert ">>> TOOL" in all_info_calls
    assert "remote_install" in all_info_calls
    assert "kind='msi'" in all_info_calls
    assert "<<< TOOL" in all_log_calls


@pytest.mark.asyncio
async def test_slow_tool_logs_warning(mock_tool_context: MagicMock) -> None:
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger, slow_threshold_ms=5)

    with patch(
        "installer_mcp.middleware.logging.time.perf_counter", side_effect=[0.0, 1.0]
    ):
        await middleware.on_call_tool(mock_tool_context, AsyncMock(return_value="ok"))

    level, *args = mock_logger.log.call_args.args
    assert level == logging.WARNING
    assert "SLOW!" in args[-1]


@pytest.mark.asyncio
async def test_tool_error_is_logged_and_raised(mock_tool_context: MagicMock) -> None:
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)

    with pytest.raises(RuntimeError):
        await middleware.on_call_tool(
            mock_tool_context, AsyncMock(side_effect=RuntimeError("boom"))
        )

    assert "!!! TOOL" in str(mock_logger.error.call_args)


@pytest.mark.asyncio
async def test_payloads_logged_when_enabled(mock_tool_context: MagicMock) -> None:
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger, include_payloads=True)

    await middleware.on_call_tool(mock_tool_context, AsyncMock(return_value="ok"))

    debug_calls = str(mock_logger.debug.call_args_list)
    assert "Args:" in debug_calls
    assert "Result:" in debug_calls


@pytest.mark.asyncio
async def test_list_tools_counts(mock_generic_context: MagicMock) -> None:
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)

    await middleware.on_list_tools(
        mock_generic_context, AsyncMock(return_value=["a", "b", "c"])
    )

    assert "3" in str(mock_logger.info.call_args_list[-1])


@pytest.mark.asyncio
async def test_on_message_skips_handled_methods(mock_tool_context: MagicMock) -> None:
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)

    await middleware.on_message(mock_tool_context, AsyncMock(return_value="ok"))

    mock_logger.debug.assert_not_called()


@pytest.mark.asyncio
async def test_on_message_logs_generic(mock_generic_context: MagicMock) -> None:
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)

    await middleware.on_message(mock_generic_context, AsyncMock(return_value=None))

    assert ">>> MCP" in str(mock_logger.debug.call_args_list)


def test_truncate_long_payload() -> None:
    middleware = LoggingMiddleware(max_payload_length=10)

    assert middleware._truncate({"key": "x" * 50}).endswith("... [truncated]")


def test_summarize_result() -> None:
    assert summarize_result(None) == "null"
    assert summarize_result("a\nb") == "3 chars, 2 lines"
    assert summarize_result("ok") == "2 chars"
    assert summarize_result([1, 2]) == "2 items"
    assert summarize_result({"a": 1}) == "1 keys"


def test_summarize_tool_report_uses_summary_line() -> None:
    report = "═══ pc01 ═══\ninstalled\n\n─── 4/5 targets succeeded ───"

    assert summarize_result(report) == "4/5 targets succeeded"


def test_describe_arguments_counts_long_lists() -> None:
    text = describe_arguments({"targets": ["pc01", "pc02", "pc03", "pc04", "pc05"]})

    assert text == "(targets=['pc01', 'pc02', 'pc03', +2])"


def test_describe_arguments_cuts_long_strings() -> None:
    text = describe_arguments({"arguments": "x" * 80})

    assert text == f"(arguments={'x' * 50 + '...'!r})"
    assert describe_arguments(None) == "()"
