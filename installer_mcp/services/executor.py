"""Remote script executor.

One call runs the whole lifecycle against a single target:

    open session -> admin probe -> dispatch -> timeout/cancel race -> result

Every failure is recorded on the returned RemoteInstallResult; nothing is
raised to the caller except asyncio.CancelledError when the calling task
itself is cancelled.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from installer_mcp.models import InvocationOutput, RemoteInstallResult
from installer_mcp.protocols import RemoteSession, SessionFactory
from installer_mcp.services.errors import SessionOpenError
from installer_mcp.services.privilege import check_admin
from installer_mcp.services.session import format_record

logger = logging.getLogger(__name__)

SESSION_FAILED_MESSAGE = (
    "PSRemoting is not enabled or the remote computer is unreachable: {error}"
)
NOT_ADMIN_MESSAGE = "The current user is not an administrator on the remote computer."
TIMED_OUT_MESSAGE = "Operation timed out."
CANCELLED_MESSAGE = "Operation cancelled."

SECONDS_PER_MINUTE = 60


async def execute_remote_script(
    target: str,
    script: str,
    timeout_minutes: float = 0,
    cancel_event: asyncio.Event | None = None,
    session_factory: SessionFactory | None = None,
) -> RemoteInstallResult:
    """Run a script on a remote target and collect a structured result.

    Args:
        target: Computer name or address of the target
        script: PowerShell script text to run
        timeout_minutes: Budget for the script; 0 or less waits forever
        cancel_event: Optional cancellation signal for this call
        session_factory: Creates the session for the target. Defaults to
            the configured pypsrp factory

    Returns:
        RemoteInstallResult describing the terminal state reached
    """
    if session_factory is None:
        from installer_mcp.services.state import get_session_factory

        session_factory = get_session_factory()

    result = RemoteInstallResult(computer_name=target)
    session = session_factory(target)

    try:
        await session.open()
    except Exception as e:
        error = e.original_error if isinstance(e, SessionOpenError) else e
        logger.warning("Session to %s failed to open: %s", target, error)
        result.standard_error = SESSION_FAILED_MESSAGE.format(error=error)
        return result

    result.is_remoting_enabled = True
    try:
        if not await check_admin(session):
            logger.warning("Caller is not an administrator on %s", target)
            result.standard_error = NOT_ADMIN_MESSAGE
            return result

        result.is_admin = True
        await _dispatch(session, script, timeout_minutes, cancel_event, result)
        return result
    finally:
        await _release(session, session.close, "close")


async def _dispatch(
    session: RemoteSession,
    script: str,
    timeout_minutes: float,
    cancel_event: asyncio.Event | None,
    result: RemoteInstallResult,
) -> None:
    """Race the invocation against the timer and the cancellation signal."""
    target = session.target

    if cancel_event is not None and cancel_event.is_set():
        logger.info("Execution on %s cancelled before dispatch", target)
        result.standard_error = CANCELLED_MESSAGE
        return

    logger.info(
        "Dispatching script on %s (timeout=%s)",
        target,
        f"{timeout_minutes}m" if timeout_minutes > 0 else "none",
    )
    invoke_task = asyncio.create_task(session.invoke(script))
    invoke_task.add_done_callback(_consume_outcome)

    cancel_task: asyncio.Task[Any] | None = None
    timer_task: asyncio.Task[Any] | None = None
    if cancel_event is not None:
        cancel_task = asyncio.create_task(cancel_event.wait())
    if timeout_minutes > 0:
        timer_task = asyncio.create_task(
            asyncio.sleep(timeout_minutes * SECONDS_PER_MINUTE)
        )
    watchers = [task for task in (cancel_task, timer_task) if task is not None]

    try:
        done, _ = await asyncio.wait(
            {invoke_task, *watchers},
            return_when=asyncio.FIRST_COMPLETED,
        )
    except asyncio.CancelledError:
        logger.info("Caller cancelled execution on %s, stopping invocation", target)
        await _release(session, session.stop, "stop")
        invoke_task.cancel()
        raise
    finally:
        # Gate the timer on cancellation and on completion
        for task in watchers:
            task.cancel()

    if cancel_task is not None and cancel_task in done:
        logger.info("Execution on %s cancelled", target)
        result.standard_error = CANCELLED_MESSAGE
        await _abandon(session, invoke_task)
        return

    if invoke_task not in done:
        logger.warning(
            "Execution on %s timed out after %s minute(s)", target, timeout_minutes
        )
        result.standard_error = TIMED_OUT_MESSAGE
        await _abandon(session, invoke_task)
        return

    _collect(invoke_task, result)


async def _abandon(session: RemoteSession, invoke_task: asyncio.Task[Any]) -> None:
    """Stop the losing invocation; its outcome is discarded."""
    await _release(session, session.stop, "stop")
    invoke_task.cancel()


async def _release(
    session: RemoteSession, step: Callable[[], Awaitable[None]], action: str
) -> None:
    """Run a stop or close step; a failure there never replaces the result."""
    try:
        await step()
    except Exception as e:
        logger.warning("Session %s on %s failed: %s", action, session.target, e)


def _consume_outcome(task: asyncio.Task[Any]) -> None:
    # Abandoned invocations may still fail; retrieve the error so it is not
    # reported as never retrieved.
    if not task.cancelled():
        task.exception()


def _collect(invoke_task: asyncio.Task[InvocationOutput], result: RemoteInstallResult) -> None:
    """Drain a completed invocation into the result record."""
    target = result.computer_name
    try:
        output = invoke_task.result()
    except Exception as e:
        logger.warning("Invocation on %s failed: %s", target, e)
        result.standard_error = str(e)
        return

    result.standard_output = "\n".join(format_record(item) for item in output.output)
    if output.errors:
        result.standard_error = "\n".join(format_record(err) for err in output.errors)

    exit_code = extract_exit_code(output.output)
    if exit_code is not None:
        result.exit_code = exit_code

    logger.info(
        "Execution on %s completed (records=%d, errors=%d, exit_code=%d)",
        target,
        len(output.output),
        len(output.errors),
        result.exit_code,
    )


def extract_exit_code(records: list[Any]) -> int | None:
    """Find the process exit code in the pipeline output.

    ``Start-Process -Wait -PassThru`` emits the finished Process object; its
    ``ExitCode`` property carries the real exit status. The last record with
    an integer ExitCode wins.

    Returns:
        Exit code, or None when no record carries one
    """
    for item in reversed(records):
        for attr in ("adapted_properties", "extended_properties"):
            props = getattr(item, attr, None)
            if not isinstance(props, dict):
                continue
            value = props.get("ExitCode")
            if isinstance(value, int) and not isinstance(value, bool):
                return value
    return None
