"""Public call surface: one coroutine per install kind.

Each takes the target, the kind-specific path/arguments, a timeout in
minutes (0 means no timeout) and an optional cancellation event, and
returns a RemoteInstallResult. None of them raise.
"""

import asyncio
import logging

from installer_mcp.models import InstallKind, RemoteInstallResult
from installer_mcp.protocols import SessionFactory
from installer_mcp.services.commands import build_command
from installer_mcp.services.errors import UnsafeArgumentError
from installer_mcp.services.executor import execute_remote_script

logger = logging.getLogger(__name__)


async def run_install(
    target: str,
    kind: InstallKind,
    path: str = "",
    arguments: str = "",
    timeout_minutes: float = 0,
    cancel_event: asyncio.Event | None = None,
    session_factory: SessionFactory | None = None,
) -> RemoteInstallResult:
    """Build the command for ``kind`` and execute it on one target."""
    try:
        command = build_command(kind, path, arguments)
    except UnsafeArgumentError as e:
        logger.warning("Rejected %s install for %s: %s", kind.value, target, e)
        return RemoteInstallResult(computer_name=target, standard_error=str(e))

    return await execute_remote_script(
        target,
        command,
        timeout_minutes=timeout_minutes,
        cancel_event=cancel_event,
        session_factory=session_factory,
    )


async def run_msi_remotely(
    target: str,
    arguments: str,
    timeout_minutes: float = 0,
    cancel_event: asyncio.Event | None = None,
    session_factory: SessionFactory | None = None,
) -> RemoteInstallResult:
    """Run msiexec with ``arguments`` (e.g. ``/i "C:\\pkg.msi" /quiet``)."""
    return await run_install(
        target,
        InstallKind.MSI,
        arguments=arguments,
        timeout_minutes=timeout_minutes,
        cancel_event=cancel_event,
        session_factory=session_factory,
    )


async def run_executable_remotely(
    target: str,
    exe_path: str,
    arguments: str = "",
    timeout_minutes: float = 0,
    cancel_event: asyncio.Event | None = None,
    session_factory: SessionFactory | None = None,
) -> RemoteInstallResult:
    return await run_install(
        target,
        InstallKind.EXECUTABLE,
        exe_path,
        arguments,
        timeout_minutes=timeout_minutes,
        cancel_event=cancel_event,
        session_factory=session_factory,
    )


async def run_msu_remotely(
    target: str,
    msu_path: str,
    arguments: str = "",
    timeout_minutes: float = 0,
    cancel_event: asyncio.Event | None = None,
    session_factory: SessionFactory | None = None,
) -> RemoteInstallResult:
    return await run_install(
        target,
        InstallKind.MSU,
        msu_path,
        arguments,
        timeout_minutes=timeout_minutes,
        cancel_event=cancel_event,
        session_factory=session_factory,
    )


async def run_powershell_script_remotely(
    target: str,
    script_path: str,
    timeout_minutes: float = 0,
    cancel_event: asyncio.Event | None = None,
    session_factory: SessionFactory | None = None,
) -> RemoteInstallResult:
    return await run_install(
        target,
        InstallKind.POWERSHELL,
        script_path,
        timeout_minutes=timeout_minutes,
        cancel_event=cancel_event,
        session_factory=session_factory,
    )


async def run_vbscript_remotely(
    target: str,
    script_path: str,
    timeout_minutes: float = 0,
    cancel_event: asyncio.Event | None = None,
    session_factory: SessionFactory | None = None,
) -> RemoteInstallResult:
    return await run_install(
        target,
        InstallKind.VBSCRIPT,
        script_path,
        timeout_minutes=timeout_minutes,
        cancel_event=cancel_event,
        session_factory=session_factory,
    )


async def run_batch_file_remotely(
    target: str,
    batch_file_path: str,
    timeout_minutes: float = 0,
    cancel_event: asyncio.Event | None = None,
    session_factory: SessionFactory | None = None,
) -> RemoteInstallResult:
    return await run_install(
        target,
        InstallKind.BATCH,
        batch_file_path,
        timeout_minutes=timeout_minutes,
        cancel_event=cancel_event,
        session_factory=session_factory,
    )


async def import_reg_file_remotely(
    target: str,
    reg_file_path: str,
    timeout_minutes: float = 0,
    cancel_event: asyncio.Event | None = None,
    session_factory: SessionFactory | None = None,
) -> RemoteInstallResult:
    return await run_install(
        target,
        InstallKind.REG,
        reg_file_path,
        timeout_minutes=timeout_minutes,
        cancel_event=cancel_event,
        session_factory=session_factory,
    )


async def import_reg_file_for_all_users_remotely(
    target: str,
    reg_file_path: str,
    timeout_minutes: float = 0,
    cancel_event: asyncio.Event | None = None,
    session_factory: SessionFactory | None = None,
) -> RemoteInstallResult:
    """Import a .reg file into every user profile's hive in one script."""
    return await run_install(
        target,
        InstallKind.REG_ALL_USERS,
        reg_file_path,
        timeout_minutes=timeout_minutes,
        cancel_event=cancel_event,
        session_factory=session_factory,
    )


async def run_on_targets(
    targets: list[str],
    kind: InstallKind,
    path: str = "",
    arguments: str = "",
    timeout_minutes: float = 0,
    cancel_event: asyncio.Event | None = None,
    session_factory: SessionFactory | None = None,
    max_concurrency: int = 10,
) -> list[RemoteInstallResult]:
    """Run the same install on many targets concurrently.

    Args:
        targets: Target computer names or addresses
        kind: Install action to perform
        path: Kind-specific path
        arguments: Kind-specific argument string
        timeout_minutes: Per-target budget; 0 means no timeout
        cancel_event: Shared cancellation signal for every target
        session_factory: Session factory override
        max_concurrency: Maximum number of targets in flight at once

    Returns:
        One RemoteInstallResult per target, in input order.
    """
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def run_single(target: str) -> RemoteInstallResult:
        async with semaphore:
            return await run_install(
                target,
                kind,
                path,
                arguments,
                timeout_minutes=timeout_minutes,
                cancel_event=cancel_event,
                session_factory=session_factory,
            )

    logger.info(
        "Running %s install on %d target(s) (max_concurrency=%d)",
        kind.value,
        len(targets),
        max_concurrency,
    )
    results = await asyncio.gather(*(run_single(t) for t in targets))
    return list(results)
