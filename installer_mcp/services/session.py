"""WinRM session adapter on top of pypsrp.

pypsrp is synchronous, so every network call runs on the default worker
pool through ``asyncio.to_thread``. A session owns one WSMan transport and
a single-runspace pool; invocations on it are sequential.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from pypsrp.complex_objects import PSInvocationState
from pypsrp.powershell import PowerShell, RunspacePool
from pypsrp.wsman import WSMan

from installer_mcp.models import InvocationOutput, WinRMTarget
from installer_mcp.protocols import RemoteSession, SessionFactory
from installer_mcp.services.errors import InvocationError, SessionOpenError

logger = logging.getLogger(__name__)


def format_record(item: Any) -> str:
    """Best-effort text for a deserialized output or error record."""
    if item is None:
        return ""
    if isinstance(item, str):
        return item
    text = getattr(item, "to_string", None)
    if isinstance(text, str) and text:
        return text
    return str(item)


class PSRPSession:
    """Remote PowerShell session bound to one target."""

    def __init__(self, target: WinRMTarget) -> None:
        self.target = target.hostname
        self._params = target
        self._wsman: WSMan | None = None
        self._pool: RunspacePool | None = None
        self._current: PowerShell | None = None
        self._stop_requested = False

    @property
    def is_open(self) -> bool:
        """Whether the runspace pool is open."""
        return self._pool is not None

    async def open(self) -> None:
        """Open the WSMan transport and the runspace pool.

        Raises:
            SessionOpenError: On any transport or authentication failure
        """
        if self._pool is not None:
            return
        logger.info(
            "Opening WinRM session to %s (uri=%s, auth=%s, cert_validation=%s)",
            self.target,
            self._params.connection_uri,
            self._params.auth,
            self._params.cert_validation,
        )
        await asyncio.to_thread(self._open_sync)
        logger.debug("WinRM session to %s opened", self.target)

    def _open_sync(self) -> None:
        params = self._params
        wsman: WSMan | None = None
        try:
            wsman = WSMan(
                params.hostname,
                port=params.port,
                ssl=params.ssl,
                auth=params.auth,
                cert_validation=params.cert_validation,
                connection_timeout=params.connection_timeout,
                operation_timeout=params.operation_timeout,
            )
            pool = RunspacePool(wsman, configuration_name=params.configuration_name)
            pool.open()
        except Exception as e:
            logger.warning("Failed to open WinRM session to %s: %s", self.target, e)
            if wsman is not None:
                _dispose_transport(wsman)
            raise SessionOpenError(self.target, e) from e

        self._wsman = wsman
        self._pool = pool

    async def invoke(self, script: str) -> InvocationOutput:
        """Run a script in the session and capture output and error records.

        Raises:
            InvocationError: If the session is not open or the transport fails
        """
        if self._pool is None:
            raise InvocationError(self.target, RuntimeError("session is not open"))

        ps = PowerShell(self._pool)
        ps.add_script(script)
        self._current = ps
        self._stop_requested = False
        try:
            output = await asyncio.to_thread(self._invoke_sync, ps)
        except Exception as e:
            raise InvocationError(self.target, e) from e

        self._current = None
        logger.debug(
            "Invocation on %s finished (state=%s, output=%d, errors=%d)",
            self.target,
            getattr(ps, "state", None),
            len(output or []),
            len(ps.streams.error),
        )
        return InvocationOutput(output=list(output or []), errors=list(ps.streams.error))

    def _invoke_sync(self, ps: PowerShell) -> list[Any]:
        ps.begin_invoke()
        # A stop requested before the pipeline reached RUNNING is honored here
        if self._stop_requested:
            ps.stop()
        return ps.end_invoke()

    async def stop(self) -> None:
        """Ask the running pipeline to stop. No-op when nothing is running."""
        self._stop_requested = True
        ps = self._current
        if ps is None or getattr(ps, "state", None) != PSInvocationState.RUNNING:
            return
        logger.info("Stopping invocation on %s", self.target)
        try:
            await asyncio.to_thread(ps.stop)
        except Exception as e:
            # Pipeline may have finished between the state check and the signal
            logger.debug("Stop request on %s failed: %s", self.target, e)

    async def close(self) -> None:
        """Close the runspace pool and the transport."""
        pool, wsman = self._pool, self._wsman
        self._pool = None
        self._wsman = None
        if pool is None and wsman is None:
            return
        logger.info("Closing WinRM session to %s", self.target)
        await asyncio.to_thread(_close_sync, self.target, pool, wsman)


def _close_sync(target: str, pool: RunspacePool | None, wsman: WSMan | None) -> None:
    try:
        if pool is not None:
            pool.close()
    except Exception as e:
        logger.debug("Failed to close runspace pool on %s: %s", target, e)
    finally:
        if wsman is not None:
            _dispose_transport(wsman)


def _dispose_transport(wsman: WSMan) -> None:
    closer = getattr(wsman, "close", None)
    if callable(closer):
        try:
            closer()
        except Exception as e:
            logger.debug("Failed to close WSMan transport cleanly: %s", e)


def psrp_session_factory(
    target_for: Callable[[str], WinRMTarget],
) -> SessionFactory:
    """Build a session factory from a target-parameter resolver.

    Args:
        target_for: Maps a target address to its connection parameters,
            usually ``Settings.target_for``

    Returns:
        Callable creating an unopened PSRPSession per target address
    """

    def factory(address: str) -> RemoteSession:
        return PSRPSession(target_for(address))

    return factory


@asynccontextmanager
async def open_session(
    factory: SessionFactory,
    target: str,
) -> AsyncIterator[RemoteSession]:
    """Open a session and guarantee it is closed on every exit path.

    If opening fails the error propagates and there is nothing to release.
    """
    session = factory(target)
    await session.open()
    try:
        yield session
    finally:
        await session.close()
