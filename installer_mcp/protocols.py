"""Protocol interfaces for dependency inversion.

The executor, privilege verifier and directory lookup depend on these
interfaces instead of the pypsrp-backed session, so tests can plug in
doubles that simulate open failures, slow scripts and error streams
without a WinRM endpoint.

Usage Example:

    from installer_mcp.protocols import RemoteSession

    class FakeSession:
        def __init__(self, target: str) -> None:
            self.target = target

        async def open(self) -> None: ...
        async def invoke(self, script: str) -> InvocationOutput:
            return InvocationOutput(output=["done"])
        async def stop(self) -> None: ...
        async def close(self) -> None: ...

    result = await execute_remote_script(
        "pc01", "Get-Date", session_factory=FakeSession
    )
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from installer_mcp.models import InvocationOutput


@runtime_checkable
class RemoteSession(Protocol):
    """Opaque session bound to one target address.

    States are Closed -> Open -> (Faulted). Implementations must make
    ``stop`` and ``close`` idempotent and safe to call in any state.
    """

    target: str

    async def open(self) -> None:
        """Open the session.

        Raises:
            SessionOpenError: If the target cannot be reached or remoting
                is disabled
        """
        ...

    async def invoke(self, script: str) -> InvocationOutput:
        """Run a script and capture its output and error records.

        Raises:
            InvocationError: If the transport fails during the call
        """
        ...

    async def stop(self) -> None:
        """Request the in-flight invocation to stop."""
        ...

    async def close(self) -> None:
        """Release the session and its transport resources."""
        ...


SessionFactory = Callable[[str], RemoteSession]
