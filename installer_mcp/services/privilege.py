"""Administrative-rights probe run over an open session."""

import logging

from installer_mcp.protocols import RemoteSession

logger = logging.getLogger(__name__)

ADMIN_PROBE_SCRIPT = """
$user = [System.Security.Principal.WindowsIdentity]::GetCurrent()
$principal = New-Object System.Security.Principal.WindowsPrincipal($user)
$principal.IsInRole([System.Security.Principal.WindowsBuiltInRole]::Administrator)
"""


async def check_admin(session: RemoteSession) -> bool:
    """Check whether the session identity is an administrator on the target.

    Fail-closed probe: an invocation failure, an empty result set or a
    non-boolean first record all count as "not admin". Callers cannot tell
    a confirmed non-admin from a probe that could not run.

    Args:
        session: Open session to the target

    Returns:
        True only if the probe's first output record is the boolean True
    """
    try:
        result = await session.invoke(ADMIN_PROBE_SCRIPT)
    except Exception as e:
        logger.warning("Admin probe on %s failed: %s", session.target, e)
        return False

    if not result.output:
        logger.debug("Admin probe on %s returned no records", session.target)
        return False

    first = result.output[0]
    if not isinstance(first, bool):
        logger.debug(
            "Admin probe on %s returned %s, expected bool",
            session.target,
            type(first).__name__,
        )
        return False
    return first
