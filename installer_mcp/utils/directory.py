"""Directory-service identity lookup.

The lookup runs an ADSI search for a computer account over a WinRM
session to the configured directory server (usually a domain
controller). Fail-closed: any error, or no directory server configured,
reports the identity as missing.
"""

import logging

from installer_mcp.protocols import SessionFactory

logger = logging.getLogger(__name__)

COMPUTER_SEARCH_TEMPLATE = """
$searcher = [adsisearcher]'(&(objectCategory=computer)(name={name}))'
$null -ne $searcher.FindOne()
"""

_LDAP_ESCAPES = {
    "\\": r"\5c",
    "*": r"\2a",
    "(": r"\28",
    ")": r"\29",
    "\0": r"\00",
}


def ldap_escape(value: str) -> str:
    """Escape a value for use inside an LDAP search filter."""
    return "".join(_LDAP_ESCAPES.get(ch, ch) for ch in value)


def build_computer_search(name: str) -> str:
    """Build the ADSI probe script for a computer account name."""
    escaped = ldap_escape(name).replace("'", "''")
    return COMPUTER_SEARCH_TEMPLATE.format(name=escaped)


async def identity_exists(
    name: str,
    directory_server: str | None = None,
    session_factory: SessionFactory | None = None,
) -> bool:
    """Check whether a computer account exists in the directory.

    Args:
        name: Computer name (without domain suffix)
        directory_server: Host to run the search on. Defaults to
            INSTALLER_DIRECTORY_SERVER
        session_factory: Session factory override

    Returns:
        True only if the directory returned a matching account
    """
    from installer_mcp.services.session import open_session
    from installer_mcp.services.state import get_session_factory, get_settings

    if directory_server is None:
        directory_server = get_settings().directory_server
    if not directory_server:
        logger.warning(
            "No directory server configured (INSTALLER_DIRECTORY_SERVER); "
            "cannot validate %s",
            name,
        )
        return False
    if not name.strip() or "\n" in name or "\r" in name:
        return False

    factory = session_factory or get_session_factory()
    try:
        async with open_session(factory, directory_server) as session:
            result = await session.invoke(build_computer_search(name))
    except Exception as e:
        logger.warning(
            "Directory lookup of %s on %s failed: %s", name, directory_server, e
        )
        return False

    return bool(result.output) and result.output[0] is True
