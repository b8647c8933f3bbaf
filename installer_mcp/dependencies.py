"""Dependency injection container for installer_mcp.

Holds the settings and the session factory so tools can receive them
explicitly instead of reaching for module globals.
"""

from dataclasses import dataclass

from installer_mcp.config import Settings
from installer_mcp.protocols import SessionFactory
from installer_mcp.services.session import psrp_session_factory


@dataclass
class Dependencies:
    """Container for installer_mcp dependencies.

    Example:
        deps = Dependencies.create()
        result = await execute_remote_script(
            "pc01", "Get-Date", session_factory=deps.session_factory
        )
    """

    settings: Settings
    session_factory: SessionFactory

    @classmethod
    def create(cls) -> "Dependencies":
        """Create dependencies from environment settings."""
        return cls.from_settings(Settings.from_env())

    @classmethod
    def from_settings(cls, settings: Settings) -> "Dependencies":
        """Create dependencies with custom settings.

        Args:
            settings: Custom Settings instance

        Returns:
            Dependencies with a pypsrp session factory bound to the settings
        """
        return cls(
            settings=settings,
            session_factory=psrp_session_factory(settings.target_for),
        )
