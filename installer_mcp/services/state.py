"""Global state management for installer_mcp."""

from installer_mcp.config import Settings
from installer_mcp.protocols import SessionFactory

# Global state (initialized on first access)
_settings: Settings | None = None
_session_factory: SessionFactory | None = None


def get_settings() -> Settings:
    """Get or create settings from the environment."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def get_session_factory() -> SessionFactory:
    """Get or create the pypsrp session factory."""
    global _session_factory
    if _session_factory is None:
        from installer_mcp.services.session import psrp_session_factory

        _session_factory = psrp_session_factory(get_settings().target_for)
    return _session_factory


def reset_state() -> None:
    """Reset global state for testing.

    Clears the singleton instances so tests start with fresh state.
    Should only be used in test fixtures.
    """
    global _settings, _session_factory
    _settings = None
    _session_factory = None


def set_settings(settings: Settings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings


def set_session_factory(factory: SessionFactory) -> None:
    """Set the global session factory.

    Allows tests to inject session doubles without touching module internals.

    Args:
        factory: Callable creating a RemoteSession per target address.
    """
    global _session_factory
    _session_factory = factory
