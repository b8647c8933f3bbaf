"""Configuration module for installer_mcp.

Provides:
- Settings: Environment variable configuration
"""

from installer_mcp.config.settings import Settings

__all__ = ["Settings"]
