"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

from installer_mcp.models import WinRMTarget
from installer_mcp.models.target import DEFAULT_CONFIGURATION_NAME, DEFAULT_WINRM_PORT

logger = logging.getLogger(__name__)

ENV_PREFIX = "INSTALLER_"


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # WinRM transport
    winrm_port: int = field(default=DEFAULT_WINRM_PORT)
    winrm_auth: str = field(default="negotiate")
    winrm_cert_validation: bool = field(default=False)
    winrm_configuration_name: str = field(default=DEFAULT_CONFIGURATION_NAME)
    connection_timeout: int = field(default=30)
    operation_timeout: int = field(default=20)

    # Execution
    default_timeout_minutes: int = field(default=0)
    max_concurrency: int = field(default=10)

    # Probes
    ping_timeout: float = field(default=2.0)
    directory_server: str | None = field(default=None)

    # Transport
    transport: str = field(default="http")
    http_host: str = field(default="0.0.0.0")
    http_port: int = field(default=8000)

    # Logging
    log_level: str = field(default="INFO")
    log_payloads: bool = field(default=False)
    slow_threshold_ms: int = field(default=1000)
    include_traceback: bool = field(default=False)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from INSTALLER_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        settings = cls(
            winrm_port=cls._get_int("WINRM_PORT", DEFAULT_WINRM_PORT),
            winrm_auth=os.getenv(f"{ENV_PREFIX}WINRM_AUTH", "negotiate").lower(),
            winrm_cert_validation=cls._get_bool("WINRM_CERT_VALIDATION", False),
            winrm_configuration_name=os.getenv(
                f"{ENV_PREFIX}WINRM_CONFIGURATION_NAME", DEFAULT_CONFIGURATION_NAME
            ),
            connection_timeout=cls._get_int("CONNECTION_TIMEOUT", 30),
            operation_timeout=cls._get_int("OPERATION_TIMEOUT", 20),
            default_timeout_minutes=cls._get_int("DEFAULT_TIMEOUT_MINUTES", 0),
            max_concurrency=cls._get_positive_int("MAX_CONCURRENCY", 10),
            ping_timeout=cls._get_float("PING_TIMEOUT", 2.0),
            directory_server=os.getenv(f"{ENV_PREFIX}DIRECTORY_SERVER") or None,
            transport=cls._get_transport(),
            http_host=os.getenv(f"{ENV_PREFIX}HTTP_HOST", "0.0.0.0"),
            http_port=cls._get_int("HTTP_PORT", 8000),
            log_level=os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper(),
            log_payloads=cls._get_bool("LOG_PAYLOADS", False),
            slow_threshold_ms=cls._get_int("SLOW_THRESHOLD_MS", 1000),
            include_traceback=cls._get_bool("INCLUDE_TRACEBACK", False),
        )

        if not settings.winrm_cert_validation:
            logger.debug(
                "WinRM certificate validation disabled "
                "(set INSTALLER_WINRM_CERT_VALIDATION=true to enable)"
            )

        logger.debug(
            "Settings loaded: transport=%s, winrm_port=%d, auth=%s, "
            "max_concurrency=%d, default_timeout_minutes=%d",
            settings.transport,
            settings.winrm_port,
            settings.winrm_auth,
            settings.max_concurrency,
            settings.default_timeout_minutes,
        )
        return settings

    def target_for(self, hostname: str) -> WinRMTarget:
        """Build connection parameters for a target from these settings."""
        return WinRMTarget(
            hostname=hostname,
            port=self.winrm_port,
            auth=self.winrm_auth,
            cert_validation=self.winrm_cert_validation,
            configuration_name=self.winrm_configuration_name,
            connection_timeout=self.connection_timeout,
            operation_timeout=self.operation_timeout,
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key without the INSTALLER_ prefix
            default: Default value if not set

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(f"{ENV_PREFIX}{key}")
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning(
                "Invalid int for %s%s: %s, using default %d",
                ENV_PREFIX,
                key,
                value,
                default,
            )
            return default

    @classmethod
    def _get_positive_int(cls, key: str, default: int) -> int:
        value = cls._get_int(key, default)
        if value <= 0:
            logger.warning(
                "%s%s must be > 0, got %d. Using default: %d",
                ENV_PREFIX,
                key,
                value,
                default,
            )
            return default
        return value

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        value = os.getenv(f"{ENV_PREFIX}{key}")
        if value is None:
            return default

        try:
            return float(value)
        except ValueError:
            logger.warning(
                "Invalid float for %s%s: %s, using default %s",
                ENV_PREFIX,
                key,
                value,
                default,
            )
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key without the INSTALLER_ prefix
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(f"{ENV_PREFIX}{key}")
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_transport() -> str:
        """Get transport from environment with validation.

        Returns:
            Transport type ("http" or "stdio")
        """
        transport = os.getenv(f"{ENV_PREFIX}TRANSPORT", "").lower()
        if transport in ("http", "stdio"):
            return transport
        return "http"
