"""WinRM target data models."""

from dataclasses import dataclass

DEFAULT_WINRM_PORT = 5985
DEFAULT_CONFIGURATION_NAME = "Microsoft.PowerShell"
SHELL_URI_PREFIX = "http://schemas.microsoft.com/powershell/"


@dataclass
class WinRMTarget:
    """Connection parameters for one remote computer."""

    hostname: str
    port: int = DEFAULT_WINRM_PORT
    auth: str = "negotiate"
    cert_validation: bool = False
    configuration_name: str = DEFAULT_CONFIGURATION_NAME
    connection_timeout: int = 30
    operation_timeout: int = 20

    @property
    def ssl(self) -> bool:
        """Use HTTPS only on the standard WinRM HTTPS port."""
        return self.port == 5986

    @property
    def connection_uri(self) -> str:
        """WS-Management endpoint for this target."""
        scheme = "https" if self.ssl else "http"
        return f"{scheme}://{self.hostname}:{self.port}/wsman"

    @property
    def shell_uri(self) -> str:
        """Resource URI of the remote PowerShell endpoint."""
        return f"{SHELL_URI_PREFIX}{self.configuration_name}"
