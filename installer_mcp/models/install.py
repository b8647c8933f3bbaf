"""Remote installation data models."""

from dataclasses import dataclass
from enum import Enum

NOT_RUN_EXIT_CODE = -1


class InstallKind(Enum):
    """Kinds of install actions that map onto a single remote command."""

    MSI = "msi"
    EXECUTABLE = "exe"
    MSU = "msu"
    POWERSHELL = "ps1"
    VBSCRIPT = "vbs"
    BATCH = "bat"
    REG = "reg"
    REG_ALL_USERS = "reg_all_users"


@dataclass
class RemoteInstallResult:
    """Per-target execution outcome.

    Created at the start of one execution attempt and only mutated by the
    executor during that attempt.
    """

    computer_name: str
    exit_code: int = NOT_RUN_EXIT_CODE
    standard_output: str = ""
    standard_error: str = ""
    is_admin: bool = False
    is_remoting_enabled: bool = False

    @property
    def succeeded(self) -> bool:
        """True when the script ran and reported no errors."""
        return (
            self.is_remoting_enabled
            and self.is_admin
            and not self.standard_error
            and self.exit_code in (0, NOT_RUN_EXIT_CODE)
        )
