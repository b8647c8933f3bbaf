"""Exception types raised inside the remote-install services.

None of these cross the public call surface: the executor, installers and
copier fold them into result records.
"""


class InstallerError(Exception):
    """Base class for installer_mcp service errors."""


class SessionOpenError(InstallerError):
    """Failed to open a remote session (unreachable or remoting disabled)."""

    def __init__(self, target: str, original_error: Exception):
        """Initialize session open error.

        Args:
            target: Target address the session was bound to
            original_error: Transport exception that caused the failure
        """
        self.target = target
        self.original_error = original_error
        super().__init__(f"Cannot open session to {target}: {original_error}")


class InvocationError(InstallerError):
    """Script invocation failed at the transport level."""

    def __init__(self, target: str, original_error: Exception):
        self.target = target
        self.original_error = original_error
        super().__init__(f"Invocation failed on {target}: {original_error}")


class UnsafeArgumentError(InstallerError, ValueError):
    """A value cannot be embedded safely in a remote command line."""

    def __init__(self, value: str, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Unsafe value {value!r}: {reason}")
