"""remote_install tool: run one install action on many Windows targets."""

import logging

from installer_mcp.models import InstallKind, RemoteInstallResult
from installer_mcp.services import get_session_factory, get_settings, run_on_targets

logger = logging.getLogger(__name__)

KIND_CHOICES = ", ".join(kind.value for kind in InstallKind)


def _format_install_results(results: list[RemoteInstallResult]) -> str:
    """Format per-target results with a header per target and a summary."""
    lines = []

    for r in results:
        header = f"═══ {r.computer_name} "
        if r.succeeded:
            header += "═" * (60 - len(header))
        else:
            header += "[FAILED] " + "═" * (50 - len(header))
        lines.append(header)

        lines.append(
            f"exit_code={r.exit_code} remoting={'yes' if r.is_remoting_enabled else 'no'} "
            f"admin={'yes' if r.is_admin else 'no'}"
        )
        if r.standard_output:
            lines.append(r.standard_output)
        if r.standard_error:
            lines.append(f"Error: {r.standard_error}")

        lines.append("")

    success_count = sum(1 for r in results if r.succeeded)
    lines.append(f"─── {success_count}/{len(results)} targets succeeded ───")

    return "\n".join(lines)


async def remote_install(
    targets: list[str],
    kind: str,
    path: str = "",
    arguments: str = "",
    timeout_minutes: float | None = None,
) -> str:
    """Run an installer, script or registry import on remote Windows machines.

    Each target gets its own WinRM session. The caller must be a local
    administrator on every target.

    Args:
        targets: Computer names or addresses.
        kind: One of msi, exe, msu, ps1, vbs, bat, reg, reg_all_users.
        path: Installer, script or .reg file path as seen from the target
            (e.g. "C:\\Deploy\\setup.exe"). Optional for msi when
            arguments already carry "/i <package>".
        arguments: Extra command-line arguments for the program.
        timeout_minutes: Per-target budget. Defaults to
            INSTALLER_DEFAULT_TIMEOUT_MINUTES; 0 waits indefinitely.

    Examples:
        remote_install(["pc01", "pc02"], "msi", "C:\\Deploy\\agent.msi", "/quiet")
        remote_install(["pc01"], "exe", "C:\\Deploy\\setup.exe", "/S", 15)
        remote_install(["pc01"], "reg_all_users", "C:\\Deploy\\proxy.reg")

    Returns:
        Formatted per-target report.
    """
    if not targets:
        return "Error: at least one target is required."

    try:
        install_kind = InstallKind(kind.lower())
    except ValueError:
        return f"Error: Unknown kind '{kind}'. Available: {KIND_CHOICES}"

    if install_kind is not InstallKind.MSI and not path:
        return f"Error: kind '{install_kind.value}' requires a path."

    settings = get_settings()
    if timeout_minutes is None:
        timeout_minutes = settings.default_timeout_minutes

    results = await run_on_targets(
        targets,
        install_kind,
        path,
        arguments,
        timeout_minutes=timeout_minutes,
        session_factory=get_session_factory(),
        max_concurrency=settings.max_concurrency,
    )
    return _format_install_results(results)
