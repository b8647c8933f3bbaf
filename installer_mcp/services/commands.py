"""Command builders: map install intents onto one PowerShell command.

Pure functions, no I/O. Values land inside PowerShell single-quoted
literals, so a single quote is doubled. Paths are additionally wrapped in
double quotes for the target program's command line; a double quote or a
line break cannot appear in a Windows path and is rejected.
"""

from installer_mcp.models import InstallKind
from installer_mcp.services.errors import UnsafeArgumentError

MSIEXEC = "msiexec.exe"
WUSA = "wusa.exe"
POWERSHELL = "powershell.exe"
CSCRIPT = "cscript.exe"
CMD = "cmd.exe"
REG = "reg.exe"

REG_IMPORT_ALL_USERS_TEMPLATE = """
$users = Get-WmiObject Win32_UserProfile | Where-Object {{ $_.Special -eq $false }}
foreach ($user in $users) {{
    $path = Join-Path $user.LocalPath 'NTUSER.DAT'
    reg load HKU\\TempUser $path
    reg import '{reg_file_path}'
    reg unload HKU\\TempUser
}}"""


def ps_literal(value: str) -> str:
    """Escape text for a PowerShell single-quoted string (no outer quotes)."""
    if "\n" in value or "\r" in value:
        raise UnsafeArgumentError(value, "line breaks are not allowed")
    return value.replace("'", "''")


def check_path(path: str) -> str:
    """Validate a Windows path before it is embedded in a command line.

    Raises:
        UnsafeArgumentError: If the path is empty or holds characters that
            cannot appear in a Windows path and would break quoting
    """
    if not path.strip():
        raise UnsafeArgumentError(path, "path is empty")
    if '"' in path:
        raise UnsafeArgumentError(path, "double quotes are not allowed in paths")
    if "\n" in path or "\r" in path:
        raise UnsafeArgumentError(path, "line breaks are not allowed")
    return path


def build_executable_command(exe_path: str, arguments: str = "") -> str:
    """Start an executable and wait for it, passing its Process object through."""
    exe = ps_literal(check_path(exe_path))
    args = ps_literal(arguments)
    return f"Start-Process '{exe}' -ArgumentList '{args}' -Wait -PassThru"


def build_msi_command(arguments: str) -> str:
    """Run msiexec with the given argument string."""
    return f"Start-Process {MSIEXEC} -ArgumentList '{ps_literal(arguments)}' -Wait -PassThru"


def build_msu_command(msu_path: str, arguments: str = "") -> str:
    """Install an MSU update package through wusa."""
    return build_executable_command(WUSA, f'"{check_path(msu_path)}" {arguments}')


def build_powershell_script_command(script_path: str) -> str:
    return build_executable_command(POWERSHELL, f'-File "{check_path(script_path)}"')


def build_vbscript_command(script_path: str) -> str:
    return build_executable_command(CSCRIPT, f'"{check_path(script_path)}"')


def build_batch_file_command(batch_file_path: str) -> str:
    return build_executable_command(CMD, f'/c "{check_path(batch_file_path)}"')


def build_reg_import_command(reg_file_path: str) -> str:
    return build_executable_command(REG, f'/s "{check_path(reg_file_path)}"')


def build_reg_import_all_users_script(reg_file_path: str) -> str:
    """Import a .reg file into the hive of every non-special user profile.

    The generated script loads each profile's NTUSER.DAT under
    ``HKU\\TempUser``, imports the file and unloads the hive again, looping
    over all users in a single remote invocation.
    """
    path = ps_literal(check_path(reg_file_path))
    return REG_IMPORT_ALL_USERS_TEMPLATE.format(reg_file_path=path)


def build_command(kind: InstallKind, path: str = "", arguments: str = "") -> str:
    """Build the command for an install kind.

    Args:
        kind: Install action to perform
        path: Installer, script or registry file path. For MSI it is
            optional; when given it becomes ``/i "<path>"`` ahead of
            ``arguments``
        arguments: Extra argument string passed to the program

    Returns:
        PowerShell command or script text

    Raises:
        UnsafeArgumentError: If a value cannot be embedded safely
    """
    if kind is InstallKind.MSI:
        if path:
            arguments = f'/i "{check_path(path)}" {arguments}'.rstrip()
        return build_msi_command(arguments)
    if kind is InstallKind.EXECUTABLE:
        return build_executable_command(path, arguments)
    if kind is InstallKind.MSU:
        return build_msu_command(path, arguments)
    if kind is InstallKind.POWERSHELL:
        return build_powershell_script_command(path)
    if kind is InstallKind.VBSCRIPT:
        return build_vbscript_command(path)
    if kind is InstallKind.BATCH:
        return build_batch_file_command(path)
    if kind is InstallKind.REG:
        return build_reg_import_command(path)
    return build_reg_import_all_users_script(path)
