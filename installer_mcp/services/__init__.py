"""Services for installer_mcp."""

from installer_mcp.services.copier import (
    copy_directory,
    copy_file,
    copy_files,
    get_remote_path,
)
from installer_mcp.services.errors import (
    InstallerError,
    InvocationError,
    SessionOpenError,
    UnsafeArgumentError,
)
from installer_mcp.services.executor import execute_remote_script
from installer_mcp.services.installers import (
    import_reg_file_for_all_users_remotely,
    import_reg_file_remotely,
    run_batch_file_remotely,
    run_executable_remotely,
    run_install,
    run_msi_remotely,
    run_msu_remotely,
    run_on_targets,
    run_powershell_script_remotely,
    run_vbscript_remotely,
)
from installer_mcp.services.privilege import check_admin
from installer_mcp.services.session import PSRPSession, open_session
from installer_mcp.services.state import (
    get_session_factory,
    get_settings,
    reset_state,
    set_session_factory,
    set_settings,
)

__all__ = [
    "InstallerError",
    "InvocationError",
    "PSRPSession",
    "SessionOpenError",
    "UnsafeArgumentError",
    "check_admin",
    "copy_directory",
    "copy_file",
    "copy_files",
    "execute_remote_script",
    "get_remote_path",
    "get_session_factory",
    "get_settings",
    "import_reg_file_for_all_users_remotely",
    "import_reg_file_remotely",
    "open_session",
    "reset_state",
    "run_batch_file_remotely",
    "run_executable_remotely",
    "run_install",
    "run_msi_remotely",
    "run_msu_remotely",
    "run_on_targets",
    "run_powershell_script_remotely",
    "run_vbscript_remotely",
    "set_session_factory",
    "set_settings",
]
