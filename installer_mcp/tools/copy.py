"""remote_copy tool: push local files to targets over administrative shares."""

import asyncio
import logging

from installer_mcp.models import CopyResult
from installer_mcp.services import copy_directory, copy_files

logger = logging.getLogger(__name__)

COPY_MODES = ("files", "directory")


async def _copy_to_target(
    target: str,
    sources: list[str],
    destination: str,
    mode: str,
) -> CopyResult:
    if mode == "directory":
        return await copy_directory(sources[0], target, destination)
    return await copy_files(sources, target, destination)


async def remote_copy(
    targets: list[str],
    sources: list[str],
    destination: str,
    mode: str = "files",
) -> str:
    """Copy local files or a directory tree to remote Windows machines.

    Files land on ``\\\\<target>\\<drive>$`` so the caller needs write access
    to the administrative share. Existing files are overwritten.

    Args:
        targets: Computer names or addresses.
        sources: Local file paths (mode "files") or a single local
            directory (mode "directory").
        destination: Directory on the target, starting with a drive letter
            (e.g. "C:\\Deploy").
        mode: "files" or "directory".

    Returns:
        One status line per target plus a summary.
    """
    if mode not in COPY_MODES:
        return f"Error: Unknown mode '{mode}'. Available: {', '.join(COPY_MODES)}"
    if not targets:
        return "Error: at least one target is required."
    if not sources:
        return "Error: at least one source is required."
    if mode == "directory" and len(sources) != 1:
        return "Error: mode 'directory' takes exactly one source directory."

    results = await asyncio.gather(
        *(_copy_to_target(t, sources, destination, mode) for t in targets)
    )

    lines = []
    for target, result in zip(targets, results):
        status_icon = "✓" if result.success else "✗"
        lines.append(f"  [{status_icon}] {target}: {result.message}")

    success_count = sum(1 for r in results if r.success)
    lines.append(f"─── {success_count}/{len(results)} targets succeeded ───")
    return "\n".join(lines)
