"""Copy files to a target through its administrative share.

A local destination such as ``C:\\Deploy`` on ``pc01`` resolves to
``\\\\pc01\\C$\\Deploy``. Every file transfer runs as its own task on the
default worker pool; destination files are always overwritten.

UNC paths only resolve through the filesystem on Windows. On any other
host every copy fails before a transfer is scheduled.
"""

import asyncio
import logging
import os
import shutil
import sys
from pathlib import Path

from installer_mcp.models import CopyResult

logger = logging.getLogger(__name__)

WINDOWS_HOST_REQUIRED = "administrative shares require a Windows host"


def shares_supported() -> bool:
    """Whether this host can reach administrative shares as file paths."""
    return sys.platform == "win32"


def get_remote_path(target: str, destination: str) -> str:
    """Resolve a target-local path into its administrative-share path.

    Args:
        target: Computer name or address
        destination: Path on the target, starting with a drive letter

    Returns:
        ``\\\\<target>\\<drive>$<rest of destination>``

    Raises:
        ValueError: If destination does not start with ``<letter>:``
    """
    if len(destination) < 2 or not destination[0].isalpha() or destination[1] != ":":
        raise ValueError(f"Destination must start with a drive letter: {destination}")
    return f"\\\\{target}\\{destination[0]}${destination[2:]}"


def _copy_one(source: str, destination: str) -> None:
    shutil.copyfile(source, destination)


async def _run_transfers(transfers: list[tuple[str, str]]) -> Exception | None:
    """Run transfers concurrently and wait for all of them to settle.

    Returns:
        The first failure in scheduling order, or None
    """
    tasks = [asyncio.to_thread(_copy_one, src, dst) for src, dst in transfers]
    outcomes = await asyncio.gather(*tasks, return_exceptions=True)
    for (src, _), outcome in zip(transfers, outcomes):
        if isinstance(outcome, Exception):
            logger.warning("Transfer of %s failed: %s", src, outcome)
    return next((o for o in outcomes if isinstance(o, Exception)), None)


async def copy_file(source_file: str, target: str, destination: str) -> CopyResult:
    """Copy one file to a path on the target.

    Args:
        source_file: Local file to copy
        target: Computer name or address
        destination: Destination file path on the target

    Returns:
        CopyResult; never raises
    """
    if not os.path.isfile(source_file):
        return CopyResult(success=False, message=f"Source file does not exist: {source_file}")
    if not shares_supported():
        return CopyResult(success=False, message=f"Failed to copy file: {WINDOWS_HOST_REQUIRED}")

    try:
        remote_path = get_remote_path(target, destination)
        logger.info("Copying %s -> %s", source_file, remote_path)
        await asyncio.to_thread(_copy_one, source_file, remote_path)
    except Exception as e:
        logger.warning("Copy of %s to %s failed: %s", source_file, target, e)
        return CopyResult(success=False, message=f"Failed to copy file: {e}")

    return CopyResult(success=True, message="File copied successfully")


async def copy_files(
    source_files: list[str],
    target: str,
    destination: str,
) -> CopyResult:
    """Copy several files into one directory on the target.

    Every source is checked before any transfer starts; the first missing
    one aborts the whole batch, as does a file name shared by two sources.

    Args:
        source_files: Local files to copy
        target: Computer name or address
        destination: Destination directory on the target

    Returns:
        One aggregate CopyResult; never raises
    """
    for source_file in source_files:
        if not os.path.isfile(source_file):
            return CopyResult(
                success=False, message=f"Source file does not exist: {source_file}"
            )

    seen: set[str] = set()
    for source_file in source_files:
        name = os.path.basename(source_file).lower()
        if name in seen:
            return CopyResult(
                success=False,
                message=f"Failed to copy files: duplicate file name {os.path.basename(source_file)}",
            )
        seen.add(name)

    if not shares_supported():
        return CopyResult(success=False, message=f"Failed to copy files: {WINDOWS_HOST_REQUIRED}")

    try:
        remote_path = get_remote_path(target, destination)
    except ValueError as e:
        return CopyResult(success=False, message=f"Failed to copy files: {e}")

    transfers = [
        (source_file, os.path.join(remote_path, os.path.basename(source_file)))
        for source_file in source_files
    ]
    logger.info("Copying %d file(s) -> %s", len(transfers), remote_path)

    error = await _run_transfers(transfers)
    if error is not None:
        return CopyResult(success=False, message=f"Failed to copy files: {error}")
    return CopyResult(success=True, message="All files copied successfully")


async def copy_directory(
    source_directory: str,
    target: str,
    destination: str,
) -> CopyResult:
    """Copy a directory tree to the target, preserving relative structure.

    Destination subdirectories are created synchronously before each
    file's transfer is scheduled; the transfers then run concurrently.

    Args:
        source_directory: Local directory to copy
        target: Computer name or address
        destination: Destination directory on the target

    Returns:
        One aggregate CopyResult; never raises
    """
    source_root = Path(source_directory)
    if not source_root.is_dir():
        return CopyResult(
            success=False,
            message=f"Source directory does not exist: {source_directory}",
        )

    source_files = sorted(p for p in source_root.rglob("*") if not p.is_dir())
    for source_file in source_files:
        if not source_file.is_file():
            return CopyResult(
                success=False, message=f"Source file does not exist: {source_file}"
            )

    if not shares_supported():
        return CopyResult(
            success=False, message=f"Failed to copy directory: {WINDOWS_HOST_REQUIRED}"
        )

    try:
        remote_root = get_remote_path(target, destination)
        os.makedirs(remote_root, exist_ok=True)

        transfers: list[tuple[str, str]] = []
        for source_file in source_files:
            relative = source_file.relative_to(source_root)
            destination_file = os.path.join(remote_root, *relative.parts)
            os.makedirs(os.path.dirname(destination_file), exist_ok=True)
            transfers.append((str(source_file), destination_file))
    except Exception as e:
        logger.warning("Preparing %s on %s failed: %s", destination, target, e)
        return CopyResult(success=False, message=f"Failed to copy directory: {e}")

    logger.info(
        "Copying directory %s (%d file(s)) -> %s",
        source_directory,
        len(transfers),
        remote_root,
    )
    error = await _run_transfers(transfers)
    if error is not None:
        return CopyResult(success=False, message=f"Failed to copy directory: {error}")
    return CopyResult(success=True, message="Directory copied successfully")
