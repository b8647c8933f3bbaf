"""Tests for the remote_copy tool."""

from unittest.mock import AsyncMock, patch

import pytest

from installer_mcp.models import CopyResult
from installer_mcp.tools.copy import remote_copy


@pytest.mark.asyncio
async def test_files_mode_per_target() -> None:
    async def fake_copy_files(sources, target, destination) -> CopyResult:
        if target == "pc02":
            return CopyResult(False, "Failed to copy files: Access is denied")
        return CopyResult(True, "All files copied successfully")

    with patch(
        "installer_mcp.tools.copy.copy_files", side_effect=fake_copy_files
    ) as mock_copy:
        report = await remote_copy(
            ["pc01", "pc02"], ["/srv/pkg/a.msi", "/srv/pkg/b.cab"], "C:\\Deploy"
        )

    assert mock_copy.await_count == 2
    mock_copy.assert_any_await(["/srv/pkg/a.msi", "/srv/pkg/b.cab"], "pc01", "C:\\Deploy")
    assert "[✓] pc01: All files copied successfully" in report
    assert "[✗] pc02: Failed to copy files: Access is denied" in report
    assert report.endswith("─── 1/2 targets succeeded ───")


@pytest.mark.asyncio
async def test_directory_mode() -> None:
    with patch(
        "installer_mcp.tools.copy.copy_directory",
        new_callable=AsyncMock,
        return_value=CopyResult(True, "Directory copied successfully"),
    ) as mock_copy:
        report = await remote_copy(["pc01"], ["/srv/pkg"], "C:\\Deploy", mode="directory")

    mock_copy.assert_awaited_once_with("/srv/pkg", "pc01", "C:\\Deploy")
    assert "Directory copied successfully" in report


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("targets", "sources", "mode", "message"),
    [
        (["pc01"], ["/a"], "zip", "Error: Unknown mode 'zip'"),
        ([], ["/a"], "files", "Error: at least one target"),
        (["pc01"], [], "files", "Error: at least one source"),
        (["pc01"], ["/a", "/b"], "directory", "Error: mode 'directory' takes exactly one"),
    ],
)
async def test_validation(targets, sources, mode, message) -> None:
    report = await remote_copy(targets, sources, "C:\\Deploy", mode=mode)

    assert report.startswith(message)
