"""File copy data models."""

from dataclasses import dataclass


@dataclass
class CopyResult:
    """Outcome of one copy call (single file, batch, or directory tree)."""

    success: bool
    message: str
