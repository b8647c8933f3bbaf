"""Session boundary data models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class InvocationOutput:
    """Raw records captured from one script invocation."""

    output: list[Any] = field(default_factory=list)
    errors: list[Any] = field(default_factory=list)
