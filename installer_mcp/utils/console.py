"""Colorful console logging formatter."""

import logging
import re
from datetime import datetime

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "white": "\033[37m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names
COMPONENT_COLORS = {
    "installer_mcp.server": COLORS["bright_cyan"],
    "installer_mcp.services.executor": COLORS["bright_magenta"],
    "installer_mcp.services.session": COLORS["bright_magenta"],
    "installer_mcp.services.copier": COLORS["bright_blue"],
    "installer_mcp.tools": COLORS["bright_blue"],
    "installer_mcp.middleware": COLORS["yellow"],
    "installer_mcp.config": COLORS["green"],
    "default": COLORS["white"],
}

PACKAGE_PREFIX = "installer_mcp."

# (pattern, color) pairs applied to messages when colors are on
HIGHLIGHTS = [
    # Administrative share paths like \\pc01\C$\Deploy
    (re.compile(r"(\\\\[\w.\-]+\\[A-Za-z]\$[^\s]*)"), COLORS["bright_blue"]),
    # WS-Management endpoints
    (re.compile(r"(https?://[^\s,)]+)"), COLORS["bright_blue"]),
    # Durations like 12.5ms
    (re.compile(r"(\d+\.?\d*ms)"), COLORS["bright_yellow"]),
    (re.compile(r"(exit_code=-?\d+)"), COLORS["cyan"]),
    (re.compile(r"(timeout=\S+?)(?=[,)\s]|$)"), COLORS["cyan"]),
]


class ColorfulFormatter(logging.Formatter):
    """Colorful log formatter with local timestamps and component highlighting."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
        for prefix, color in COMPONENT_COLORS.items():
            if prefix != "default" and name.startswith(prefix):
                return color
        return COMPONENT_COLORS["default"]

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created).astimezone()
        return f"{dt.strftime('%H:%M:%S')}.{int(record.msecs):03d} {dt.strftime('%m/%d')}"

    def _format_level(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelname, COLORS["white"])
        return self._colorize(f"{record.levelname:<8}", color)

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith(PACKAGE_PREFIX):
            name = name[len(PACKAGE_PREFIX):]
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<20}", color)

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as ``time | level | component | message``."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._format_level(record)
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])
        message = self._highlight_message(record.getMessage())

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line

    def _highlight_message(self, message: str) -> str:
        """Highlight share paths, endpoints, durations and result fields."""
        if not self.use_colors:
            return message
        for pattern, color in HIGHLIGHTS:
            message = pattern.sub(lambda m: self._colorize(m.group(1), color), message)
        return message


class MCPRequestFormatter(ColorfulFormatter):
    """Extended formatter with lifecycle markers for MCP and session events."""

    MARKERS = [
        (("starting", "ready"), ">>>", "bright_green"),
        (("shutting down", "shutdown"), "<<<", "bright_red"),
        (("error", "failed", "timed out"), "!!", "bright_red"),
        (("warning", "slow", "not an administrator", "cancelled"), "!", "bright_yellow"),
        (("completed", "succeeded", "copied"), "OK", "bright_green"),
        (("opening", "dispatching", "copying"), "+", "bright_cyan"),
        (("closing", "stopping"), "-", "bright_yellow"),
    ]

    def format(self, record: logging.LogRecord) -> str:
        """Prefix the line with a marker for notable events."""
        base = super().format(record)
        if not self.use_colors:
            return base

        message = record.getMessage().lower()
        for keywords, marker, color in self.MARKERS:
            if any(keyword in message for keyword in keywords):
                return f"{COLORS[color]}{marker:<3}{COLORS['reset']} {base}"
        return f"    {base}"
