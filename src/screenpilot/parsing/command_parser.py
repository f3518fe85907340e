"""
Text command language parser.

One command per line, case-insensitive keyword followed by whitespace
separated arguments:

    tap <x> <y> [durationMs]
    swipe <x1> <y1> <x2> <y2> [durationMs]
    scroll <up|down|left|right> [durationMs]
    input <text...>
    wait <durationMs>
    back | home | recents

Scripts may contain blank lines and ``#`` comments. Malformed lines yield no
command; they never raise.
"""

import logging
import re
from typing import List, Optional

from pydantic import ValidationError

from ..config.pipeline_config import PipelineConfig, get_pipeline_config
from ..schemas.commands import (
    Command,
    NavigationAction,
    NavigationCommand,
    Point,
    ScrollCommand,
    ScrollDirection,
    SwipeCommand,
    TapCommand,
    TypeTextCommand,
    WaitCommand,
)

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"^[+-]?[0-9]+$")

_NAVIGATION_KEYWORDS = {
    "back": NavigationAction.BACK,
    "home": NavigationAction.HOME,
    "recents": NavigationAction.RECENTS,
}

_NAVIGATION_LABELS = {
    NavigationAction.BACK: "Back",
    NavigationAction.HOME: "Home",
    NavigationAction.RECENTS: "Recents",
}


def _to_int(token: str) -> Optional[int]:
    """Parse a base-10 integer token, or None."""
    if not _INTEGER.match(token):
        return None
    return int(token)


def _optional_duration(tokens: List[str], index: int, default: int) -> int:
    """Duration at tokens[index] when present and numeric, else default."""
    if len(tokens) > index:
        value = _to_int(tokens[index])
        if value is not None:
            return value
    return default


class CommandParser:
    """
    Converts text lines into Command values.

    Default durations for tap, swipe and scroll come from the configuration.
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        """
        Args:
            config: Pipeline configuration (defaults to the process-wide one)
        """
        self.config = config or get_pipeline_config()

    def parse_command(self, line: str) -> Optional[Command]:
        """
        Parse a single command line.

        Args:
            line: Raw text, e.g. "tap 500 500"

        Returns:
            The parsed command, or None if the line is malformed
        """
        try:
            return self._parse(line)
        except ValidationError as e:
            logger.debug(f"Rejected command {line!r}: {e.error_count()} validation error(s)")
            return None
        except Exception as e:
            logger.warning(f"Error parsing command {line!r}: {e}")
            return None

    def _parse(self, line: str) -> Optional[Command]:
        stripped = line.strip()
        tokens = stripped.split()
        if not tokens:
            return None

        keyword = tokens[0].lower()

        if keyword == "tap":
            if len(tokens) < 3:
                return None
            x, y = _to_int(tokens[1]), _to_int(tokens[2])
            if x is None or y is None:
                return None
            duration = _optional_duration(tokens, 3, self.config.tap_duration_ms)
            return TapCommand.at(x, y, duration_ms=duration)

        if keyword == "swipe":
            if len(tokens) < 5:
                return None
            coords = [_to_int(token) for token in tokens[1:5]]
            if any(value is None for value in coords):
                return None
            x1, y1, x2, y2 = coords
            return SwipeCommand(
                start=Point(x=x1, y=y1),
                end=Point(x=x2, y=y2),
                duration_ms=_optional_duration(tokens, 5, self.config.swipe_duration_ms),
            )

        if keyword == "scroll":
            if len(tokens) < 2:
                return None
            try:
                direction = ScrollDirection(tokens[1].lower())
            except ValueError:
                return None
            return ScrollCommand(
                direction=direction,
                duration_ms=_optional_duration(tokens, 2, self.config.scroll_duration_ms),
            )

        if keyword == "input":
            parts = stripped.split(None, 1)
            if len(parts) < 2:
                return None
            return TypeTextCommand(text=parts[1])

        if keyword == "wait":
            if len(tokens) < 2:
                return None
            duration = _to_int(tokens[1])
            if duration is None:
                return None
            return WaitCommand(duration_ms=duration)

        if keyword in _NAVIGATION_KEYWORDS:
            return NavigationCommand(action=_NAVIGATION_KEYWORDS[keyword])

        return None

    def parse_commands(self, script: str) -> List[Command]:
        """
        Parse a multi-line script.

        Blank lines and lines starting with ``#`` are skipped. Malformed lines
        are dropped; the remaining commands keep their source order.

        Args:
            script: Script text

        Returns:
            Successfully parsed commands
        """
        commands: List[Command] = []
        for line_number, line in enumerate(script.splitlines(), start=1):
            trimmed = line.strip()
            if not trimmed or trimmed.startswith("#"):
                continue
            command = self.parse_command(trimmed)
            if command is None:
                logger.debug(f"Skipping unparseable line {line_number}: {trimmed!r}")
                continue
            commands.append(command)
        return commands

    @staticmethod
    def format_for_display(command: Command) -> str:
        return format_for_display(command)


def format_for_display(command: Command) -> str:
    """
    Render a command as a short human-readable line.

    Args:
        command: Any command variant

    Returns:
        e.g. "Tap at (500, 500)", "Scroll DOWN", "Press Back"

    Raises:
        TypeError: If command is not a known command variant
    """
    if isinstance(command, TapCommand):
        points = ", ".join(f"({p.x}, {p.y})" for p in command.points)
        return f"Tap at {points}"
    if isinstance(command, SwipeCommand):
        return (
            f"Swipe from ({command.start.x}, {command.start.y}) "
            f"to ({command.end.x}, {command.end.y})"
        )
    if isinstance(command, ScrollCommand):
        return f"Scroll {command.direction.name}"
    if isinstance(command, TypeTextCommand):
        return f'Input: "{command.text}"'
    if isinstance(command, WaitCommand):
        return f"Wait {command.duration_ms}ms"
    if isinstance(command, NavigationCommand):
        return f"Press {_NAVIGATION_LABELS[command.action]}"
    raise TypeError(f"Unsupported command type: {type(command).__name__}")


def parse_command(line: str) -> Optional[Command]:
    """Parse one line with the default configuration."""
    return CommandParser().parse_command(line)


def parse_commands(script: str) -> List[Command]:
    """Parse a script with the default configuration."""
    return CommandParser().parse_commands(script)
