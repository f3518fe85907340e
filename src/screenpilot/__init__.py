"""
screenpilot: text-driven GUI automation pipeline.

Parses a small command language, dispatches commands through an execution
capability and tracks the on-screen element tree and foreground application.
"""

from .parsing import CommandParser, format_for_display, parse_command, parse_commands
from .schemas import (
    AppTransitionEvent,
    CommandFailure,
    CommandResult,
    CommandSuccess,
    ErrorKind,
    UiElement,
    UiTree,
)
from .services import CommandPipeline, ScreenStateAggregator

__version__ = "0.1.0"

__all__ = [
    "CommandParser",
    "format_for_display",
    "parse_command",
    "parse_commands",
    "AppTransitionEvent",
    "CommandFailure",
    "CommandResult",
    "CommandSuccess",
    "ErrorKind",
    "UiElement",
    "UiTree",
    "CommandPipeline",
    "ScreenStateAggregator",
]
