"""
Command language parsing.
"""

from .command_parser import (
    CommandParser,
    format_for_display,
    parse_command,
    parse_commands,
)

__all__ = [
    "CommandParser",
    "format_for_display",
    "parse_command",
    "parse_commands",
]
