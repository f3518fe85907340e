"""
Pydantic schemas for commands, execution results and UI state.
"""

from .commands import (
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
    command_from_dict,
)
from .results import (
    CommandFailure,
    CommandResult,
    CommandSuccess,
    ErrorKind,
    ExecutionError,
)
from .ui_elements import (
    AppTransitionEvent,
    UiBounds,
    UiElement,
    UiTree,
    count_elements,
)

__all__ = [
    "Command",
    "NavigationAction",
    "NavigationCommand",
    "Point",
    "ScrollCommand",
    "ScrollDirection",
    "SwipeCommand",
    "TapCommand",
    "TypeTextCommand",
    "WaitCommand",
    "command_from_dict",
    "CommandFailure",
    "CommandResult",
    "CommandSuccess",
    "ErrorKind",
    "ExecutionError",
    "AppTransitionEvent",
    "UiBounds",
    "UiElement",
    "UiTree",
    "count_elements",
]
