"""
Execution capability that records commands instead of performing them.
"""

import threading
from typing import List

from ...parsing.command_parser import format_for_display
from ...schemas.commands import Command
from ...schemas.results import CommandResult, CommandSuccess
from .protocol import ExecutionCapability


class DryRunExecutor(ExecutionCapability):
    """
    Always-ready capability used by ``--dry-run`` and in tests.
    """

    name = "dry-run"

    def __init__(self) -> None:
        super().__init__()
        self._lock = threading.Lock()
        self._executed: List[Command] = []

    def is_ready(self) -> bool:
        return True

    def perform(self, command: Command) -> CommandResult:
        with self._lock:
            self._executed.append(command)
        display = format_for_display(command)
        return CommandSuccess(
            message=f"Dry run: {display}", metadata={"kind": command.kind}
        )

    @property
    def executed(self) -> List[Command]:
        """Commands received so far, in dispatch order."""
        with self._lock:
            return list(self._executed)
