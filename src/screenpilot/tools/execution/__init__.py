"""
Execution capabilities: turn commands into real input events.
"""

from .dry_run_executor import DryRunExecutor
from .protocol import (
    NOT_READY_REASON,
    ExecutionCapability,
    completed_future,
    not_ready_failure,
)
from .pyautogui_executor import PyAutoGUIExecutor

__all__ = [
    "NOT_READY_REASON",
    "DryRunExecutor",
    "ExecutionCapability",
    "PyAutoGUIExecutor",
    "completed_future",
    "not_ready_failure",
]
