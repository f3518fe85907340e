"""
Screen state tracking.
"""

from .screen_state import (
    MAX_HISTORY_SIZE,
    ScreenStateAggregator,
    ScreenStateSnapshot,
)

__all__ = [
    "MAX_HISTORY_SIZE",
    "ScreenStateAggregator",
    "ScreenStateSnapshot",
]
