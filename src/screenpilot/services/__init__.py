"""
Services module - organized by domain.

Submodules:
- state: Screen state aggregation
- pipeline: Parser-to-executor orchestration
"""

from .pipeline import CommandPipeline, PipelineStatus, StatusKind
from .state import ScreenStateAggregator, ScreenStateSnapshot

__all__ = [
    "CommandPipeline",
    "PipelineStatus",
    "StatusKind",
    "ScreenStateAggregator",
    "ScreenStateSnapshot",
]
