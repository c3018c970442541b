"""
Organization module for executing move plans.

This module performs approved moves one at a time, records each completed
move in a journal, and replays the journal in reverse to undo a run.
"""

from .executor import ExecutionSummary, PlanExecutor, UndoResult, undo
from .journal import Journal

__all__ = [
    "ExecutionSummary",
    "PlanExecutor",
    "UndoResult",
    "undo",
    "Journal",
]
