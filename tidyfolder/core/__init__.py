"""
Core module: rule model, configuration, settings and cancellation.
"""

from .cancellation import CancellationToken
from .config import find_config, load_config
from .exceptions import ConfigError, OperationInProgressError, TidyFolderError
from .settings import OrganizerSettings
from .types import (
    DEFAULT_CATEGORY,
    Action,
    Condition,
    ConditionType,
    Config,
    JournalActionType,
    JournalEntry,
    Rule,
)

__all__ = [
    "CancellationToken",
    "find_config",
    "load_config",
    "ConfigError",
    "OperationInProgressError",
    "TidyFolderError",
    "OrganizerSettings",
    "DEFAULT_CATEGORY",
    "Action",
    "Condition",
    "ConditionType",
    "Config",
    "JournalActionType",
    "JournalEntry",
    "Rule",
]
