"""
Type definitions for the rule model, plans and the move journal.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

DEFAULT_CATEGORY = "Other"
EXIF_YEAR_TOKEN = "{exif_year}"


def top_level_segment(category: str) -> str:
    """First path segment of a category such as "Photos/{exif_year}"."""
    return category.replace("\\", "/").split("/")[0]


class ConditionType(str, Enum):
    """Type of a single rule condition."""

    CONTAINS_FILENAME_PATTERN = "contains_filename_pattern"
    CONTAINS_FILENAME = "contains_filename"
    CONTAINS_SUBDIRECTORY_NAMED = "contains_subdirectory_named"
    HAS_NO_SUBDIRECTORIES = "has_no_subdirectories"
    FILE_CATEGORY_PERCENTAGE = "file_category_percentage"
    SUBFOLDER_MATCHES_ARCHIVE = "subfolder_matches_archive"
    EXIF_DATE_MATCHES = "exif_date_matches"


class JournalActionType(str, Enum):
    """Kind of a journaled filesystem operation."""

    MOVE = "MOVE"


class Condition(BaseModel):
    """One atomic predicate of a rule."""

    type: ConditionType
    values: List[str] = Field(default_factory=list)
    threshold: float = 0.0


class Rule(BaseModel):
    """A prioritized rule; all conditions must hold for it to match."""

    category: str
    priority: int = 0
    conditions: List[Condition] = Field(default_factory=list)

    @property
    def top_level_category(self) -> str:
        """First path segment of the category, ignoring placeholders."""
        return top_level_segment(self.category)


class Config(BaseModel):
    """Category map plus the rule list, sorted by ascending priority."""

    categories: Dict[str, str] = Field(
        default_factory=dict,
        description="Lowercase extension (with leading dot) to category name",
    )
    rules: List[Rule] = Field(default_factory=list)

    @field_validator("categories")
    @classmethod
    def _lowercase_extensions(cls, value: Dict[str, str]) -> Dict[str, str]:
        return {ext.lower(): category for ext, category in value.items()}

    @field_validator("rules")
    @classmethod
    def _sort_rules(cls, value: List[Rule]) -> List[Rule]:
        # sorted() is stable: equal priorities keep their document order
        return sorted(value, key=lambda rule: rule.priority)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Config":
        """
        Build a config from a parsed configuration document.

        The document maps category names to extension lists; this inverts it
        into the extension lookup used during classification.

        Args:
            document: Parsed JSON document with ``categories`` and ``rules``

        Returns:
            Validated config with rules sorted by priority
        """
        parsed = ConfigDocument.model_validate(document)

        categories: Dict[str, str] = {}
        for category, extensions in parsed.categories.items():
            for ext in extensions:
                categories[ext.lower()] = category

        return cls(categories=categories, rules=parsed.rules)

    def category_names(self) -> List[str]:
        """Category names that the tool itself creates as directories."""
        names = {DEFAULT_CATEGORY}
        names.update(top_level_segment(category) for category in self.categories.values())
        names.update(rule.top_level_category for rule in self.rules)
        names.discard("")
        return sorted(names)


class ConfigDocument(BaseModel):
    """On-disk shape of the configuration file."""

    categories: Dict[str, List[str]] = Field(default_factory=dict)
    rules: List[Rule] = Field(default_factory=list)


class Action(BaseModel):
    """One proposed move of a file or directory."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_path: Path = Field(alias="from", description="Current location")
    to_path: Path = Field(alias="to", description="Planned destination")
    reason: str = Field(description="Resolved category name")

    @model_validator(mode="after")
    def _reject_noop(self) -> "Action":
        if self.from_path == self.to_path:
            raise ValueError(f"Source and destination are equal: {self.to_path}")
        return self


class JournalEntry(BaseModel):
    """A move that physically happened, with its realized destination."""

    model_config = ConfigDict(populate_by_name=True)

    action: JournalActionType = JournalActionType.MOVE
    from_path: Path = Field(alias="from")
    to_path: Path = Field(alias="to")

    # Names that are not valid UTF-8 arrive as lone surrogates; they are
    # converted here so the core string validator never sees them.
    @field_validator("from_path", "to_path", mode="before")
    @classmethod
    def _path_from_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Path(value)
        return value

    @field_serializer("from_path", "to_path")
    def _path_to_text(self, value: Path):
        return os.fspath(value)
