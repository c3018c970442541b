"""
Rule conditions and the directory predicates used by the classifier.

Directory rules are evaluated against ``DirectoryFacts``, a snapshot of a
directory's immediate contents. File rules only ever match on the capture
date of an image.
"""

import os
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Iterable

from ..core.types import (
    EXIF_YEAR_TOKEN,
    Condition,
    ConditionType,
    Config,
    Rule,
)

ARCHIVE_EXTENSIONS = (".zip", ".rar", ".7z")
DATE_PATTERN_LENGTH = 10
WILDCARD = "*"


@dataclass(frozen=True)
class DirectoryFacts:
    """Immediate contents of a directory, as seen by directory rules."""

    filenames: FrozenSet[str] = frozenset()
    subdirectories: FrozenSet[str] = frozenset()
    category_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def total_categorized(self) -> int:
        """Number of files whose extension maps to some category."""
        return sum(self.category_counts.values())


def is_category_directory(name: str, config: Config) -> bool:
    """
    Check if a directory name belongs to a category the tool creates.

    Such directories are never classified, so organized output is not
    moved again on the next scan.

    Args:
        name: Directory name (not a path)
        config: Active configuration

    Returns:
        True if the name is the default category or the top-level directory
        of a category from the extension map or a rule
    """
    return name in config.category_names()


def unwrap_single_nested(directory: Path) -> Path:
    """
    Get the directory whose contents describe ``directory``.

    A directory holding exactly one entry that is itself a directory (an
    archive extracted into a wrapper folder, for example) is described by
    that inner directory. Only one level is unwrapped.

    Args:
        directory: Directory being classified

    Returns:
        The single nested directory, or ``directory`` itself
    """
    with os.scandir(directory) as it:
        entries = []
        for entry in it:
            entries.append(entry)
            if len(entries) > 1:
                return directory

    if len(entries) == 1 and entries[0].is_dir():
        return Path(entries[0].path)
    return directory


def collect_directory_facts(directory: Path, config: Config) -> DirectoryFacts:
    """
    Snapshot the immediate contents of a directory.

    Args:
        directory: Directory to read
        config: Configuration providing the extension to category map

    Returns:
        File names, subdirectory names and per-category file counts

    Raises:
        OSError: If the directory cannot be read
    """
    filenames = set()
    subdirectories = set()
    counts: Counter = Counter()

    with os.scandir(directory) as it:
        for entry in it:
            if entry.is_dir():
                subdirectories.add(entry.name)
            elif entry.is_file():
                filenames.add(entry.name)
                category = config.categories.get(os.path.splitext(entry.name)[1].lower())
                if category is not None:
                    counts[category] += 1

    return DirectoryFacts(
        filenames=frozenset(filenames),
        subdirectories=frozenset(subdirectories),
        category_counts=dict(counts),
    )


def _any_casefold_match(wanted: Iterable[str], present: Iterable[str]) -> bool:
    present_lower = {name.lower() for name in present}
    return any(value.lower() in present_lower for value in wanted)


def _category_share(condition: Condition, facts: DirectoryFacts) -> bool:
    total = facts.total_categorized
    if total == 0:
        return False
    # A category listed twice is still counted once
    matched = sum(facts.category_counts.get(name, 0) for name in set(condition.values))
    return matched / total >= condition.threshold


def _has_archive_sibling(facts: DirectoryFacts) -> bool:
    filenames_lower = {name.lower() for name in facts.filenames}
    for subdirectory in facts.subdirectories:
        base = subdirectory.lower()
        if any(base + ext in filenames_lower for ext in ARCHIVE_EXTENSIONS):
            return True
    return False


def condition_holds(condition: Condition, facts: DirectoryFacts) -> bool:
    """
    Evaluate one condition against a directory.

    Args:
        condition: Condition to evaluate
        facts: Snapshot of the (possibly unwrapped) directory

    Returns:
        True if the condition holds
    """
    kind = condition.type

    if kind == ConditionType.CONTAINS_FILENAME_PATTERN:
        return _any_casefold_match(condition.values, facts.filenames)
    if kind == ConditionType.CONTAINS_FILENAME:
        return any(value in facts.filenames for value in condition.values)
    if kind == ConditionType.CONTAINS_SUBDIRECTORY_NAMED:
        return _any_casefold_match(condition.values, facts.subdirectories)
    if kind == ConditionType.HAS_NO_SUBDIRECTORIES:
        return not facts.subdirectories
    if kind == ConditionType.FILE_CATEGORY_PERCENTAGE:
        return _category_share(condition, facts)
    if kind == ConditionType.SUBFOLDER_MATCHES_ARCHIVE:
        return _has_archive_sibling(facts)

    # exif_date_matches only applies to files
    return False


def rule_matches_directory(rule: Rule, facts: DirectoryFacts) -> bool:
    """Check that every condition of a rule holds for a directory."""
    return all(condition_holds(condition, facts) for condition in rule.conditions)


def date_pattern_matches(pattern: str, capture_date: str) -> bool:
    """
    Match a ``YYYY-MM-DD`` capture date against a wildcard template.

    Args:
        pattern: 10-character template where ``*`` matches any character
        capture_date: Date string such as "2023-06-15"

    Returns:
        True if every non-wildcard character equals the date's character
    """
    if len(pattern) != DATE_PATTERN_LENGTH or len(capture_date) != DATE_PATTERN_LENGTH:
        return False
    return all(p == WILDCARD or p == c for p, c in zip(pattern, capture_date))


def rule_matches_capture_date(rule: Rule, capture_date: str) -> bool:
    """
    Check if a rule matches an image by its capture date.

    A rule needs at least one condition, and each condition must be an
    ``exif_date_matches`` condition with a value matching the date.
    """
    if not rule.conditions:
        return False

    for condition in rule.conditions:
        if condition.type != ConditionType.EXIF_DATE_MATCHES:
            return False
        if not any(date_pattern_matches(value, capture_date) for value in condition.values):
            return False
    return True


def resolve_category(category: str, capture_date: str) -> str:
    """Substitute the capture year for the ``{exif_year}`` token."""
    return category.replace(EXIF_YEAR_TOKEN, capture_date[:4])
