"""
Classification of a single filesystem entry into a proposed move.

Files are classified by capture date rules (images only), then by extension,
then into the default category. Directories are classified by content rules
and left alone when nothing matches.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from ..core.types import DEFAULT_CATEGORY, Action, Config
from ..shared.file_utils import display_path, is_capture_date_image, lower_extension
from .conditions import (
    collect_directory_facts,
    is_category_directory,
    resolve_category,
    rule_matches_capture_date,
    rule_matches_directory,
    unwrap_single_nested,
)
from .metadata import read_capture_date

logger = logging.getLogger(__name__)

CaptureDateReader = Callable[[Path], Optional[str]]


class Classifier:
    """Decide whether and where to move one entry of the target directory."""

    def __init__(
        self,
        config: Config,
        capture_date_reader: CaptureDateReader = read_capture_date,
    ):
        """
        Initialize the classifier.

        Args:
            config: Configuration; only read, never modified
            capture_date_reader: Function returning an image's ``YYYY-MM-DD``
                capture date, or None
        """
        self.config = config
        self.capture_date_reader = capture_date_reader

    def classify(self, entry: Path, target_dir: Path) -> Optional[Action]:
        """
        Classify one entry.

        Never raises: errors while inspecting the entry are logged and the
        entry is skipped.

        Args:
            entry: File or directory directly inside ``target_dir``
            target_dir: Directory being organized

        Returns:
            Proposed action, or None if the entry should stay where it is
        """
        try:
            category = self._resolve_category(entry)
            if category is None:
                return None

            destination = Path(target_dir) / category / entry.name
            if destination == entry:
                return None

            return Action(from_path=entry, to_path=destination, reason=category)

        except OSError as e:
            logger.warning(
                f"Filesystem error processing '{display_path(entry)}': {e}. Skipping."
            )
        except Exception as e:
            logger.warning(
                f"Unexpected error while processing '{display_path(entry)}': "
                f"{type(e).__name__}: {e}. Skipping."
            )

        return None

    def _resolve_category(self, entry: Path) -> Optional[str]:
        if entry.is_file():
            return self.classify_file(entry)
        if entry.is_dir():
            return self.classify_directory(entry)
        logger.debug(f"Skipping {display_path(entry)}: not a regular file or directory")
        return None

    def classify_file(self, path: Path) -> str:
        """
        Get the category for a file.

        Args:
            path: File to classify

        Returns:
            Category name; the default category if nothing else applies
        """
        if is_capture_date_image(path):
            capture_date = self.capture_date_reader(path)
            if capture_date:
                category = self._match_capture_date(capture_date)
                if category:
                    return category

        return self.config.categories.get(lower_extension(path), DEFAULT_CATEGORY)

    def _match_capture_date(self, capture_date: str) -> Optional[str]:
        for rule in self.config.rules:
            if rule_matches_capture_date(rule, capture_date):
                return resolve_category(rule.category, capture_date)
        return None

    def classify_directory(self, path: Path) -> Optional[str]:
        """
        Get the category for a directory.

        Args:
            path: Directory to classify

        Returns:
            Category of the first matching rule, or None

        Raises:
            OSError: If the directory contents cannot be read
        """
        if is_category_directory(path.name, self.config):
            logger.debug(f"Skipping category directory {display_path(path)}")
            return None

        facts = collect_directory_facts(unwrap_single_nested(path), self.config)

        for rule in self.config.rules:
            if rule_matches_directory(rule, facts):
                return rule.category

        return None


def classify(entry: Path, target_dir: Path, config: Config) -> Optional[Action]:
    """Classify one entry with a throwaway classifier."""
    return Classifier(config).classify(entry, target_dir)
