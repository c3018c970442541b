"""
Journal of executed moves.

Records every move that physically happened so it can be undone later.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator, List

from pydantic import Field, RootModel

from ..core.types import JournalActionType, JournalEntry

logger = logging.getLogger(__name__)


class Journal(RootModel[List[JournalEntry]]):
    """
    Ordered record of executed moves.

    Serialized as a JSON array of ``{"action", "from", "to"}`` objects in the
    order the moves succeeded.
    """

    root: List[JournalEntry] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.root)

    def __iter__(self) -> Iterator[JournalEntry]:  # type: ignore[override]
        return iter(self.root)

    @property
    def entries(self) -> List[JournalEntry]:
        """Journal entries in recording order."""
        return self.root

    def record_move(self, source_path: Path, target_path: Path) -> JournalEntry:
        """
        Append a completed move.

        Args:
            source_path: Where the entry was before the move
            target_path: Where it actually ended up

        Returns:
            Created entry
        """
        entry = JournalEntry(
            action=JournalActionType.MOVE,
            from_path=source_path,
            to_path=target_path,
        )
        self.root.append(entry)
        return entry

    def get_undo_entries(self) -> List[JournalEntry]:
        """
        Get entries in the order they must be undone.

        Returns:
            Entries in reverse recording order
        """
        return list(reversed(self.root))

    def save(self, journal_path: Path) -> None:
        """
        Write the journal, replacing any previous file atomically.

        Args:
            journal_path: Path of the journal file
        """
        journal_path = Path(journal_path)
        parent = journal_path.parent
        parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="json", by_alias=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{journal_path.name}.", suffix=".tmp", dir=parent
        )
        try:
            # ASCII escapes keep undecodable file names as \udcXX sequences
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=True)
            os.replace(tmp_name, journal_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info(f"Journal saved with {len(self)} actions to {journal_path}")

    @classmethod
    def load(cls, journal_path: Path) -> "Journal":
        """
        Load a journal from file.

        Args:
            journal_path: Path to the journal file

        Returns:
            Loaded journal

        Raises:
            OSError: If the file cannot be read
            ValueError: If the content is not a valid journal
        """
        with open(journal_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.model_validate(data)
