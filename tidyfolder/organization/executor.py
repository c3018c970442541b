"""
Execution of approved move plans and journal-driven undo.

Moves run strictly one at a time so the journal order matches the order in
which moves really happened.
"""

import logging
import shutil
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from pydantic import BaseModel, Field

from ..core.cancellation import CancellationToken, is_cancelled
from ..core.types import Action, JournalActionType, JournalEntry
from ..shared.file_utils import display_path, generate_unique_path
from .journal import Journal

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class ExecutionSummary(BaseModel):
    """Result of one execution run."""

    attempted: int = 0
    moved: int = 0
    failed: int = 0
    renamed: int = 0
    cancelled: bool = False
    journal_path: Optional[Path] = None
    errors: List[str] = Field(default_factory=list)


class UndoResult(BaseModel):
    """Result of one undo pass."""

    total: int = 0
    restored: int = 0
    failed: int = 0
    journal_found: bool = False
    journal_removed: bool = False
    errors: List[str] = Field(default_factory=list)


class PlanExecutor:
    """Perform approved actions and keep the journal needed to undo them."""

    def __init__(self, journal_path: Path):
        """
        Initialize the executor.

        Args:
            journal_path: Where the journal of each run is written
        """
        self.journal_path = Path(journal_path)
        self.last_summary: Optional[ExecutionSummary] = None

    def execute(
        self,
        actions: Sequence[Action],
        cancel_token: Optional[CancellationToken] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[JournalEntry]:
        """
        Execute actions in order.

        A failed action is logged and skipped. On cancellation the run stops
        before the next action; moves already done are kept and journaled.
        The journal is saved once at the end if it has any entries, also when
        the loop is aborted by an exception.

        Args:
            actions: Approved actions, in execution order
            cancel_token: Optional token checked before each action
            on_progress: Optional callback receiving (done, total)

        Returns:
            Journal entries for the moves that succeeded
        """
        summary = ExecutionSummary()
        journal = Journal()
        total = len(actions)

        logger.info(f"Executing plan with {total} actions...")

        try:
            for index, action in enumerate(actions):
                if is_cancelled(cancel_token):
                    summary.cancelled = True
                    logger.info("Execution cancelled by user.")
                    break

                summary.attempted += 1
                destination = self._perform(action, summary)
                if destination is not None:
                    journal.record_move(action.from_path, destination)
                    summary.moved += 1

                if on_progress:
                    on_progress(index + 1, total)
        finally:
            # Moves already on disk stay undoable even if the loop is aborted
            self._save_journal(journal, summary)
            self.last_summary = summary

        logger.info(
            f"Execution complete. Moved {summary.moved}, failed {summary.failed}."
        )
        return journal.entries

    def _save_journal(self, journal: Journal, summary: ExecutionSummary) -> None:
        if len(journal) == 0:
            return
        try:
            journal.save(self.journal_path)
            summary.journal_path = self.journal_path
        except (OSError, ValueError) as e:
            message = display_path(f"{self.journal_path}: {e}")
            logger.error(f"Failed to save journal: {message}")
            summary.errors.append(message)

    def _perform(self, action: Action, summary: ExecutionSummary) -> Optional[Path]:
        """Move one entry; returns the realized destination on success."""
        source = action.from_path
        parent_dir = action.to_path.parent

        if not parent_dir.exists():
            try:
                parent_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(
                    f"[DIR] Failed to create directory '{display_path(parent_dir)}': {e}"
                )
                summary.failed += 1
                summary.errors.append(display_path(f"{parent_dir}: {e}"))
                return None
            logger.info(f"[DIR] Created directory: '{display_path(parent_dir)}'")

        destination = generate_unique_path(action.to_path)
        if destination != action.to_path:
            summary.renamed += 1
            logger.info(f"Destination exists, renaming to {display_path(destination.name)}")

        try:
            logger.info(f"Moving '{display_path(source)}' -> '{display_path(destination)}'")
            shutil.move(str(source), str(destination))
        except OSError as e:
            logger.error(f"ERROR moving {display_path(source)}: {e}")
            summary.failed += 1
            summary.errors.append(display_path(f"{source}: {e}"))
            return None

        return destination

    def undo(self) -> UndoResult:
        """Undo the moves recorded in this executor's journal."""
        return undo(self.journal_path)


def undo(journal_path: Path) -> UndoResult:
    """
    Replay a journal in reverse to restore moved entries.

    Each entry is restored independently; failures are logged and the rest
    still run. The journal is removed afterwards even if some entries could
    not be restored.

    Args:
        journal_path: Path to the journal file

    Returns:
        Undo statistics
    """
    journal_path = Path(journal_path)
    result = UndoResult()

    if not journal_path.exists():
        logger.info("No journal file found. Nothing to undo.")
        return result

    result.journal_found = True
    try:
        journal = Journal.load(journal_path)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read journal {display_path(journal_path)}: {e}")
        result.errors.append(display_path(f"{journal_path}: {e}"))
        return result

    entries = journal.get_undo_entries()
    result.total = len(entries)
    logger.info(f"Starting undo operation for {len(entries)} moves...")

    for entry in entries:
        if entry.action != JournalActionType.MOVE:
            continue

        logger.info(
            f"Undoing move: '{display_path(entry.to_path)}' -> '{display_path(entry.from_path)}'"
        )
        try:
            _restore(entry)
            result.restored += 1
        except OSError as e:
            logger.error(f"   Error undoing move of {display_path(entry.to_path)}: {e}")
            result.failed += 1
            result.errors.append(display_path(f"{entry.to_path}: {e}"))

    try:
        journal_path.unlink()
        result.journal_removed = True
    except OSError as e:
        logger.error(f"Could not remove journal {journal_path}: {e}")

    if result.failed:
        logger.warning(
            f"Undo finished with {result.failed} moves that could not be reverted."
        )
    if result.journal_removed:
        logger.info("Undo complete. Journal file removed.")
    return result


def _restore(entry: JournalEntry) -> None:
    """Move one journaled entry back to where it came from."""
    original = entry.from_path
    if original.exists():
        raise FileExistsError(
            f"Original location is occupied: {display_path(original)}"
        )

    parent = original.parent
    if not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)

    shutil.move(str(entry.to_path), str(original))
