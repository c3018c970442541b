"""
Plan generation for a target directory.

Enumerates the immediate children of the target, classifies them in parallel
chunk by chunk, and aggregates the proposed moves into a plan.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from threading import Lock
from typing import List, Optional

from ..core.cancellation import CancellationToken, is_cancelled
from ..core.types import Action, Config
from ..shared.file_utils import display_path
from .classifier import CaptureDateReader, Classifier
from .metadata import read_capture_date

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 128


def list_entries(target_dir: Path) -> List[Path]:
    """
    List the immediate children of a directory, sorted by name.

    Entries whose type cannot be read because of missing permissions are
    left out.

    Args:
        target_dir: Directory to enumerate

    Returns:
        Child paths

    Raises:
        OSError: If the directory itself cannot be read
    """
    entries: List[Path] = []
    with os.scandir(target_dir) as it:
        for entry in it:
            try:
                entry.is_dir()
            except PermissionError:
                continue
            entries.append(Path(entry.path))

    entries.sort(key=lambda path: path.name)
    return entries


class PlanScanner:
    """Build a move plan for a target directory."""

    def __init__(
        self,
        config: Config,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_workers: Optional[int] = None,
        capture_date_reader: CaptureDateReader = read_capture_date,
    ):
        """
        Initialize the scanner.

        Args:
            config: Configuration shared read-only by all workers
            chunk_size: Entries classified concurrently per chunk
            max_workers: Worker threads per chunk (executor default if None)
            capture_date_reader: Capture date source passed to the classifier
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        self.config = config
        self.chunk_size = chunk_size
        self.max_workers = max_workers
        self.classifier = Classifier(config, capture_date_reader=capture_date_reader)

    def generate_plan(
        self,
        target_dir: Path,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[Action]:
        """
        Scan a directory and propose moves for its entries.

        Chunks are processed in enumeration order. The cancel token is checked
        before each chunk; a cancelled scan returns the actions found so far.

        Args:
            target_dir: Directory to organize
            cancel_token: Optional token to stop scanning early

        Returns:
            Proposed actions; order within a chunk is not defined
        """
        target_dir = Path(target_dir)
        logger.info("Scanning directory for items to process...")

        try:
            paths = list_entries(target_dir)
        except OSError as e:
            logger.error(
                f"Error during initial directory scan of '{display_path(target_dir)}': "
                f"{e}. Aborting."
            )
            return []

        logger.info(f"Found {len(paths)} items. Analyzing...")

        plan: List[Action] = []
        plan_lock = Lock()
        cancelled = False

        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="tidyfolder-scan"
        ) as executor:
            for start in range(0, len(paths), self.chunk_size):
                if is_cancelled(cancel_token):
                    cancelled = True
                    logger.info("Scan cancelled by user.")
                    break

                chunk = paths[start : start + self.chunk_size]
                chunk_actions = self._classify_chunk(executor, chunk, target_dir)

                if chunk_actions:
                    with plan_lock:
                        plan.extend(chunk_actions)

        if cancelled:
            logger.info(f"Analysis cancelled. {len(plan)} actions found before stop.")
        else:
            logger.info(f"Analysis complete. Found {len(plan)} actions.")

        return plan

    def _classify_chunk(
        self,
        executor: ThreadPoolExecutor,
        chunk: List[Path],
        target_dir: Path,
    ) -> List[Action]:
        """Classify one chunk concurrently and collect its actions."""
        chunk_actions: List[Action] = []
        chunk_lock = Lock()

        def classify_one(path: Path) -> None:
            action = self.classifier.classify(path, target_dir)
            if action is not None:
                with chunk_lock:
                    chunk_actions.append(action)

        futures = {executor.submit(classify_one, path): path for path in chunk}
        for future in as_completed(futures):
            try:
                future.result()
            except Exception as e:
                # classify() logs its own errors
                logger.error(f"Error classifying {display_path(futures[future])}: {e}")

        return chunk_actions


def generate_plan(
    target_dir: Path,
    config: Config,
    cancel_token: Optional[CancellationToken] = None,
) -> List[Action]:
    """Scan ``target_dir`` with default scanner settings."""
    return PlanScanner(config).generate_plan(target_dir, cancel_token)
