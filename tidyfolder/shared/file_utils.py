"""
File utilities for tidyfolder.

Extension handling, collision-free destination names and logging setup.
"""

import logging
from pathlib import Path
from typing import Optional, Set, Union

logger = logging.getLogger(__name__)

# Images whose embedded capture date is consulted during classification
CAPTURE_DATE_EXTENSIONS: Set[str] = {
    ".jpg",
    ".jpeg",
    ".png",
    ".webp",
    ".tiff",
    ".raw",
    ".cr2",
    ".nef",
    ".arw",
    ".dng",
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def lower_extension(path: Path) -> str:
    """
    Lowercase extension of a path, including the leading dot.

    Args:
        path: Path to inspect

    Returns:
        Extension such as ".pdf", or "" if the name has none
    """
    return path.suffix.lower()


def is_capture_date_image(path: Path) -> bool:
    """Check if a file is an image type that may carry a capture date."""
    return lower_extension(path) in CAPTURE_DATE_EXTENSIONS


def display_path(path: Union[str, Path]) -> str:
    """
    Render a path for log and console output.

    Undecodable bytes from the filesystem are shown as replacement
    characters instead of raising.
    """
    return str(path).encode("utf-8", "replace").decode("utf-8")


def generate_unique_path(target_path: Path) -> Path:
    """
    Get a destination that does not exist yet.

    Appends " (1)", " (2)", ... before the extension, using the smallest
    unused number.

    Args:
        target_path: Intended destination

    Returns:
        target_path itself if it is free, otherwise the first free variant
    """
    if not target_path.exists():
        return target_path

    parent = target_path.parent
    stem = target_path.stem
    suffix = target_path.suffix

    counter = 1
    while True:
        candidate = parent / f"{stem} ({counter}){suffix}"
        if not candidate.exists():
            return candidate
        counter += 1


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, set logging level to DEBUG
        quiet: If True, set logging level to WARNING
        log_file: Optional file that receives every record in append mode
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handlers: list = [logging.StreamHandler()]
    if log_file is not None:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as e:
            # Console logging still works without the file
            print(f"Could not open log file {log_file}: {e}")

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
