"""
Shared utilities for tidyfolder.

Common functionality used by the classification, execution and CLI layers.
"""

from .file_utils import (
    # Extensions
    CAPTURE_DATE_EXTENSIONS,
    is_capture_date_image,
    lower_extension,
    # Paths
    display_path,
    generate_unique_path,
    # Logging
    setup_logging,
)
from .user_dirs import resolve_default_target_directory

__all__ = [
    # Constants
    "CAPTURE_DATE_EXTENSIONS",
    # Functions
    "is_capture_date_image",
    "lower_extension",
    "display_path",
    "generate_unique_path",
    "setup_logging",
    "resolve_default_target_directory",
]
