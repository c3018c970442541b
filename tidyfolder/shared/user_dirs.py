"""Discovery of the default target directory (the user's Downloads folder)."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

XDG_DOWNLOAD_KEY = "XDG_DOWNLOAD_DIR"


def _expand_home(value: str, home: str) -> Optional[Path]:
    """Expand a leading $HOME and require an absolute result."""
    if value.startswith("$HOME"):
        return Path(home) / value[len("$HOME") :].lstrip("/")
    path = Path(value)
    return path if path.is_absolute() else None


def _read_user_dirs_file(user_dirs_file: Path, home: str) -> Optional[Path]:
    """
    Read XDG_DOWNLOAD_DIR from a user-dirs.dirs file.

    Args:
        user_dirs_file: Path to ``~/.config/user-dirs.dirs``
        home: Home directory used to expand ``$HOME``

    Returns:
        Configured download directory, or None if not set
    """
    try:
        lines = user_dirs_file.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        logger.debug(f"Could not read {user_dirs_file}: {e}")
        return None

    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if not line.startswith(f"{XDG_DOWNLOAD_KEY}="):
            continue

        first_quote = line.find('"')
        last_quote = line.rfind('"')
        if first_quote == -1 or last_quote <= first_quote:
            continue

        return _expand_home(line[first_quote + 1 : last_quote], home)

    return None


def resolve_default_target_directory() -> Optional[Path]:
    """
    Locate the user's Downloads folder.

    On Windows this is ``%USERPROFILE%\\Downloads``. Elsewhere the
    ``XDG_DOWNLOAD_DIR`` environment variable wins, then the entry in
    ``~/.config/user-dirs.dirs``, then ``~/Downloads``.

    Returns:
        Download directory path, or None if no home directory is known
    """
    if sys.platform == "win32":
        profile = os.environ.get("USERPROFILE")
        if not profile:
            return None
        return Path(profile) / "Downloads"

    home = os.environ.get("HOME")
    if not home:
        return None

    env_value = os.environ.get(XDG_DOWNLOAD_KEY)
    if env_value:
        resolved = _expand_home(env_value, home)
        if resolved is not None:
            return resolved

    user_dirs_file = Path(home) / ".config" / "user-dirs.dirs"
    if user_dirs_file.exists():
        configured = _read_user_dirs_file(user_dirs_file, home)
        if configured is not None:
            return configured

    return Path(home) / "Downloads"
