"""
Configuration loading and discovery.

The configuration file is a JSON document::

    {
      "categories": {"Documents": [".pdf", ".docx"], ...},
      "rules": [
        {"category": "Projects", "priority": 10,
         "conditions": [{"type": "contains_filename", "values": ["package.json"]}]}
      ]
    }
"""

import json
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from pydantic import ValidationError

from .settings import CONFIG_FILENAME
from .types import Config

logger = logging.getLogger(__name__)

BUNDLED_CONFIG = "default_config.json"


def load_config(config_path: Path) -> Optional[Config]:
    """
    Load and validate a configuration file.

    Args:
        config_path: Path to the JSON configuration file

    Returns:
        Config with rules sorted by priority, or None if the file is missing
        or cannot be parsed
    """
    config_path = Path(config_path)
    if not config_path.exists():
        logger.error(f"Config file not found at {config_path}")
        return None

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading config file {config_path}: {e}")
        return None
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing config file {config_path}: {e}")
        return None

    if not isinstance(document, dict):
        logger.error(f"Error parsing config file {config_path}: expected a JSON object")
        return None

    try:
        config = Config.from_document(document)
    except ValidationError as e:
        logger.error(f"Invalid configuration in {config_path}: {e}")
        return None

    logger.debug(
        f"Loaded {len(config.categories)} extensions and {len(config.rules)} rules "
        f"from {config_path}"
    )
    return config


def bundled_config_path() -> Path:
    """Path of the default configuration shipped with the package."""
    return Path(str(resources.files("tidyfolder.data").joinpath(BUNDLED_CONFIG)))


def user_config_dir() -> Path:
    """Per-user configuration directory for tidyfolder."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config) if xdg_config else Path.home() / ".config"
    return base / "tidyfolder"


def default_config_search_paths(filename: str = CONFIG_FILENAME) -> List[Path]:
    """
    Config locations in the order they are tried.

    Args:
        filename: Config file name to look for

    Returns:
        Working directory, user config directory, then the bundled default
    """
    return [
        Path.cwd() / filename,
        user_config_dir() / filename,
        bundled_config_path(),
    ]


def find_config(search_paths: Iterable[Path]) -> Optional[Tuple[Config, Path]]:
    """
    Load the first configuration that exists and parses.

    Args:
        search_paths: Candidate config files, most preferred first

    Returns:
        Tuple of (config, path it was loaded from), or None if none loaded
    """
    for config_path in search_paths:
        config_path = Path(config_path)
        logger.debug(f"Trying config path: {config_path}")
        if not config_path.exists():
            continue

        config = load_config(config_path)
        if config is not None:
            logger.info(f"Configuration loaded from {config_path}")
            return config, config_path

    logger.error("Failed to load configuration from all search paths")
    return None
