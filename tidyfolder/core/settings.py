"""Application settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

JOURNAL_FILENAME = "organizer_journal.json"
LOG_FILENAME = "organizer.log"
CONFIG_FILENAME = "config.json"


class OrganizerSettings(BaseSettings):
    """Settings loaded from ``TIDYFOLDER_*`` environment variables or ``.env``."""

    journal_file: Path = Path(JOURNAL_FILENAME)
    log_file: Optional[Path] = Path(LOG_FILENAME)
    config_filename: str = CONFIG_FILENAME

    # Scan tuning
    chunk_size: int = Field(default=128, ge=1)
    max_workers: Optional[int] = Field(default=None, ge=1)

    # Number of recent log lines shown by the interactive session
    log_buffer_size: int = Field(default=100, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="TIDYFOLDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> OrganizerSettings:
    """Read settings from the current environment."""
    return OrganizerSettings()
