"""
Pytest configuration and fixtures for tidyfolder tests.
"""

import logging
import tempfile
from pathlib import Path
from typing import Callable, Generator, List, Optional

import pytest
from PIL import Image

from tidyfolder.core.types import Condition, ConditionType, Config, Rule

EXIF_DATE_TIME_ORIGINAL = 0x9003


@pytest.fixture(autouse=True)
def reset_root_handlers() -> Generator[None, None, None]:
    """Drop console and file handlers installed by setup_logging during a test."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()


# ==============================================================================
# File and directory fixtures
# ==============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_file() -> Callable[..., Path]:
    """Factory creating a file (and its parents) with some content."""

    def _make_file(path: Path, content: str = "content") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _make_file


@pytest.fixture
def make_exif_image() -> Callable[..., Path]:
    """
    Factory creating a JPEG, optionally tagged with a capture date.

    The date is written as DateTimeOriginal in EXIF format,
    e.g. "2023:06:15 14:30:22".
    """

    def _make_exif_image(path: Path, date_time_original: Optional[str] = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        img = Image.new("RGB", (32, 32), color="blue")
        if date_time_original is None:
            img.save(path, "JPEG")
        else:
            exif = Image.Exif()
            exif[EXIF_DATE_TIME_ORIGINAL] = date_time_original
            img.save(path, "JPEG", exif=exif)
        return path

    return _make_exif_image


# ==============================================================================
# Configuration fixtures
# ==============================================================================


def build_rules() -> List[Rule]:
    """Rules covering every condition type."""
    return [
        Rule(
            category="Photos/{exif_year}",
            priority=5,
            conditions=[
                Condition(type=ConditionType.EXIF_DATE_MATCHES, values=["****-**-**"])
            ],
        ),
        Rule(
            category="Projects",
            priority=10,
            conditions=[
                Condition(
                    type=ConditionType.CONTAINS_FILENAME_PATTERN,
                    values=["package.json", "Cargo.toml"],
                )
            ],
        ),
        Rule(
            category="Projects",
            priority=20,
            conditions=[
                Condition(
                    type=ConditionType.CONTAINS_SUBDIRECTORY_NAMED, values=[".git"]
                )
            ],
        ),
        Rule(
            category="Extracted Archives",
            priority=30,
            conditions=[Condition(type=ConditionType.SUBFOLDER_MATCHES_ARCHIVE)],
        ),
        Rule(
            category="Photo Albums",
            priority=40,
            conditions=[
                Condition(type=ConditionType.HAS_NO_SUBDIRECTORIES),
                Condition(
                    type=ConditionType.FILE_CATEGORY_PERCENTAGE,
                    values=["Images"],
                    threshold=0.8,
                ),
            ],
        ),
    ]


@pytest.fixture
def config() -> Config:
    """Configuration with a few categories and the standard rule set."""
    return Config(
        categories={
            ".pdf": "Documents",
            ".docx": "Documents",
            ".jpg": "Images",
            ".jpeg": "Images",
            ".png": "Images",
            ".mp3": "Audio",
            ".zip": "Archives",
        },
        rules=build_rules(),
    )


@pytest.fixture
def config_document() -> dict:
    """Configuration in its on-disk JSON shape."""
    return {
        "categories": {
            "Documents": [".pdf", ".DOCX"],
            "Images": [".jpg", ".png"],
        },
        "rules": [
            {
                "category": "Projects",
                "priority": 10,
                "conditions": [
                    {"type": "contains_filename_pattern", "values": ["package.json"]}
                ],
            },
            {
                "category": "Photos/{exif_year}",
                "priority": 5,
                "conditions": [
                    {"type": "exif_date_matches", "values": ["****-**-**"]}
                ],
            },
        ],
    }
