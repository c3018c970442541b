"""
Capture date extraction from image metadata.

Pillow's EXIF decoding is not treated as reentrant, so every read goes through
one process-wide gate shared by all concurrent classification calls.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Optional

import arrow
from PIL import ExifTags, Image

from ..shared.file_utils import display_path

logger = logging.getLogger(__name__)

# Date formats accepted for the first 10 characters of DateTimeOriginal
CAPTURE_DATE_FORMATS = [
    "YYYY:MM:DD",
    "YYYY-MM-DD",
]

DATE_TIME_ORIGINAL = ExifTags.Base.DateTimeOriginal
EXIF_IFD = ExifTags.IFD.Exif


class MetadataGate:
    """
    Exclusive handle around the image metadata decoder.

    Counts acquisitions and how many of them had to wait, so contention on
    the decoder is observable.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.acquisitions = 0
        self.contended = 0

    def __enter__(self) -> "MetadataGate":
        if not self._lock.acquire(blocking=False):
            self._lock.acquire()
            self.contended += 1
        self.acquisitions += 1
        return self

    def __exit__(self, *args: Any) -> None:
        self._lock.release()


# Single gate for the whole process
METADATA_GATE = MetadataGate()


def normalize_capture_date(raw: Any) -> Optional[str]:
    """
    Normalize a DateTimeOriginal value to ``YYYY-MM-DD``.

    Args:
        raw: Raw EXIF value, e.g. "2023:06:15 14:30:22"

    Returns:
        Date string such as "2023-06-15", or None if it cannot be parsed
    """
    if isinstance(raw, bytes):
        raw = raw.decode("ascii", errors="ignore")
    if not isinstance(raw, str):
        return None

    raw = raw.strip()
    if len(raw) < 10:
        return None

    try:
        return arrow.get(raw[:10], CAPTURE_DATE_FORMATS).format("YYYY-MM-DD")
    except (arrow.ParserError, ValueError, TypeError):
        logger.debug(f"Could not parse capture date: {raw!r}")
        return None


def read_capture_date(image_path: Path, gate: MetadataGate = METADATA_GATE) -> Optional[str]:
    """
    Read the original capture date of an image.

    Looks for DateTimeOriginal in the EXIF sub-IFD first and then in the
    base IFD.

    Args:
        image_path: Path to the image file
        gate: Exclusive decoder handle, the process-wide gate by default

    Returns:
        Capture date as ``YYYY-MM-DD``, or None if the image has none or
        cannot be decoded
    """
    with gate:
        try:
            with Image.open(image_path) as img:
                exif = img.getexif()
                raw = exif.get_ifd(EXIF_IFD).get(DATE_TIME_ORIGINAL)
                if raw is None:
                    raw = exif.get(DATE_TIME_ORIGINAL)
        except Exception as e:
            logger.debug(
                f"Non-critical error reading metadata from {display_path(image_path)}: {e}"
            )
            return None

    if raw is None:
        return None

    return normalize_capture_date(raw)
