"""Utilities for media date extraction (EXIF and filesystem).

Helpers here are best-effort and do not raise on unreadable metadata; callers
get `None` and fall back to the next source.
"""

from __future__ import annotations

from datetime import datetime
import os
from typing import Any

from loguru import logger
from PIL import Image

# EXIF tag 36867 is DateTimeOriginal (Exif IFD), 306 is DateTime (IFD0)
EXIF_IFD_POINTER = 0x8769
EXIF_DATETIME_ORIGINAL = 36867
EXIF_DATETIME = 306


def get_exif_datetime_original(path: str) -> datetime | None:
    """Extract EXIF DateTimeOriginal (or DateTime) via Pillow.

    Returns None when the file has no EXIF data or the value can't be parsed.
    """
    try:
        with Image.open(path) as im:
            data: Any = im.getexif()
            if not data:
                return None
            val = data.get_ifd(EXIF_IFD_POINTER).get(EXIF_DATETIME_ORIGINAL) or data.get(
                EXIF_DATETIME
            )
            if not val:
                return None
            return parse_exif_datetime(str(val))
    except (OSError, ValueError, TypeError, SyntaxError) as ex:
        logger.debug("EXIF read failed for {}: {}", path, ex)
        return None


def parse_exif_datetime(value: str) -> datetime | None:
    """Parse the common EXIF format `YYYY:MM:DD HH:MM:SS` (or an ISO variant)."""
    val_str = value.strip().rstrip("\x00")
    try:
        if len(val_str) >= 19 and val_str[4] == ":" and val_str[7] == ":":
            return datetime.strptime(val_str[:19], "%Y:%m:%d %H:%M:%S")
        return datetime.fromisoformat(val_str.replace("/", "-"))
    except ValueError:
        return None


def get_file_modified_datetime(path: str) -> datetime:
    """Last modification time of `path`."""
    return datetime.fromtimestamp(os.path.getmtime(path))


def get_media_created_at(path: str, is_image: bool) -> datetime:
    """Capture time of a media file: EXIF for images, else modification time."""
    if is_image:
        taken = get_exif_datetime_original(path)
        if taken is not None:
            return taken
    return get_file_modified_datetime(path)
