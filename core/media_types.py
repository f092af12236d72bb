"""Media type detection by file extension."""

from pathlib import Path

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tiff")
VIDEO_EXTENSIONS = (".mp4", ".webm", ".mov", ".m4v", ".avi", ".mkv")


def is_image(path: str) -> bool:
    """Check if a file path is a supported image based on extension.

    Args:
        path: File path or file name to check

    Returns:
        bool: True if the file is an image format
    """
    return Path(path).suffix.lower() in IMAGE_EXTENSIONS


def is_video(path: str) -> bool:
    """Check if a file path is a supported video based on extension.

    Args:
        path: File path or file name to check

    Returns:
        bool: True if the file is a video format
    """
    return Path(path).suffix.lower() in VIDEO_EXTENSIONS


def is_supported(path: str) -> bool:
    """True for any file the gallery can show."""
    return is_image(path) or is_video(path)
