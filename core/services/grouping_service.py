"""Time-window grouping of media files.

Files are sorted by creation time (then name) and partitioned greedily: a file
joins the open group while it lies within the window of the group's *first*
file and the group still has room; otherwise a new group starts.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import timedelta

from core.errors import ConfigurationError
from core.models import MediaFile


def group_media_files(
    media_files: Iterable[MediaFile],
    time_window_minutes: int = 2,
    max_group_size: int = 10,
) -> list[list[MediaFile]]:
    """Partition `media_files` into time-windowed groups.

    Args:
        media_files: Files to group, in any order.
        time_window_minutes: Allowed distance from the group's first file.
        max_group_size: Maximum number of files in a group.

    Returns:
        Groups in chronological order; each group is chronologically sorted.
    """
    if time_window_minutes < 0:
        raise ConfigurationError("Group time window can't be negative.")
    if max_group_size < 1:
        raise ConfigurationError("Group size must be at least 1.")

    window = timedelta(minutes=time_window_minutes)
    groups: list[list[MediaFile]] = []
    for media_file in sorted(media_files, key=lambda m: (m.created_at, m.name)):
        if groups:
            current = groups[-1]
            if (
                media_file.created_at - current[0].created_at <= window
                and len(current) < max_group_size
            ):
                current.append(media_file)
                continue
        groups.append([media_file])
    return groups
