"""Sorting service for child album listings.

Albums are ordered either by name or by the timestamp of their earliest media
file. Albums without media sort after dated ones; ties are broken by name.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from core.models import Album, OrderAlbumField


class AlbumSortService:
    """Provides ordering utilities for `Album` lists."""

    def sort(self, albums: Iterable[Album], order_field: OrderAlbumField) -> list[Album]:
        """Return a new list of `albums` ordered by `order_field`.

        Args:
            albums: Albums to order.
            order_field: `NAME` for lexicographic order, `DATE` for earliest media first.
        """
        decorated: list[tuple[tuple[Any, ...], Album]] = []
        for album in albums:
            if order_field is OrderAlbumField.DATE:
                earliest = album.earliest_media_file()
                # Undated albums go last
                key: tuple[Any, ...] = (
                    (0, earliest.created_at) if earliest else (1, None),
                    album.name,
                )
            else:
                key = (album.name,)
            decorated.append((key, album))

        decorated.sort(key=lambda x: x[0])
        return [album for _, album in decorated]
