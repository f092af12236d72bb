from __future__ import annotations

from datetime import datetime

from conftest import make_media

from core.models import OrderAlbumField
from core.services.sort_service import AlbumSortService


def test_sort_by_name(library):
    albums = [library.create_album(name) for name in ("b", "c", "a")]

    result = AlbumSortService().sort(albums, OrderAlbumField.NAME)

    assert [a.name for a in result] == ["a", "b", "c"]


def test_sort_by_date_uses_earliest_media_and_puts_empty_albums_last(library):
    late = library.create_album("late", [make_media("x.jpg", datetime(2024, 3, 1))])
    early = library.create_album(
        "early",
        [make_media("y.jpg", datetime(2024, 6, 1)), make_media("z.jpg", datetime(2023, 1, 1))],
    )
    empty_b = library.create_album("empty-b")
    empty_a = library.create_album("empty-a")

    result = AlbumSortService().sort([empty_b, late, empty_a, early], OrderAlbumField.DATE)

    assert [a.name for a in result] == ["early", "late", "empty-a", "empty-b"]


def test_sort_by_date_ties_broken_by_name(library):
    when = datetime(2024, 1, 1)
    albums = [
        library.create_album("b", [make_media("1.jpg", when)]),
        library.create_album("a", [make_media("2.jpg", when)]),
    ]

    assert [a.name for a in AlbumSortService().sort(albums, OrderAlbumField.DATE)] == ["a", "b"]


def test_sort_returns_new_list(library):
    albums = [library.create_album("b"), library.create_album("a")]

    AlbumSortService().sort(albums, OrderAlbumField.NAME)

    assert [a.name for a in albums] == ["b", "a"]
