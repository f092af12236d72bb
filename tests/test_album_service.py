from __future__ import annotations

from datetime import datetime, timedelta
import os

from bs4 import BeautifulSoup
from conftest import write_media
import pytest

from core.errors import MalformedDocumentError
from core.models import OrderAlbumField
from core.services.interfaces import (
    CreateAlbumLibraryRequest,
    CreatePhotoAlbumRequest,
    FillGlobalPhotoAlbumRequest,
    FillPhotoAlbumRequest,
)
from infrastructure.album_service import PhotoAlbumService, write_text_atomic
from infrastructure.library_service import AlbumLibraryService
from infrastructure.media_scanner import MediaScanner

T0 = datetime(2024, 5, 1, 9, 0)


@pytest.fixture
def library_service(resource, settings_provider, messages) -> AlbumLibraryService:
    return AlbumLibraryService(resource, settings_provider, messages.append)


@pytest.fixture
def service(resource, settings_provider, library_service, messages) -> PhotoAlbumService:
    return PhotoAlbumService(resource, settings_provider, library_service, notify=messages.append)


def read(path) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()


def cards(path) -> list[str]:
    page = BeautifulSoup(read(path), "html.parser")
    return [card["data-src"] for card in page.select("#gallery .card[data-src]")]


def folder_links(path) -> list[str]:
    page = BeautifulSoup(read(path), "html.parser")
    return [a["href"] for a in page.select("#gallery .photos--folders a[href]")]


def test_init_creates_library_scaffold(library_service, tmp_path, messages):
    library = library_service.create(CreateAlbumLibraryRequest(str(tmp_path)))

    for path in (library.style_path, library.script_path, library.readme_path):
        assert os.path.isfile(path)
    assert '"index_html"' in read(library.settings_path)
    assert messages[0] == f"File added: {os.path.join('System', 'styles.css')}"


def test_init_keeps_existing_files_unless_forced(library_service, tmp_path, messages):
    library = library_service.create(CreateAlbumLibraryRequest(str(tmp_path)))
    with open(library.style_path, "w", encoding="utf-8") as f:
        f.write("custom")

    library_service.create(CreateAlbumLibraryRequest(str(tmp_path)))
    assert read(library.style_path) == "custom"
    assert f"File already exists: {os.path.join('System', 'styles.css')}" in messages

    library_service.create(CreateAlbumLibraryRequest(str(tmp_path), is_force=True))
    assert read(library.style_path) != "custom"


def test_new_album_scaffold(service, tmp_path):
    album = service.create(CreatePhotoAlbumRequest(str(tmp_path), "Trip"))

    assert album.name == "Trip"
    assert album.relative_path == "Trip"
    assert os.path.isdir(tmp_path / "Trip" / "Files")
    assert os.path.isfile(tmp_path / "Trip" / "Files" / "README.md")
    assert "{{title}}" in read(tmp_path / "Trip" / "index.html")


def test_fill_writes_grouped_gallery(service, tmp_path, messages):
    files = tmp_path / "Trip" / "Files"
    write_media(files, "IMG_002.jpg", T0 + timedelta(minutes=1))
    write_media(files, "IMG_001.jpg", T0)
    write_media(files, "notes.txt", T0)

    path = service.fill(FillPhotoAlbumRequest(str(tmp_path), "Trip"))

    assert path == str(tmp_path / "Trip" / "index.html")
    assert cards(path) == ["Files/IMG_001.jpg", "Files/IMG_002.jpg"]
    page = BeautifulSoup(read(path), "html.parser")
    assert page.select_one("link[rel=stylesheet]")["href"] == "../System/styles.css"
    assert page.select_one("time")["datetime"] == "2024-05-01"
    assert messages[-1] == f"Gallery updated: {os.path.join('Trip', 'index.html')}"


def test_fill_twice_is_stable_and_tracks_deletions(service, tmp_path):
    files = tmp_path / "Trip" / "Files"
    write_media(files, "a.jpg", T0)
    write_media(files, "b.mp4", T0 + timedelta(hours=1))
    request = FillPhotoAlbumRequest(str(tmp_path), "Trip")

    first = read(service.fill(request))
    assert read(service.fill(request)) == first

    os.remove(files / "a.jpg")
    assert cards(service.fill(request)) == ["Files/b.mp4"]


def test_fill_without_media_reports_it(service, tmp_path, messages):
    service.fill(FillPhotoAlbumRequest(str(tmp_path), "Empty"))

    assert f"No media files found in {os.path.join('Empty', 'Files')}" in messages


def test_fill_uses_library_settings(service, tmp_path):
    service.create(CreatePhotoAlbumRequest(str(tmp_path), "Trip"))
    settings_path = tmp_path / "System" / "album_settings.json"
    settings_path.write_text('{"index_html": {"max_group_size": 1}}', encoding="utf-8")
    files = tmp_path / "Trip" / "Files"
    write_media(files, "a.jpg", T0)
    write_media(files, "b.jpg", T0)

    path = service.fill(FillPhotoAlbumRequest(str(tmp_path), "Trip"))

    page = BeautifulSoup(read(path), "html.parser")
    assert len(page.select("#gallery .group")) == 2


def test_fill_lists_child_albums_with_media_and_page(service, tmp_path):
    write_media(tmp_path / "Trip" / "Day 2" / "Files", "x.jpg", T0 + timedelta(days=1))
    write_media(tmp_path / "Trip" / "Day 1" / "Files", "y.jpg", T0)
    os.makedirs(tmp_path / "Trip" / "No media")
    service.fill(FillPhotoAlbumRequest(str(tmp_path), os.path.join("Trip", "Day 1")))
    service.fill(FillPhotoAlbumRequest(str(tmp_path), os.path.join("Trip", "Day 2")))
    (tmp_path / "Trip" / "No media" / "index.html").write_text("x", encoding="utf-8")

    path = service.fill(
        FillPhotoAlbumRequest(str(tmp_path), "Trip", order_album_field=OrderAlbumField.DATE)
    )

    assert folder_links(path) == ["Day%201/index.html", "Day%202/index.html"]


def test_child_album_without_page_is_not_listed(service, tmp_path):
    write_media(tmp_path / "Trip" / "Day 1" / "Files", "y.jpg", T0)

    path = service.fill(FillPhotoAlbumRequest(str(tmp_path), "Trip"))

    assert folder_links(path) == []


def test_fill_global_processes_deepest_first(service, tmp_path):
    write_media(tmp_path / "A" / "Files", "a.jpg", T0)
    write_media(tmp_path / "A" / "B" / "Files", "b.jpg", T0)
    os.makedirs(tmp_path / ".hidden" / "Files")
    write_media(tmp_path / ".hidden" / "Files", "h.jpg", T0)

    result = service.fill_global(FillGlobalPhotoAlbumRequest(str(tmp_path)))

    assert result.failed == []
    assert result.updated_paths == [
        str(tmp_path / "A" / "B" / "index.html"),
        str(tmp_path / "A" / "index.html"),
        str(tmp_path / "index.html"),
    ]
    assert folder_links(tmp_path / "index.html") == ["A/index.html"]
    assert folder_links(tmp_path / "A" / "index.html") == ["B/index.html"]
    assert cards(tmp_path / "A" / "B" / "index.html") == ["Files/b.jpg"]
    assert not os.path.exists(tmp_path / ".hidden" / "index.html")


def test_fill_global_stops_on_first_failure(service, tmp_path):
    write_media(tmp_path / "A" / "Files", "a.jpg", T0)
    (tmp_path / "A" / "index.html").write_text("   ", encoding="utf-8")

    with pytest.raises(MalformedDocumentError):
        service.fill_global(FillGlobalPhotoAlbumRequest(str(tmp_path)))

    assert read(tmp_path / "index.html").find("{{title}}") >= 0


def test_fill_global_can_continue_after_failure(service, tmp_path, messages):
    write_media(tmp_path / "A" / "Files", "a.jpg", T0)
    write_media(tmp_path / "C" / "Files", "c.jpg", T0)
    (tmp_path / "A" / "index.html").write_text("   ", encoding="utf-8")

    result = service.fill_global(
        FillGlobalPhotoAlbumRequest(str(tmp_path), continue_on_error=True)
    )

    assert [path for path, _ in result.failed] == ["A"]
    assert str(tmp_path / "index.html") in result.updated_paths
    assert cards(tmp_path / "C" / "index.html") == ["Files/c.jpg"]
    assert any(message.startswith("Album A failed") for message in messages)


def test_scanner_reads_supported_top_level_files(tmp_path):
    write_media(tmp_path, "b.MP4", T0)
    write_media(tmp_path, "a.jpeg", T0 + timedelta(minutes=3))
    write_media(tmp_path, "c.doc", T0)
    write_media(tmp_path / "nested", "d.jpg", T0)

    media = MediaScanner().load_media_files(str(tmp_path))

    assert [(m.name, m.is_image) for m in media] == [("a.jpeg", True), ("b.MP4", False)]
    assert media[0].created_at == T0 + timedelta(minutes=3)


def test_scanner_missing_directory_is_empty(tmp_path):
    assert MediaScanner().load_media_files(str(tmp_path / "absent")) == []


def test_write_text_atomic_replaces_file(tmp_path):
    target = tmp_path / "index.html"
    target.write_text("old", encoding="utf-8")

    write_text_atomic(str(target), "new\n")

    assert target.read_bytes() == b"new\n"
    assert os.listdir(tmp_path) == ["index.html"]
