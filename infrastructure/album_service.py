"""Album creation and gallery page regeneration.

Wires scanning, settings and the page reconciler together and owns every
filesystem write of an album: the scaffold files and the atomic replacement of
`index.html`.
"""

from __future__ import annotations

from collections.abc import Callable
import os
import tempfile

from loguru import logger

from core.errors import AlbumError
from core.models import Album
from core.services.interfaces import (
    CreatePhotoAlbumRequest,
    FillGlobalPhotoAlbumRequest,
    FillGlobalResult,
    FillPhotoAlbumRequest,
)
from core.services.reconcile_service import GalleryPageReconciler
from infrastructure.library_service import AlbumLibraryService
from infrastructure.media_scanner import MediaScanner
from infrastructure.resource import Resource
from infrastructure.service_base import AlbumServiceBase
from infrastructure.settings import AppSettingsProvider


class PhotoAlbumService(AlbumServiceBase):
    """Creates albums and keeps their `index.html` in sync with the disk."""

    def __init__(
        self,
        resource: Resource,
        settings_provider: AppSettingsProvider,
        library_service: AlbumLibraryService,
        scanner: MediaScanner | None = None,
        notify: Callable[[str], None] = print,
    ) -> None:
        super().__init__(settings_provider, notify)
        self._resource = resource
        self._library_service = library_service
        self._scanner = scanner or MediaScanner()

    def create(self, request: CreatePhotoAlbumRequest) -> Album:
        """Create the album directories and scaffold files, then scan the album.

        An existing `index.html` is never overwritten.
        """
        library = self._library_service.create(request.to_create_album_library())
        os.makedirs(Album.get_full_path(library, request.name), exist_ok=True)
        os.makedirs(Album.get_files_directory_path(library, request.name), exist_ok=True)

        full_path = Album.get_full_path(library, request.name)
        album = library.create_album(
            request.name,
            self._scanner.load_media_files(Album.get_files_directory_path(library, request.name)),
            self._scanner.load_child_albums(library, full_path, depth=1, require_index_html=True),
        )

        self.create_file(
            album.readme_path,
            library.get_relative_path(album.readme_path),
            self._resource.read_text(Album.README_TEMPLATE_NAME),
        )
        self.create_file(
            album.index_html_path,
            library.get_relative_path(album.index_html_path),
            self._resource.read_text(Album.INDEX_HTML_TEMPLATE_NAME),
        )
        return album

    def fill(self, request: FillPhotoAlbumRequest) -> str:
        """Reconcile the album page with its media and child albums.

        Returns:
            str: Path of the written `index.html`.

        Raises:
            AlbumError: The page or the library settings are unusable.
        """
        album = self.create(request.to_create_photo_album())
        library = album.library
        settings = self.settings_provider.load_album_settings(library.settings_path)

        if not album.media_files:
            self.notify(
                self.localization.format(
                    "no_media_in_file_directory",
                    library.get_relative_path(album.files_directory_path),
                )
            )

        with open(album.index_html_path, "r", encoding="utf-8-sig") as f:
            page_html = f.read()

        reconciler = GalleryPageReconciler(settings, request.order_album_field)
        result, summary = reconciler.reconcile_with_summary(page_html, album)
        write_text_atomic(album.index_html_path, result)

        logger.info(
            "Gallery updated: {} (media +{} -{}, albums +{} -{})",
            album.index_html_path,
            summary.media_added,
            summary.media_removed,
            summary.albums_added,
            summary.albums_removed,
        )
        self.notify(
            self.localization.format(
                "gallery_updated", library.get_relative_path(album.index_html_path)
            )
        )
        return album.index_html_path

    def fill_global(self, request: FillGlobalPhotoAlbumRequest) -> FillGlobalResult:
        """Fill every album of the library, deepest albums first and the root last.

        All albums are discovered before the first page is written. With
        `continue_on_error` a failed album is logged and recorded in the result;
        otherwise the first failure propagates and later albums stay untouched.
        """
        library = self._library_service.create(request.to_create_album_library())
        root = self.create(CreatePhotoAlbumRequest(library.root_path, library.root_path))

        albums: list[Album] = []
        stack = [root]
        while stack:
            album = stack.pop()
            stack.extend(
                self._scanner.load_child_albums(
                    library, album.full_path, depth=0, require_index_html=False
                )
            )
            albums.append(album)
        albums.reverse()
        logger.info("Filling {} albums in {}", len(albums), library.root_path)

        result = FillGlobalResult()
        for album in albums:
            try:
                path = self.fill(
                    FillPhotoAlbumRequest(
                        library.root_path, album.relative_path, request.order_album_field
                    )
                )
            except (AlbumError, OSError) as ex:
                if not request.continue_on_error:
                    raise
                logger.exception("Album fill failed: {}", album.relative_path)
                self.notify(self.localization.format("album_failed", album.relative_path, ex))
                result.failed.append((album.relative_path, str(ex)))
                continue
            result.updated_paths.append(path)
        return result


def write_text_atomic(path: str, text: str) -> None:
    """Replace `path` with `text` (UTF-8, no BOM) via a temp file in the same folder."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, temp_path = tempfile.mkstemp(prefix=".index-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise
