"""Directory scanning for album media files and child albums."""

from __future__ import annotations

import os

from loguru import logger

from core.media_types import is_image, is_supported
from core.models import Album, AlbumLibrary, MediaFile
from infrastructure.utils import get_media_created_at

EXCLUDED_DIRECTORY_NAMES = frozenset(
    {Album.FILES_DIRECTORY_NAME, AlbumLibrary.SYSTEM_DIRECTORY_NAME}
)


def is_album_directory_name(name: str) -> bool:
    """False for media/system folders and hidden directories."""
    return bool(name) and name not in EXCLUDED_DIRECTORY_NAMES and not name.startswith(".")


class MediaScanner:
    """Builds `MediaFile` and child `Album` lists from the file tree."""

    def load_media_files(self, directory: str) -> list[MediaFile]:
        """Supported files directly inside `directory`, sorted by name.

        A missing directory yields an empty list.
        """
        if not os.path.isdir(directory):
            return []

        media_files: list[MediaFile] = []
        with os.scandir(directory) as entries:
            for entry in entries:
                if not entry.is_file() or not is_supported(entry.name):
                    continue
                image = is_image(entry.name)
                media_files.append(
                    MediaFile(
                        name=entry.name,
                        full_path=os.path.abspath(entry.path),
                        is_image=image,
                        created_at=get_media_created_at(entry.path, image),
                    )
                )
        media_files.sort(key=lambda m: m.name)
        logger.debug("Found {} media files in {}", len(media_files), directory)
        return media_files

    def load_child_albums(
        self,
        library: AlbumLibrary,
        album_path: str,
        depth: int = 1,
        require_index_html: bool = True,
    ) -> list[Album]:
        """Qualifying child albums of the album directory `album_path`.

        A child qualifies when it holds media files (directly or in a nested
        album) and, with `require_index_html`, already has its `index.html`.

        Args:
            library: Library the albums belong to.
            album_path: Absolute path of the parent album directory.
            depth: Levels whose media files and children are loaded; 0 only
                discovers the children.
            require_index_html: Skip children without a generated page.

        Returns:
            list[Album]: Children sorted by directory name.
        """
        if not os.path.isdir(album_path):
            return []

        albums: list[Album] = []
        for name in sorted(os.listdir(album_path)):
            child_path = os.path.join(album_path, name)
            if not os.path.isdir(child_path) or not is_album_directory_name(name):
                continue
            if require_index_html and not os.path.isfile(
                os.path.join(child_path, Album.INDEX_HTML_FILE_NAME)
            ):
                continue
            if not self.contains_media(child_path):
                continue

            relative_path = library.get_relative_path(child_path)
            media_files = (
                self.load_media_files(Album.get_files_directory_path(library, relative_path))
                if depth > 0
                else []
            )
            children = (
                self.load_child_albums(library, child_path, depth - 1, require_index_html)
                if depth > 1
                else []
            )
            albums.append(library.create_album(relative_path, media_files, children))
        return albums

    def contains_media(self, album_path: str) -> bool:
        """True when the album or any nested album has a supported media file."""
        files_path = os.path.join(album_path, Album.FILES_DIRECTORY_NAME)
        if os.path.isdir(files_path):
            with os.scandir(files_path) as entries:
                if any(entry.is_file() and is_supported(entry.name) for entry in entries):
                    return True
        with os.scandir(album_path) as entries:
            subdirectories = [
                entry.path
                for entry in entries
                if entry.is_dir() and is_album_directory_name(entry.name)
            ]
        return any(self.contains_media(path) for path in subdirectories)
