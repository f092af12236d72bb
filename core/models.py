"""Core domain models for media files, albums and album libraries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
import os
from typing import ClassVar

from babel.dates import format_date


class OrderAlbumField(str, Enum):
    """Ordering applied to newly listed child albums."""

    NAME = "name"
    DATE = "date"

    @classmethod
    def parse(cls, value: str | None) -> OrderAlbumField | None:
        """Return the member matching `value` (case-insensitive), or None."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class MediaFile:
    """A scanned image or video inside an album's media folder."""

    name: str
    full_path: str
    is_image: bool
    created_at: datetime

    def created_at_iso(self) -> str:
        """Machine-sortable date, e.g. `2024-05-01`."""
        return self.created_at.strftime("%Y-%m-%d")

    def created_at_human(self, locale: str = "en_US") -> str:
        """Long date for `locale`, e.g. `1 May 2024`."""
        return format_date(self.created_at, format="d MMMM yyyy", locale=locale.replace("-", "_"))


@dataclass
class AlbumLibrary:
    """Root directory that holds the shared assets and every album."""

    SYSTEM_DIRECTORY_NAME: ClassVar[str] = "System"
    README_FILE_NAME: ClassVar[str] = "README.md"
    README_TEMPLATE_NAME: ClassVar[str] = "README_Libraries.md"
    SETTINGS_FILE_NAME: ClassVar[str] = "album_settings.json"
    STYLE_FILE_NAME: ClassVar[str] = "styles.css"
    SCRIPT_FILE_NAME: ClassVar[str] = "script.js"

    root_path: str
    system_path: str = field(init=False)
    readme_path: str = field(init=False)
    settings_path: str = field(init=False)
    style_path: str = field(init=False)
    script_path: str = field(init=False)

    def __post_init__(self) -> None:
        if not self.root_path or not str(self.root_path).strip():
            raise ValueError("Library root path can't be empty.")
        self.root_path = os.path.abspath(str(self.root_path))
        self.system_path = os.path.join(self.root_path, self.SYSTEM_DIRECTORY_NAME)
        self.readme_path = os.path.join(self.root_path, self.README_FILE_NAME)
        self.settings_path = os.path.join(self.system_path, self.SETTINGS_FILE_NAME)
        self.style_path = os.path.join(self.system_path, self.STYLE_FILE_NAME)
        self.script_path = os.path.join(self.system_path, self.SCRIPT_FILE_NAME)

    def get_relative_path(self, path: str) -> str:
        """Return `path` relative to the library root, or absolute when outside it."""
        if not path or not path.strip():
            return path
        full_path = os.path.abspath(path)
        try:
            if os.path.commonpath([full_path, self.root_path]) == self.root_path:
                return os.path.relpath(full_path, self.root_path)
        except ValueError:
            # Different drives on Windows
            pass
        return full_path

    def create_album(
        self,
        relative_path: str,
        media_files: list[MediaFile] | None = None,
        child_albums: list[Album] | None = None,
    ) -> Album:
        """Build an `Album` rooted in this library."""
        return Album(self, relative_path, list(media_files or []), list(child_albums or []))


@dataclass
class Album:
    """An album directory with its media files and qualifying child albums.

    Albums are rebuilt from disk on every scan; only the file tree and the
    generated `index.html` are durable.
    """

    FILES_DIRECTORY_NAME: ClassVar[str] = "Files"
    README_FILE_NAME: ClassVar[str] = "README.md"
    README_TEMPLATE_NAME: ClassVar[str] = "README_Files.md"
    INDEX_HTML_FILE_NAME: ClassVar[str] = "index.html"
    INDEX_HTML_TEMPLATE_NAME: ClassVar[str] = "index_template.html"

    library: AlbumLibrary
    relative_path: str
    media_files: list[MediaFile] = field(default_factory=list)
    child_albums: list[Album] = field(default_factory=list)
    name: str = field(init=False)
    full_path: str = field(init=False)
    files_directory_path: str = field(init=False)
    readme_path: str = field(init=False)
    index_html_path: str = field(init=False)

    def __post_init__(self) -> None:
        if not self.relative_path or not self.relative_path.strip():
            raise ValueError("Album name can't be empty.")
        self.full_path = self.get_full_path(self.library, self.relative_path)
        self.relative_path = self.library.get_relative_path(self.full_path)
        self.name = os.path.basename(self.full_path)
        self.files_directory_path = os.path.join(self.full_path, self.FILES_DIRECTORY_NAME)
        self.readme_path = os.path.join(self.files_directory_path, self.README_FILE_NAME)
        self.index_html_path = os.path.join(self.full_path, self.INDEX_HTML_FILE_NAME)

    @staticmethod
    def get_full_path(library: AlbumLibrary, relative_path: str) -> str:
        """Absolute album directory for `relative_path` inside `library`."""
        return os.path.normpath(os.path.join(library.root_path, relative_path.strip()))

    @staticmethod
    def get_files_directory_path(library: AlbumLibrary, relative_path: str) -> str:
        """Absolute media folder for `relative_path` inside `library`."""
        return os.path.join(Album.get_full_path(library, relative_path), Album.FILES_DIRECTORY_NAME)

    @property
    def is_root(self) -> bool:
        """True when the album directory is the library root."""
        return self.full_path == self.library.root_path

    def earliest_media_file(self) -> MediaFile | None:
        """Oldest media file (ties broken by name), or None for an empty album."""
        if not self.media_files:
            return None
        return min(self.media_files, key=lambda m: (m.created_at, m.name))
