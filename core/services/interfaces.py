"""Request objects and shared results for the album services.

Requests carry fully-resolved parameters; services never prompt for input.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.models import OrderAlbumField


def _require(value: str, name: str) -> None:
    if not value or not str(value).strip():
        raise ValueError(f"{name} can't be empty.")


@dataclass(frozen=True)
class CreateAlbumLibraryRequest:
    """Create (or refresh with `is_force`) a library at `root_path`.

    Attributes:
        root_path: Library root directory.
        is_force: Overwrite the shared assets and settings when they exist.
    """

    root_path: str
    is_force: bool = False

    def __post_init__(self) -> None:
        _require(self.root_path, "Root path")


@dataclass(frozen=True)
class CreatePhotoAlbumRequest:
    """Create album `name` (a path relative to the root) inside a library."""

    root_path: str
    name: str

    def __post_init__(self) -> None:
        _require(self.root_path, "Root path")
        _require(self.name, "Album name")

    def to_create_album_library(self) -> CreateAlbumLibraryRequest:
        return CreateAlbumLibraryRequest(self.root_path, is_force=False)


@dataclass(frozen=True)
class FillPhotoAlbumRequest:
    """Regenerate the page of album `name`.

    Attributes:
        root_path: Library root directory.
        name: Album path relative to the root.
        order_album_field: Ordering of newly listed child albums.
    """

    root_path: str
    name: str
    order_album_field: OrderAlbumField = OrderAlbumField.DATE

    def __post_init__(self) -> None:
        _require(self.root_path, "Root path")
        _require(self.name, "Album name")

    def to_create_photo_album(self) -> CreatePhotoAlbumRequest:
        return CreatePhotoAlbumRequest(self.root_path, self.name)


@dataclass(frozen=True)
class FillGlobalPhotoAlbumRequest:
    """Regenerate every album page of a library, deepest albums first.

    Attributes:
        root_path: Library root directory.
        order_album_field: Ordering of newly listed child albums.
        continue_on_error: Log a failed album and go on instead of stopping.
    """

    root_path: str
    order_album_field: OrderAlbumField = OrderAlbumField.DATE
    continue_on_error: bool = False

    def __post_init__(self) -> None:
        _require(self.root_path, "Root path")

    def to_create_album_library(self) -> CreateAlbumLibraryRequest:
        return CreateAlbumLibraryRequest(self.root_path, is_force=False)


@dataclass(frozen=True)
class CompressVideoRequest:
    """Compress a single video file or every video inside a folder."""

    path: str


@dataclass
class FillGlobalResult:
    """Outcome of a whole-library fill.

    Attributes:
        updated_paths: `index.html` files written, in processing order.
        failed: Tuples of (album relative path, reason) for failures.
    """

    updated_paths: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class ReconcileSummary:
    """Counts of changes made to one gallery page."""

    media_added: int = 0
    media_removed: int = 0
    albums_added: int = 0
    albums_removed: int = 0
    albums_updated: int = 0
    styles_removed: list[str] = field(default_factory=list)
    scripts_removed: list[str] = field(default_factory=list)
    style_added: str | None = None
    script_added: str | None = None
