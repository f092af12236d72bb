"""Gallery page reconciliation.

Updates an album page against the current disk state without discarding manual
edits: media cards and child album cards are diffed by identity, stale cards
(and the rows/groups they leave empty) are removed, new entries are rendered
from the configured templates, dead stylesheet/script links are pruned and the
result is pretty-printed.

Steps run in a fixed order: header, albums, media, asset links, serialization.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
import html
import os
from pathlib import PurePosixPath
import re
from urllib.parse import quote, unquote

from bs4.element import Tag
from loguru import logger

from core.errors import MalformedDocumentError, StructuralError
from core.html.html_document import HtmlDocument, InsertPosition
from core.html.html_prettifier import HtmlPrettifier
from core.models import Album, MediaFile, OrderAlbumField
from core.services.grouping_service import group_media_files
from core.services.header_template import PageHeaderTemplate
from core.services.interfaces import ReconcileSummary
from core.services.sort_service import AlbumSortService
from core.settings import AppSettings

GALLERY_SELECTOR = ".container #gallery"
CARD_SELECTOR = ".card"
MEDIA_ELEMENT_SELECTOR = "img, video"
PHOTOS_SELECTOR = ".photos"
GROUP_SELECTOR = ".group"
ALBUM_LISTING_SELECTOR = ".photos--folders"
ALBUM_LINK_SELECTOR = ".card a[href]"
FOLDER_COUNT_SELECTOR = ".folder-count"
STYLE_SELECTOR = "link[rel=stylesheet], link[rel=preload][as=style]"
SCRIPT_SELECTOR = "script[src]"

_URL_WITH_SCHEME = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*:|//)")


class GalleryPageReconciler:
    """Produces the updated page of one album from its current HTML."""

    def __init__(
        self,
        settings: AppSettings,
        order_album_field: OrderAlbumField = OrderAlbumField.DATE,
        prettifier: HtmlPrettifier | None = None,
        sorter: AlbumSortService | None = None,
        file_exists: Callable[[str], bool] = os.path.exists,
    ) -> None:
        """Create a reconciler.

        Args:
            settings: Templates, grouping parameters and labels.
            order_album_field: Ordering of newly listed child albums.
            prettifier: Output formatter (defaults to 2-space indentation).
            sorter: Album ordering service (defaults to `AlbumSortService`).
            file_exists: Existence check used to prune dead asset links.
        """
        self._settings = settings
        self._index_html = settings.index_html
        self._order_album_field = order_album_field
        self._prettifier = prettifier or HtmlPrettifier()
        self._sorter = sorter or AlbumSortService()
        self._file_exists = file_exists

    def reconcile(self, page_html: str, album: Album) -> str:
        """Return the reconciled, pretty-printed page for `album`."""
        result, _ = self.reconcile_with_summary(page_html, album)
        return result

    def reconcile_with_summary(self, page_html: str, album: Album) -> tuple[str, ReconcileSummary]:
        """Like `reconcile`, also returning counts of the changes made.

        Raises:
            MalformedDocumentError: `page_html` is blank or can't be parsed.
            StructuralError: The page has no gallery container.
        """
        if not isinstance(page_html, str) or not page_html.strip():
            raise MalformedDocumentError("Page HTML is empty.")

        summary = ReconcileSummary()
        page_html = (
            PageHeaderTemplate(page_html, self._settings.localization)
            .build_header(album.name, album.earliest_media_file(), self._settings.locale)
            .build_controls()
            .build_html()
        )
        document = HtmlDocument.parse(page_html)
        gallery = document.query_selector(GALLERY_SELECTOR)
        if gallery is None:
            raise StructuralError("Gallery container element not found in HTML template.")

        if self._index_html.supports_albums:
            self._reconcile_albums(document, gallery, album.child_albums, summary)
        self._reconcile_media(document, gallery, album.media_files, summary)
        self._reconcile_asset_links(document, album, summary)

        logger.debug(
            "Reconciled {}: media +{} -{}, albums +{} -{} ~{}",
            album.relative_path,
            summary.media_added,
            summary.media_removed,
            summary.albums_added,
            summary.albums_removed,
            summary.albums_updated,
        )
        return self._prettifier.format(document.serialize()), summary

    # Albums
    def _reconcile_albums(
        self,
        document: HtmlDocument,
        gallery: Tag,
        child_albums: Iterable[Album],
        summary: ReconcileSummary,
    ) -> None:
        listing = document.query_selector(ALBUM_LISTING_SELECTOR, gallery)
        existing: dict[str, Tag] = {}
        duplicates: list[Tag] = []
        if listing is not None:
            for link in document.query_all(ALBUM_LINK_SELECTOR, listing):
                name = album_identity(document.get_attribute(link, "href"))
                card = document.closest(link, CARD_SELECTOR)
                if name is None or card is None:
                    continue
                if name in existing and existing[name] is not card:
                    duplicates.append(existing[name])
                existing[name] = card

        current = {child.name: child for child in child_albums}
        to_add = [child for name, child in current.items() if name not in existing]
        to_remove = [card for name, card in existing.items() if name not in current]
        to_remove.extend(duplicates)
        to_update = [(existing[name], child) for name, child in current.items() if name in existing]
        if not (to_add or to_remove or to_update):
            return

        for card, child in to_update:
            count_element = document.query_selector(FOLDER_COUNT_SELECTOR, card)
            count_text = str(len(child.media_files))
            if count_element is not None and count_element.get_text(strip=True) != count_text:
                document.set_text(count_element, count_text)
                summary.albums_updated += 1

        for card in to_remove:
            document.remove(card)
        summary.albums_removed = len(to_remove)

        if (
            listing is not None
            and to_remove
            and document.query_selector(CARD_SELECTOR, listing) is None
        ):
            wrapper = document.closest(listing, GROUP_SELECTOR)
            if wrapper is None or not any(parent is gallery for parent in wrapper.parents):
                wrapper = listing
            document.remove(wrapper)
            listing = None

        if not to_add:
            return

        items = "\n".join(
            self._render_album_item(child)
            for child in self._sorter.sort(to_add, self._order_album_field)
        )
        if listing is not None:
            document.insert(listing, InsertPosition.BEFORE_END, items)
        else:
            block = self._index_html.group_block.replace(
                "{{groupBlock}}", self._index_html.album_block.replace("{{albumItems}}", items)
            )
            # A new listing always becomes the first group of the gallery
            document.insert(gallery, InsertPosition.AFTER_START, block)
        summary.albums_added = len(to_add)

    def _render_album_item(self, child: Album) -> str:
        link = html.escape(album_link(child.name))
        return (
            self._index_html.album_item.replace("{{albumPath}}", link)
            .replace("{{albumName}}", html.escape(child.name))
            .replace("{{mediaCount}}", str(len(child.media_files)))
        )

    # Media
    def _reconcile_media(
        self,
        document: HtmlDocument,
        gallery: Tag,
        media_files: Iterable[MediaFile],
        summary: ReconcileSummary,
    ) -> None:
        existing: dict[str, Tag] = {}
        duplicates: list[Tag] = []
        for card in document.query_all(CARD_SELECTOR, gallery):
            if document.closest(card, ALBUM_LISTING_SELECTOR) is not None:
                continue
            name = media_identity(document, card)
            if name is None:
                continue
            key = name.lower()
            if key in existing:
                duplicates.append(existing[key])
            existing[key] = card

        current = {media_file.name.lower(): media_file for media_file in media_files}
        to_add = [media_file for key, media_file in current.items() if key not in existing]
        to_remove = [card for key, card in existing.items() if key not in current]
        to_remove.extend(duplicates)

        if to_remove:
            for card in to_remove:
                document.remove(card)
            self._remove_empty_containers(document, gallery)
            summary.media_removed = len(to_remove)

        if not to_add:
            return

        groups = group_media_files(
            to_add, self._index_html.group_time_window, self._index_html.max_group_size
        )
        document.insert(
            gallery,
            InsertPosition.BEFORE_END,
            "\n".join(self._render_group(group) for group in groups),
        )
        summary.media_added = len(to_add)

    @staticmethod
    def _remove_empty_containers(document: HtmlDocument, gallery: Tag) -> None:
        # Rows first: a group wraps one or more rows
        for photos in document.query_all(PHOTOS_SELECTOR, gallery):
            if document.matches(photos, ALBUM_LISTING_SELECTOR):
                continue
            if document.query_selector(CARD_SELECTOR, photos) is None:
                document.remove(photos)
        for group in document.query_all(GROUP_SELECTOR, gallery):
            if document.query_selector(PHOTOS_SELECTOR, group) is None:
                document.remove(group)

    def _render_group(self, media_files: list[MediaFile]) -> str:
        items = "\n".join(self._render_media_item(media_file) for media_file in media_files)
        media_block = self._index_html.media_block.replace("{{mediaItems}}", items)
        return self._index_html.group_block.replace(
            "{{groupBlock}}", media_block + "\n" + self._index_html.text_item
        )

    def _render_media_item(self, media_file: MediaFile) -> str:
        settings = self._index_html
        template = settings.image_item if media_file.is_image else settings.video_item
        media_file_path = f"{Album.FILES_DIRECTORY_NAME}/{quote(media_file.name)}"
        return template.replace("{{mediaFilePath}}", html.escape(media_file_path, quote=True))

    # Styles and scripts
    def _reconcile_asset_links(
        self, document: HtmlDocument, album: Album, summary: ReconcileSummary
    ) -> None:
        for element in document.query_all(STYLE_SELECTOR):
            href = document.get_attribute(element, "href")
            if not self._asset_exists(album.full_path, href):
                document.remove(element)
                summary.styles_removed.append(href or "")

        if not document.query_all(STYLE_SELECTOR):
            style_path = relative_asset_path(album.library.style_path, album.full_path)
            self._append_to_head(
                document, document.create_element("link", {"rel": "stylesheet", "href": style_path})
            )
            summary.style_added = style_path

        for element in document.query_all(SCRIPT_SELECTOR):
            src = document.get_attribute(element, "src")
            if not self._asset_exists(album.full_path, src):
                document.remove(element)
                summary.scripts_removed.append(src or "")

        if not document.query_all(SCRIPT_SELECTOR):
            script_path = relative_asset_path(album.library.script_path, album.full_path)
            self._append_to_head(
                document, document.create_element("script", {"defer": "", "src": script_path})
            )
            summary.script_added = script_path

    def _asset_exists(self, album_path: str, reference: str | None) -> bool:
        if not reference or not reference.strip():
            return False
        if _URL_WITH_SCHEME.match(reference.strip()):
            return True
        path = unquote(reference.strip().split("#", 1)[0].split("?", 1)[0])
        return self._file_exists(os.path.normpath(os.path.join(album_path, path)))

    @staticmethod
    def _append_to_head(document: HtmlDocument, element: Tag) -> None:
        target = document.head or document.query_selector("html") or document.root
        document.insert(target, InsertPosition.BEFORE_END, element)


def reconcile(
    existing_html_or_template: str,
    album: Album,
    settings: AppSettings,
    order_album_field: OrderAlbumField = OrderAlbumField.DATE,
) -> str:
    """Reconcile `existing_html_or_template` against `album` and return the final page."""
    return GalleryPageReconciler(settings, order_album_field).reconcile(
        existing_html_or_template, album
    )


def album_link(album_name: str) -> str:
    """Link from a parent page to the page of child album `album_name`."""
    return f"{quote(album_name)}/{Album.INDEX_HTML_FILE_NAME}"


def album_identity(href: str | None) -> str | None:
    """Album name encoded in a folder card link, e.g. `My%20Trip/index.html` -> `My Trip`."""
    if not href or not href.strip():
        return None
    path = unquote(href.strip().split("#", 1)[0].split("?", 1)[0]).replace("\\", "/")
    segments = [segment for segment in path.split("/") if segment and segment != "."]
    if segments and segments[-1].lower().endswith((".html", ".htm")):
        segments.pop()
    return segments[-1] if segments else None


def media_identity(document: HtmlDocument, card: Tag) -> str | None:
    """File name referenced by a media card (`data-src`, else its img/video `src`).

    The path is URL-encoded, so `Files/photo%231.jpg` -> `photo#1.jpg`.
    """
    source = document.get_attribute(card, "data-src")
    if not source:
        media = document.query_selector(MEDIA_ELEMENT_SELECTOR, card)
        source = document.get_attribute(media, "src") if media is not None else None
    if not source or not source.strip():
        return None
    path = source.strip().split("#", 1)[0].split("?", 1)[0].replace("\\", "/")
    return unquote(PurePosixPath(path).name) or None


def relative_asset_path(resource_path: str, album_path: str) -> str:
    """`resource_path` relative to the album directory, with forward slashes."""
    return os.path.relpath(resource_path, album_path).replace("\\", "/")
