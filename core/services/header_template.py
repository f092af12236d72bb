"""Placeholder substitution for the page header and media viewer controls.

The blank page template carries `{{...}}` placeholders that are replaced once,
on the raw text, before the document is parsed. Placeholders that were already
rendered are gone, so later runs leave the header alone.
"""

from __future__ import annotations

import html

from core.models import MediaFile
from core.settings import LocalizationSettings


class PageHeaderTemplate:
    """Chainable string substitution over a page template."""

    def __init__(self, page_html: str, localization: LocalizationSettings) -> None:
        self._html = page_html
        self._localization = localization

    def build_html(self) -> str:
        return self._html

    def build_header(
        self, album_name: str, first_media_file: MediaFile | None, locale: str = "en_US"
    ) -> PageHeaderTemplate:
        """Fill the title, the publication date and the "published" label.

        Date placeholders stay in place while the album has no media files.
        """
        self.set_title(album_name)
        if first_media_file is not None:
            self.set_created_at(
                first_media_file.created_at_iso(), first_media_file.created_at_human(locale)
            )
        return self.set_published_text(self._localization.published)

    def build_controls(self) -> PageHeaderTemplate:
        """Fill the media viewer control labels."""
        loc = self._localization
        return (
            self.replace_template("{{mediaView}}", loc.media_view)
            .replace_template("{{closeMediaView}}", loc.close_media_view)
            .replace_template("{{scaleMediaView}}", loc.scale_media_view)
            .replace_template("{{fullScreenMediaView}}", loc.full_screen_media_view)
            .replace_template("{{switchImageMediaView}}", loc.switch_image_media_view)
        )

    def set_title(self, title: str) -> PageHeaderTemplate:
        return self.replace_template("{{title}}", title)

    def set_created_at(self, created_at_iso: str, created_at_human: str) -> PageHeaderTemplate:
        return self.replace_template("{{createdAtIso}}", created_at_iso).replace_template(
            "{{createdAtHuman}}", created_at_human
        )

    def set_published_text(self, published_text: str) -> PageHeaderTemplate:
        return self.replace_template("{{published}}", published_text)

    def replace_template(self, placeholder: str, text: str | None) -> PageHeaderTemplate:
        """Replace every `placeholder` with HTML-escaped `text`; blank text is skipped."""
        if not text or not text.strip():
            return self
        self._html = self._html.replace(placeholder, html.escape(text, quote=True))
        return self
