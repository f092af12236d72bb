"""Mutable HTML document backed by BeautifulSoup.

Wraps the `html.parser` tree builder and soupsieve CSS selectors behind a small
DOM-like API: selector queries, element creation, adjacent insertion, attribute
access and subtree removal. Serialization is byte-stable for a given tree.
"""

from __future__ import annotations

from enum import Enum

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import PageElement, Tag

from core.errors import MalformedDocumentError


class InsertPosition(str, Enum):
    """Adjacent positions with `insertAdjacentHTML` semantics."""

    BEFORE_START = "beforebegin"
    AFTER_START = "afterbegin"
    BEFORE_END = "beforeend"
    AFTER_END = "afterend"


class HtmlDocument:
    """Parsed HTML document."""

    PARSER = "html.parser"

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    @classmethod
    def parse(cls, html: str) -> HtmlDocument:
        """Parse `html`; unknown tags are kept as regular elements."""
        if not isinstance(html, str) or not html.strip():
            raise MalformedDocumentError("HTML document is empty.")
        try:
            soup = BeautifulSoup(html, cls.PARSER)
        except ParserRejectedMarkup as ex:
            raise MalformedDocumentError(f"HTML document can't be parsed: {ex}") from ex
        return cls(soup)

    @property
    def head(self) -> Tag | None:
        return self._soup.head

    @property
    def body(self) -> Tag | None:
        return self._soup.body

    @property
    def root(self) -> BeautifulSoup:
        return self._soup

    # Queries
    def query_selector(self, selector: str, root: Tag | None = None) -> Tag | None:
        """First element matching `selector` under `root` (the document by default)."""
        return (root if root is not None else self._soup).select_one(selector)

    def query_all(self, selector: str, root: Tag | None = None) -> list[Tag]:
        """All elements matching `selector` under `root`, in document order."""
        return list((root if root is not None else self._soup).select(selector))

    @staticmethod
    def closest(element: Tag, selector: str) -> Tag | None:
        """Nearest ancestor-or-self of `element` matching `selector`."""
        return element.css.closest(selector)

    @staticmethod
    def matches(element: Tag, selector: str) -> bool:
        return bool(element.css.match(selector))

    # Creation and attributes
    def create_element(self, tag_name: str, attributes: dict[str, str] | None = None) -> Tag:
        """Create a detached element owned by this document."""
        return self._soup.new_tag(tag_name, attrs=dict(attributes or {}))

    @staticmethod
    def get_attribute(element: Tag, name: str) -> str | None:
        """Attribute value as text; multi-valued attributes are space-joined."""
        value = element.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    @staticmethod
    def set_attribute(element: Tag, name: str, value: str) -> None:
        element[name] = value

    @staticmethod
    def remove_attribute(element: Tag, name: str) -> None:
        if name in element.attrs:
            del element[name]

    @staticmethod
    def inner_html(element: Tag) -> str:
        return element.decode_contents()

    def set_inner_html(self, element: Tag, html: str) -> None:
        """Replace the children of `element` with the parsed `html` fragment."""
        element.clear()
        self.insert(element, InsertPosition.BEFORE_END, html)

    @staticmethod
    def set_text(element: Tag, text: str) -> None:
        """Replace the children of `element` with a single text node."""
        element.string = text

    # Mutation
    def insert(self, element: Tag, position: InsertPosition, content: str | PageElement) -> None:
        """Insert an HTML fragment or a node next to or inside `element`.

        Args:
            element: Reference element.
            position: Where to insert relative to `element`.
            content: HTML text (parsed as a fragment) or an existing node.
        """
        nodes = self._fragment(content) if isinstance(content, str) else [content]
        if not nodes:
            return

        if position in (InsertPosition.BEFORE_START, InsertPosition.AFTER_END):
            if element.parent is None:
                raise ValueError("Can't insert next to an element without a parent.")

        if position is InsertPosition.BEFORE_START:
            for node in nodes:
                element.insert_before(node)
        elif position is InsertPosition.AFTER_START:
            for index, node in enumerate(nodes):
                element.insert(index, node)
        elif position is InsertPosition.BEFORE_END:
            for node in nodes:
                element.append(node)
        else:
            anchor: PageElement = element
            for node in nodes:
                anchor.insert_after(node)
                anchor = node

    @staticmethod
    def remove(element: PageElement) -> None:
        """Detach `element` and its subtree from the document."""
        element.extract()

    def serialize(self) -> str:
        """Document markup; whitespace is left as parsed."""
        return self._soup.decode(formatter="minimal")

    def _fragment(self, html: str) -> list[PageElement]:
        fragment = BeautifulSoup(html, self.PARSER)
        return [node.extract() for node in list(fragment.contents)]
