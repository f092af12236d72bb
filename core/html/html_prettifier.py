"""Deterministic HTML pretty-printer.

Re-indents serialized HTML one token per line so generated pages stay readable
and diff-friendly. Contents of `script`, `style`, `pre` and `textarea` are kept
as one token: only their wrapper lines are re-indented and their interior keeps
its relative indentation. Formatting already formatted output is a no-op.
"""

from __future__ import annotations

import re
import textwrap

from core.errors import ConfigurationError

# "Void" HTML5 elements that never change the indentation level
VOID_TAGS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Tokens: comment, declaration, raw block, tag, text, stray "<"
_TOKENIZER = re.compile(
    r"""(
        <!--.*?-->
      | <![A-Za-z].*?>
      | <\?.*?>
      | <(script|style|pre|textarea)\b[^>]*>.*?</\2\s*>
      | </?[^>]+?>
      | [^<]+
      | <
    )""",
    re.IGNORECASE | re.DOTALL | re.VERBOSE,
)
_TAG_NAME = re.compile(r"^</?\s*([a-zA-Z0-9:-]+)")

# Only ASCII whitespace is layout; U+00A0 from &nbsp; is content
_LAYOUT_WHITESPACE = " \t\n\r\f"


class HtmlPrettifier:
    """Formats HTML with a fixed number of spaces per nesting level."""

    def __init__(self, indent_count: int = 2) -> None:
        if indent_count < 0:
            raise ConfigurationError("Indent count can't be negative.")
        self._indent = " " * indent_count

    def format(self, html: str) -> str:
        """Return `html` re-indented, one token per line, `\\n` line endings."""
        if not html or not html.strip():
            return ""

        html = html.replace("\r\n", "\n").replace("\r", "\n")
        level = 0
        lines: list[str] = []

        for matched in _TOKENIZER.finditer(html):
            token = matched.group(1)

            if _is_comment_or_declaration(token):
                self._write_line(lines, level, token.rstrip())
                continue

            if matched.group(2):
                self._write_raw_block(lines, level, token)
                continue

            if _is_tag(token):
                if token.startswith("</"):
                    level = max(0, level - 1)
                    self._write_line(lines, level, token.strip())
                elif _is_self_closing(token) or _get_tag_name(token) in VOID_TAGS:
                    self._write_line(lines, level, token.strip())
                else:
                    self._write_line(lines, level, token.strip())
                    level += 1
                continue

            for line in token.split("\n"):
                text = line.strip(_LAYOUT_WHITESPACE)
                if text:
                    self._write_line(lines, level, text)

        return "\n".join(lines) + "\n"

    def _write_line(self, lines: list[str], level: int, content: str) -> None:
        lines.append(self._indent * level + content)

    def _write_raw_block(self, lines: list[str], level: int, block: str) -> None:
        block_lines = block.split("\n")
        if len(block_lines) == 1:
            self._write_line(lines, level, block.strip())
            return

        self._write_line(lines, level, block_lines[0].rstrip())
        interior = textwrap.dedent("\n".join(block_lines[1:-1]))
        if len(block_lines) > 2:
            for text in interior.split("\n"):
                lines.append(self._indent * (level + 1) + text if text.strip() else "")
        self._write_line(lines, level, block_lines[-1].strip())


def pretty_print(html: str, indent_spaces: int = 2) -> str:
    """Format `html` with `indent_spaces` spaces per level."""
    return HtmlPrettifier(indent_spaces).format(html)


def _is_comment_or_declaration(token: str) -> bool:
    return token.startswith("<!") or token.startswith("<?")


def _is_tag(token: str) -> bool:
    return len(token) > 1 and token[0] == "<" and token[-1] == ">"


def _is_self_closing(token: str) -> bool:
    return token.endswith("/>")


def _get_tag_name(token: str) -> str:
    matched = _TAG_NAME.match(token)
    return matched.group(1).lower() if matched else ""
