from __future__ import annotations

import pytest

from core.errors import ConfigurationError
from core.html.html_prettifier import HtmlPrettifier, pretty_print


def test_nested_elements_are_indented_one_token_per_line():
    html = '<div><p>Hi</p><img src="a.jpg"><br/></div>'

    assert pretty_print(html) == (
        "<div>\n"
        "  <p>\n"
        "    Hi\n"
        "  </p>\n"
        '  <img src="a.jpg">\n'
        "  <br/>\n"
        "</div>\n"
    )


def test_indent_count_is_configurable():
    assert HtmlPrettifier(4).format("<ul><li>x</li></ul>") == (
        "<ul>\n    <li>\n        x\n    </li>\n</ul>\n"
    )


def test_zero_indent_keeps_line_structure():
    assert HtmlPrettifier(0).format("<div><span>a</span></div>") == (
        "<div>\n<span>\na\n</span>\n</div>\n"
    )


def test_negative_indent_is_rejected():
    with pytest.raises(ConfigurationError):
        HtmlPrettifier(-1)


@pytest.mark.parametrize("html", ["", "   ", "\r\n\t"])
def test_blank_input_gives_empty_output(html):
    assert pretty_print(html) == ""


def test_doctype_and_comments_are_kept_at_current_level():
    html = "<!DOCTYPE html><html><body><!-- note --></body></html>"

    assert pretty_print(html) == (
        "<!DOCTYPE html>\n<html>\n  <body>\n    <!-- note -->\n  </body>\n</html>\n"
    )


def test_raw_block_interior_is_only_reindented():
    html = (
        "<body><script>\n"
        "        var a = 1;\n"
        "          if (a) { b(); }\n"
        "\n"
        "        c();\n"
        "</script></body>"
    )

    assert pretty_print(html) == (
        "<body>\n"
        "  <script>\n"
        "    var a = 1;\n"
        "      if (a) { b(); }\n"
        "\n"
        "    c();\n"
        "  </script>\n"
        "</body>\n"
    )


def test_markup_inside_pre_is_not_tokenized():
    html = "<div><pre>\n<b>bold</b>\n  kept\n</pre></div>"

    assert pretty_print(html) == (
        "<div>\n  <pre>\n    <b>bold</b>\n      kept\n  </pre>\n</div>\n"
    )


def test_single_line_script_stays_on_one_line():
    html = '<head><script defer src="x.js"></script></head>'

    assert pretty_print(html) == '<head>\n  <script defer src="x.js"></script>\n</head>\n'


def test_crlf_line_endings_are_normalized():
    assert pretty_print("<p>\r\nline one\r\nline two\r\n</p>") == (
        "<p>\n  line one\n  line two\n</p>\n"
    )


def test_unbalanced_closing_tags_never_go_below_zero():
    assert pretty_print("</div></div><p>x</p>") == "</div>\n</div>\n<p>\n  x\n</p>\n"


def test_formatting_is_a_fixed_point():
    html = (
        "<!DOCTYPE html><html><head><style>\n  body { margin: 0; }\n    p { x: y; }\n"
        "</style></head><body><main id=\"gallery\"><div class=\"group\">"
        "<!--\n<div class=\"story\">\n    <p>Place text here.</p>\n</div>\n-->"
        "<p>Some   text <b>bold</b> tail</p></div></main></body></html>"
    )

    once = pretty_print(html)

    assert pretty_print(once) == once


def test_non_breaking_spaces_are_kept():
    html = "<div><p>\u00a0</p><p>tail\u00a0</p></div>"

    once = pretty_print(html)

    assert once == (
        "<div>\n  <p>\n    \u00a0\n  </p>\n  <p>\n    tail\u00a0\n  </p>\n</div>\n"
    )
    assert pretty_print(once) == once
