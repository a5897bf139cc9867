"""tests for the syntax highlighting adapter."""

import re
from unittest.mock import patch

from markdown_it.common.utils import escapeHtml

from chatrender.render.highlight import (
    highlight_code,
    highlight_css,
    is_supported_language,
)

SPAN_TAG = re.compile(r"</?span[^>]*>")


def test_highlights_known_language() -> None:
    """known language produces span markup that differs from escaped input."""
    code = 'print("hi")\n'
    result = highlight_code(code, "python")
    assert result != escapeHtml(code)
    assert "<span" in result


def test_highlighted_output_escapes_source_markup() -> None:
    """angle brackets from the source only survive as entities."""
    code = "if a < b and c > d:\n    pass\n"
    result = highlight_code(code, "python")
    stripped = SPAN_TAG.sub("", result)
    assert "<" not in stripped
    assert ">" not in stripped
    assert "&lt;" in stripped
    assert "&gt;" in stripped


def test_language_tag_is_case_insensitive() -> None:
    """language tags match regardless of case."""
    assert "<span" in highlight_code("x = 1\n", "Python")


def test_unknown_language_returns_escaped_text() -> None:
    """unknown language returns exactly the escaped input."""
    code = "<div class=\"x\">&</div>"
    assert highlight_code(code, "not-a-real-language") == escapeHtml(code)


def test_empty_language_returns_escaped_text() -> None:
    """empty language returns exactly the escaped input."""
    code = "<script>alert('x')</script>"
    assert highlight_code(code, "") == escapeHtml(code)


def test_invalid_code_in_known_language_still_highlights() -> None:
    """malformed code degrades gracefully instead of failing."""
    code = "def (:\n  ]]] @@@ \x00\n"
    result = highlight_code(code, "python")
    assert "def" in result


def test_highlighter_error_falls_back_to_escaped_text() -> None:
    """errors raised by the engine are absorbed."""
    with patch(
        "chatrender.render.highlight.highlight", side_effect=RuntimeError("boom")
    ):
        result = highlight_code("a < b", "python")
    assert result == "a &lt; b"


def test_is_supported_language() -> None:
    """reports whether a language tag is known."""
    assert is_supported_language("python")
    assert is_supported_language("js")
    assert not is_supported_language("")
    assert not is_supported_language("not-a-real-language")


def test_highlight_css_scoped_to_selector() -> None:
    """stylesheet rules are scoped to the given selector."""
    css = highlight_css("github-dark", ".hljs")
    assert ".hljs .k" in css


def test_highlight_css_unknown_style_falls_back() -> None:
    """unknown style falls back to the default style."""
    css = highlight_css("no-such-style")
    assert ".hljs" in css
