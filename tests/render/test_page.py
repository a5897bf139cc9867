"""tests for the HTML page shell."""

from chatrender.core.models import RenderOptions
from chatrender.render.page import render_page


def test_page_wraps_body() -> None:
    """page contains the body fragment and an escaped title."""
    page = render_page("A <b> title", "<p>body</p>", RenderOptions())
    assert page.startswith("<!DOCTYPE html>")
    assert "<title>A &lt;b&gt; title</title>" in page
    assert "<p>body</p>" in page


def test_page_includes_highlight_styles() -> None:
    """page carries the highlight stylesheet and base styles."""
    page = render_page("t", "", RenderOptions(style="monokai"))
    assert ".hljs .k" in page
    assert ".hidden { display: none; }" in page


def test_page_includes_copy_script_with_delay() -> None:
    """page installs the copy script with the configured delay."""
    page = render_page("t", "", RenderOptions(copy_reset_ms=750))
    assert "<script>" in page
    assert "const RESET_MS = 750;" in page
