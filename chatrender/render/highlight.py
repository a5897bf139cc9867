"""syntax highlighting for fenced code blocks."""

import logging
from functools import lru_cache
from typing import Any, Optional

from markdown_it.common.utils import escapeHtml
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

# span-only output, the renderer supplies the surrounding <pre><code>
_FORMATTER = HtmlFormatter(nowrap=True)


@lru_cache(maxsize=128)
def _get_lexer(language: str) -> Optional[Any]:
    """returns the Pygments lexer for a language tag, or None if unknown."""
    try:
        # keeps leading/trailing blank lines so copied text matches the source
        return get_lexer_by_name(language, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return None


def is_supported_language(language: str) -> bool:
    """checks whether a language tag is known to the highlighter."""
    return bool(language) and _get_lexer(language.lower()) is not None


def highlight_code(code: str, language: str = "", _attrs: str = "") -> str:
    """
    highlights code for the given language tag.

    Unknown or empty language tags, and any error raised while highlighting,
    produce the HTML-escaped code instead. This function never raises.

    Args:
        code: raw code text
        language: language tag from the fence info string
        _attrs: remaining info string attributes (unused)

    Returns:
        highlighted span markup or escaped plain text
    """
    if not language:
        return escapeHtml(code)

    lexer = _get_lexer(language.lower())
    if lexer is None:
        return escapeHtml(code)

    # Pygments lexers emit Error tokens for illegal input instead of aborting
    try:
        return str(highlight(code, lexer, _FORMATTER))
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.debug("Highlighting failed for %s: %s", language, e)
        return escapeHtml(code)


def highlight_css(style: str = "github-dark", scope: str = ".hljs") -> str:
    """
    returns the stylesheet for highlighted code.

    Args:
        style: Pygments style name (falls back to "default" if unknown)
        scope: CSS selector the rules are scoped to

    Returns:
        CSS rules as a string
    """
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.warning("Unknown highlight style %r, using default", style)
        style = "default"
    return str(HtmlFormatter(style=style).get_style_defs(scope))
