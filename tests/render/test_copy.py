"""tests for the copy-to-clipboard controller."""

import asyncio
import logging
from typing import Optional

import pytest
from markdown_it.common.utils import escapeHtml

from chatrender.core.models import CopyState
from chatrender.render.copy import (
    COPY_SCRIPT,
    CopyController,
    CopyDispatcher,
    copy_script,
)
from chatrender.render.dom import HtmlDocument
from chatrender.render.ids import BlockIdAllocator
from chatrender.render.markdown import CodeBlockRenderer, wrap_code_block


class FakeClipboard:  # pylint: disable=too-few-public-methods
    """records written text, or fails with the given error."""

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.text: Optional[str] = None
        self.writes = 0
        self.error = error

    async def write_text(self, text: str) -> None:
        """stores text unless configured to fail."""
        if self.error is not None:
            raise self.error
        self.text = text
        self.writes += 1


def _document(
    block_id: str = "code-block-7", code: str = 'print("hi")'
) -> HtmlDocument:
    return HtmlDocument.from_html(wrap_code_block(block_id, "", escapeHtml(code)))


def _icons_hidden(document: HtmlDocument) -> tuple[bool, bool]:
    copy_icon = document.root.find_by_class("copy-icon")
    check_icon = document.root.find_by_class("check-icon")
    assert copy_icon is not None and check_icon is not None
    return "hidden" in copy_icon.class_list, "hidden" in check_icon.class_list


def test_copy_writes_text_and_reverts_after_delay() -> None:
    """copy puts the block text on the clipboard and toggles icons briefly."""
    document = _document()
    clipboard = FakeClipboard()
    controller = CopyController(document, clipboard, reset_delay=0.05)

    async def scenario() -> None:
        assert await controller.copy("code-block-7") is True
        assert clipboard.text == 'print("hi")'
        assert controller.state("code-block-7") is CopyState.COPIED
        assert _icons_hidden(document) == (True, False)

        await asyncio.sleep(0.15)
        assert controller.state("code-block-7") is CopyState.IDLE
        assert _icons_hidden(document) == (False, True)
        assert not controller.has_pending_reset("code-block-7")

    asyncio.run(scenario())


def test_copy_unknown_id_is_noop() -> None:
    """unknown identifiers do nothing and don't raise."""
    document = _document()
    before = document.to_html()
    clipboard = FakeClipboard()
    controller = CopyController(document, clipboard)

    assert asyncio.run(controller.copy("code-block-99")) is False
    assert clipboard.writes == 0
    assert document.to_html() == before


def test_clipboard_failure_is_logged_and_icons_stay_idle(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """clipboard rejection is logged, not raised, and the icon stays idle."""
    document = _document()
    controller = CopyController(document, FakeClipboard(PermissionError("denied")))

    with caplog.at_level(logging.ERROR, logger="chatrender.render.copy"):
        assert asyncio.run(controller.copy("code-block-7")) is False

    assert "Failed to copy code" in caplog.text
    assert controller.state("code-block-7") is CopyState.IDLE
    assert not controller.has_pending_reset("code-block-7")


def test_repeated_copy_restarts_reset_timer() -> None:
    """a second copy cancels the first copy's pending reset."""
    document = _document()
    controller = CopyController(document, FakeClipboard(), reset_delay=0.3)

    async def scenario() -> None:
        await controller.copy("code-block-7")
        await asyncio.sleep(0.2)
        await controller.copy("code-block-7")
        await asyncio.sleep(0.2)
        # first reset would have fired by now
        assert controller.state("code-block-7") is CopyState.COPIED
        await asyncio.sleep(0.3)
        assert controller.state("code-block-7") is CopyState.IDLE

    asyncio.run(scenario())


def test_reset_tolerates_removed_control() -> None:
    """a reset firing after the block left the page is ignored."""
    document = _document()
    controller = CopyController(document, FakeClipboard(), reset_delay=0.05)

    async def scenario() -> None:
        await controller.copy("code-block-7")
        wrapper = document.root.find_by_class("code-block")
        assert wrapper is not None
        wrapper.remove()
        await asyncio.sleep(0.15)
        assert not controller.has_pending_reset("code-block-7")

    asyncio.run(scenario())


def test_cancel_pending_clears_resets() -> None:
    """cancel_pending drops all scheduled resets."""
    document = _document()
    controller = CopyController(document, FakeClipboard(), reset_delay=10)

    async def scenario() -> None:
        await controller.copy("code-block-7")
        assert controller.has_pending_reset("code-block-7")
        controller.cancel_pending()
        assert not controller.has_pending_reset("code-block-7")

    asyncio.run(scenario())


def test_copy_from_rendered_markdown() -> None:
    """copies the plain text of a highlighted block, not its markup."""
    renderer = CodeBlockRenderer(allocator=BlockIdAllocator(start=7))
    document = HtmlDocument.from_html(
        renderer.render('```python\nprint("hi")\n```\n')
    )
    clipboard = FakeClipboard()
    controller = CopyController(document, clipboard)

    async def scenario() -> None:
        assert await controller.copy("code-block-7")
        controller.cancel_pending()

    asyncio.run(scenario())
    assert clipboard.text == 'print("hi")\n'


def test_dispatcher_routes_clicks_inside_copy_control() -> None:
    """clicks on any element inside a copy button copy its block."""
    renderer = CodeBlockRenderer()
    html = renderer.render("```\nfirst\n```\n\n```\nsecond\n```\n")
    document = HtmlDocument.from_html(html)
    clipboard = FakeClipboard()
    controller = CopyController(document, clipboard)
    dispatcher = CopyDispatcher(controller)

    button = document.root.find_by_attribute("data-copy-target", "code-block-1")
    assert button is not None
    icon = button.find_by_class("copy-icon")
    assert icon is not None

    async def scenario() -> bool:
        result = await dispatcher.dispatch(icon)
        controller.cancel_pending()
        return result

    assert asyncio.run(scenario()) is True
    assert clipboard.text == "second\n"


def test_dispatcher_ignores_clicks_elsewhere() -> None:
    """clicks outside copy controls are ignored."""
    document = HtmlDocument.from_html("<p>text</p>" + wrap_code_block("b-0", "", "x"))
    clipboard = FakeClipboard()
    dispatcher = CopyDispatcher(CopyController(document, clipboard))
    paragraph = document.root.find(lambda node: node.name == "p")
    assert paragraph is not None

    assert asyncio.run(dispatcher.dispatch(paragraph)) is False
    assert clipboard.writes == 0


def test_copy_script_sets_reset_delay() -> None:
    """the browser script carries the configured delay."""
    script = copy_script(1500)
    assert "const RESET_MS = 1500;" in script
    assert "__RESET_MS__" not in script
    assert "__RESET_MS__" in COPY_SCRIPT


def test_copy_script_uses_delegated_listener() -> None:
    """the browser script listens once and cancels pending resets."""
    script = copy_script()
    assert 'document.addEventListener("click"' in script
    assert 'closest("[data-copy-target]")' in script
    assert "navigator.clipboard.writeText" in script
    assert "clearTimeout(pending.get(id))" in script
    assert "const RESET_MS = 2000;" in script
