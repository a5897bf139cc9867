"""copy-to-clipboard controller for rendered code blocks."""

import asyncio
import logging
from typing import Callable, Optional, Protocol

from chatrender.core.models import CopyState

logger = logging.getLogger(__name__)

COPY_TARGET_ATTR = "data-copy-target"
WRAPPER_CLASS = "code-block"
IDLE_ICON_CLASS = "copy-icon"
SUCCESS_ICON_CLASS = "check-icon"
HIDDEN_CLASS = "hidden"
DEFAULT_RESET_MS = 2000

# browser-side counterpart of CopyController, installed once by the page shell
COPY_SCRIPT = """
(function () {
  const RESET_MS = __RESET_MS__;
  const pending = new Map();

  function setCopied(button, copied) {
    const copyIcon = button.querySelector(".copy-icon");
    const checkIcon = button.querySelector(".check-icon");
    if (!copyIcon || !checkIcon) return;
    copyIcon.classList.toggle("hidden", copied);
    checkIcon.classList.toggle("hidden", !copied);
  }

  async function copyCode(id, button) {
    const codeBlock = document.getElementById(id);
    if (!codeBlock) return;

    try {
      await navigator.clipboard.writeText(codeBlock.textContent || "");
    } catch (err) {
      console.error("Failed to copy code:", err);
      return;
    }

    setCopied(button, true);
    clearTimeout(pending.get(id));
    pending.set(id, setTimeout(function () {
      pending.delete(id);
      if (button.isConnected) setCopied(button, false);
    }, RESET_MS));
  }

  document.addEventListener("click", function (event) {
    const button = event.target.closest("[data-copy-target]");
    if (button) copyCode(button.getAttribute("data-copy-target"), button);
  });
})();
"""


def copy_script(reset_ms: int = DEFAULT_RESET_MS) -> str:
    """returns the browser copy script with the given reset delay."""
    return COPY_SCRIPT.replace("__RESET_MS__", str(int(reset_ms)))


class ClassListLike(Protocol):
    """class membership operations of a DOM element."""

    def add(self, name: str) -> None: ...

    def remove(self, name: str) -> None: ...

    def contains(self, name: str) -> bool: ...


class ElementLike(Protocol):
    """DOM element operations the controller relies on."""

    class_list: ClassListLike

    @property
    def text_content(self) -> str: ...

    @property
    def is_connected(self) -> bool: ...

    def closest_by_class(self, name: str) -> Optional["ElementLike"]: ...

    def find_by_class(self, name: str) -> Optional["ElementLike"]: ...

    def find_by_attribute(self, name: str, value: str) -> Optional["ElementLike"]: ...


class DocumentLike(Protocol):  # pylint: disable=too-few-public-methods
    """DOM document lookup."""

    def get_element_by_id(self, element_id: str) -> Optional[ElementLike]: ...


class Clipboard(Protocol):  # pylint: disable=too-few-public-methods
    """system clipboard; write_text raises when access is unavailable or denied."""

    async def write_text(self, text: str) -> None: ...


class CopyController:
    """copies code block text and drives the copy control's icon state."""

    def __init__(
        self,
        document: DocumentLike,
        clipboard: Clipboard,
        reset_delay: float = DEFAULT_RESET_MS / 1000,
    ) -> None:
        self.document = document
        self.clipboard = clipboard
        self.reset_delay = reset_delay
        self._pending: dict[str, asyncio.TimerHandle] = {}

    def _find_icons(
        self, block_id: str, code: ElementLike
    ) -> Optional[tuple[ElementLike, ElementLike]]:
        """locates the idle and success icons of the block's copy control."""
        wrapper = code.closest_by_class(WRAPPER_CLASS)
        if wrapper is None:
            return None
        button = wrapper.find_by_attribute(COPY_TARGET_ATTR, block_id)
        if button is None:
            return None
        copy_icon = button.find_by_class(IDLE_ICON_CLASS)
        check_icon = button.find_by_class(SUCCESS_ICON_CLASS)
        if copy_icon is None or check_icon is None:
            return None
        return copy_icon, check_icon

    async def copy(self, block_id: str) -> bool:
        """
        copies the text of a code block to the clipboard.

        Unknown identifiers and clipboard failures leave the page untouched;
        neither raises.

        Args:
            block_id: identifier of the code element

        Returns:
            True if the text reached the clipboard
        """
        code = self.document.get_element_by_id(block_id)
        if code is None:
            return False

        try:
            await self.clipboard.write_text(code.text_content)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to copy code: %s", e)
            return False

        icons = self._find_icons(block_id, code)
        if icons is None:
            return True

        copy_icon, check_icon = icons
        copy_icon.class_list.add(HIDDEN_CLASS)
        check_icon.class_list.remove(HIDDEN_CLASS)

        # a new copy supersedes the previous pending reset for this control
        previous = self._pending.pop(block_id, None)
        if previous is not None:
            previous.cancel()
        loop = asyncio.get_running_loop()
        self._pending[block_id] = loop.call_later(
            self.reset_delay, self._reset, block_id, copy_icon, check_icon
        )
        return True

    def _reset(
        self, block_id: str, copy_icon: ElementLike, check_icon: ElementLike
    ) -> None:
        """reverts a control to its idle icon."""
        self._pending.pop(block_id, None)
        if not (copy_icon.is_connected and check_icon.is_connected):
            return
        copy_icon.class_list.remove(HIDDEN_CLASS)
        check_icon.class_list.add(HIDDEN_CLASS)

    def has_pending_reset(self, block_id: str) -> bool:
        """checks whether a reset is scheduled for a control."""
        return block_id in self._pending

    def cancel_pending(self) -> None:
        """cancels every scheduled reset."""
        for handle in self._pending.values():
            handle.cancel()
        self._pending.clear()

    def state(self, block_id: str) -> CopyState:
        """returns the visual state of a block's copy control."""
        code = self.document.get_element_by_id(block_id)
        icons = self._find_icons(block_id, code) if code is not None else None
        if icons is None:
            return CopyState.IDLE
        _copy_icon, check_icon = icons
        if check_icon.class_list.contains(HIDDEN_CLASS):
            return CopyState.IDLE
        return CopyState.COPIED


class ClickTarget(Protocol):  # pylint: disable=too-few-public-methods
    """element able to walk its ancestors."""

    def get_attribute(self, name: str) -> Optional[str]: ...

    def closest(
        self, predicate: Callable[["ClickTarget"], bool]
    ) -> Optional["ClickTarget"]: ...


class CopyDispatcher:  # pylint: disable=too-few-public-methods
    """delegated click handling: routes clicks inside copy controls."""

    def __init__(self, controller: CopyController) -> None:
        self.controller = controller

    async def dispatch(self, target: ClickTarget) -> bool:
        """
        handles a click on any element of the page.

        Args:
            target: element that received the click

        Returns:
            True if a copy control handled the click and the copy succeeded
        """
        control = target.closest(
            lambda node: node.get_attribute(COPY_TARGET_ATTR) is not None
        )
        block_id = control.get_attribute(COPY_TARGET_ATTR) if control else None
        if not block_id:
            return False
        return await self.controller.copy(block_id)

