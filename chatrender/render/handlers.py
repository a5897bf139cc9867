"""message handler registry: renders chat messages by author role."""

import html
from typing import Callable, Optional, Protocol, TypeVar, Union

from chatrender.core.models import MessageRecord
from chatrender.render.markdown import CodeBlockRenderer


class MessageHandler(Protocol):  # pylint: disable=too-few-public-methods
    """protocol for message handlers."""

    role: Union[str, list[str]]

    def render(self, message: MessageRecord, renderer: CodeBlockRenderer) -> str:
        """renders message content to HTML."""


class HandlerRegistry:
    """registry for message handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, MessageHandler] = {}

    def register(self, handler_instance: MessageHandler) -> None:
        """registers a handler for its role(s)."""
        roles = (
            handler_instance.role
            if isinstance(handler_instance.role, list)
            else [handler_instance.role]
        )
        for r in roles:
            self._handlers[r] = handler_instance

    def render(
        self, message: MessageRecord, renderer: CodeBlockRenderer
    ) -> Optional[str]:
        """
        renders a message using the handler for its role.

        Args:
            message: message to render
            renderer: markdown renderer shared by the whole page

        Returns:
            rendered HTML string, or None if no handler exists for the role
        """
        handler_instance = self._handlers.get(message.role)
        if not handler_instance:
            return None
        return handler_instance.render(message, renderer)


# global registry
registry = HandlerRegistry()

T = TypeVar("T")


def handler(
    role: Union[str, list[str]],
    target_registry: HandlerRegistry = registry,
) -> Callable[[type[T]], type[T]]:
    """
    decorator to register a message handler.

    Args:
        role: author role or list of roles
        target_registry: registry to register with (defaults to global)

    Returns:
        decorator function
    """

    def decorator(cls: type[T]) -> type[T]:
        cls.role = role  # type: ignore[attr-defined]
        target_registry.register(cls())  # type: ignore[arg-type]
        return cls

    return decorator


@handler("user")
class UserMessageHandler:  # pylint: disable=too-few-public-methods
    """renders user messages as escaped text, without markdown."""

    def render(self, message: MessageRecord, _renderer: CodeBlockRenderer) -> str:
        """renders one div per line of escaped text."""
        lines = html.escape(message.content).split("\n")
        return "<div>" + "</div>\n<div>".join(lines) + "</div>"


@handler(["assistant", "system"])
class MarkdownMessageHandler:  # pylint: disable=too-few-public-methods
    """renders assistant and system messages as markdown."""

    def render(self, message: MessageRecord, renderer: CodeBlockRenderer) -> str:
        """renders markdown content with copy-enabled code blocks."""
        return renderer.render(message.content)


def render_thread(
    messages: list[MessageRecord],
    renderer: CodeBlockRenderer,
    target_registry: HandlerRegistry = registry,
) -> str:
    """
    renders a thread of messages, one section per message.

    Messages whose role has no handler are skipped.

    Args:
        messages: messages in display order
        renderer: markdown renderer shared by the whole page
        target_registry: registry to look handlers up in

    Returns:
        HTML string
    """
    parts = []
    for message in messages:
        content = target_registry.render(message, renderer)
        if content is None:
            continue
        role = html.escape(message.role)
        parts.append(
            f'<section class="message message-{role}" '
            f'data-message-id="{html.escape(message.id)}">\n'
            f'<div class="message-role">{role}</div>\n'
            f"{content}\n"
            "</section>"
        )
    return "\n".join(parts)
