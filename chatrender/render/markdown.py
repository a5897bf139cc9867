"""markdown to HTML conversion with copy-enabled code blocks."""

from typing import Any, Optional, cast

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml, unescapeAll

from chatrender.core.models import CodeBlock, RenderOptions, RenderResult
from chatrender.render.highlight import highlight_code
from chatrender.render.ids import BlockIdAllocator

COPY_ICON = (
    '<svg class="copy-icon w-3.5 h-3.5" viewBox="0 0 24 24" fill="none" '
    'stroke="currentColor" stroke-width="2" stroke-linecap="round" '
    'stroke-linejoin="round">'
    '<rect x="9" y="9" width="13" height="13" rx="2" ry="2"></rect>'
    '<path d="M5 15H4a2 2 0 0 1-2-2V4a2 2 0 0 1 2-2h9a2 2 0 0 1 2 2v1"></path>'
    "</svg>"
)
CHECK_ICON = (
    '<svg class="check-icon w-3.5 h-3.5 hidden" viewBox="0 0 24 24" fill="none" '
    'stroke="currentColor" stroke-width="2" stroke-linecap="round" '
    'stroke-linejoin="round">'
    '<polyline points="20 6 9 17 4 12"></polyline>'
    "</svg>"
)
BUTTON_CLASSES = (
    "copy-button absolute top-1.5 right-1.5 flex items-center justify-center "
    "w-6 h-6 text-xs text-gray-400 bg-gray-800/50 rounded hover:bg-gray-700 "
    "hover:text-gray-200 transition-colors"
)

# env key collecting CodeBlock descriptors during a render call
BLOCKS_ENV_KEY = "code_blocks"


def fence_language(info: str) -> str:
    """returns the language tag: first word of the unescaped info string."""
    info = unescapeAll(info).strip() if info else ""
    return info.split(maxsplit=1)[0] if info else ""


def wrap_code_block(block_id: str, language: str, code: str) -> str:
    """
    builds the wrapper markup for one code block.

    Args:
        block_id: identifier shared by the code element and the copy control
        language: language tag (may be empty)
        code: highlighted or escaped code markup

    Returns:
        HTML fragment
    """
    block_id = escapeHtml(block_id)
    code_class = "hljs"
    if language:
        code_class += f" language-{escapeHtml(language)}"
    return (
        '<div class="relative code-block">\n'
        f'<pre class="!my-0"><code class="{code_class}" id="{block_id}">'
        f"{code}</code></pre>\n"
        f'<button type="button" class="{BUTTON_CLASSES}" '
        f'data-copy-target="{block_id}" aria-label="Copy code">'
        f"{COPY_ICON}{CHECK_ICON}</button>\n"
        "</div>\n"
    )


class CodeBlockRenderer:
    """renders markdown to HTML, wrapping fenced code in copy-enabled blocks."""

    def __init__(
        self,
        allocator: Optional[BlockIdAllocator] = None,
        options: Optional[RenderOptions] = None,
    ) -> None:
        self.options = options or RenderOptions()
        self.allocator = allocator or BlockIdAllocator(prefix=self.options.id_prefix)

        # markdown-it's default preset: raw HTML off, tables and strikethrough on
        self.md = MarkdownIt(
            "js-default",
            {"highlight": highlight_code if self.options.highlight else None},
        )

        # cast to Any since RendererProtocol doesn't expose rules
        renderer: Any = self.md.renderer
        renderer.rules["fence"] = self._render_fence

    def _render_fence(self, tokens: Any, idx: int, options: Any, env: Any) -> str:
        """renders a fence token as a copy-enabled code block."""
        token = tokens[idx]
        language = fence_language(token.info)

        if options.highlight:
            code = options.highlight(token.content, language, "")
        else:
            code = escapeHtml(token.content)

        block_id = self.allocator.next_id()
        if isinstance(env, dict) and BLOCKS_ENV_KEY in env:
            env[BLOCKS_ENV_KEY].append(
                CodeBlock(
                    id=block_id,
                    language=language,
                    raw_content=token.content,
                    highlighted_content=code,
                )
            )
        return wrap_code_block(block_id, language, code)

    def render(self, markdown: str) -> str:
        """converts markdown to HTML."""
        return self.render_blocks(markdown).html

    def render_blocks(self, markdown: str) -> RenderResult:
        """
        converts markdown to HTML and reports the code blocks it contains.

        Args:
            markdown: markdown text

        Returns:
            RenderResult with HTML and one CodeBlock per fence, in order
        """
        env: dict[str, Any] = {BLOCKS_ENV_KEY: []}
        html = cast(str, self.md.render(markdown, env))
        return RenderResult(html=html, blocks=env[BLOCKS_ENV_KEY])

