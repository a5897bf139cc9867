"""standalone HTML page shell for rendered fragments."""

import html as html_lib

from chatrender.core.models import RenderOptions
from chatrender.render.copy import copy_script
from chatrender.render.highlight import highlight_css

BASE_CSS = """
body { margin: 0 auto; max-width: 48rem; padding: 1rem;
       font-family: system-ui, sans-serif; line-height: 1.5; }
.hidden { display: none; }
.relative { position: relative; }
.code-block { margin: 1rem 0; }
.code-block pre { margin: 0; padding: 0.75rem; overflow-x: auto;
                  border-radius: 0.375rem; background: #0d1117; color: #e6edf3; }
.copy-button { position: absolute; top: 0.375rem; right: 0.375rem;
               display: flex; align-items: center; justify-content: center;
               width: 1.5rem; height: 1.5rem; border: 0; border-radius: 0.25rem;
               color: #9ca3af; background: rgba(31, 41, 55, 0.5); cursor: pointer; }
.copy-button:hover { color: #e5e7eb; background: #374151; }
.copy-button svg { width: 0.875rem; height: 0.875rem; }
.message { margin-bottom: 1.5rem; }
.message-role { font-size: 0.875rem; font-weight: 600; text-transform: capitalize; }
"""


def render_page(title: str, body: str, options: RenderOptions) -> str:
    """
    wraps rendered HTML in a standalone page with styles and the copy script.

    Args:
        title: page title (escaped here)
        body: rendered HTML fragment
        options: rendering options (highlight style, copy reset delay)

    Returns:
        complete HTML document
    """
    title_escaped = html_lib.escape(title)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title_escaped}</title>
    <style>{BASE_CSS}
{highlight_css(options.style)}
    </style>
</head>
<body>
    <h1>{title_escaped}</h1>
{body}
    <script>{copy_script(options.copy_reset_ms)}</script>
</body>
</html>
"""
