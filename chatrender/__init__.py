"""Markdown to HTML renderer with copy-enabled, highlighted code blocks."""

import argparse
import logging
from pathlib import Path
from typing import Optional

from chatrender.build import render_sources
from chatrender.core.models import RenderOptions

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    """
    main entry point for chatrender CLI.

    Args:
        argv: command line arguments (defaults to sys.argv[1:])

    Returns:
        exit code (0 success, 1 partial failure, 2 fatal error)
    """
    parser = argparse.ArgumentParser(
        description="Render markdown and chat exports to HTML with copyable code"
    )
    parser.add_argument(
        "source",
        help="markdown file, JSON message export, document, or directory",
    )
    parser.add_argument(
        "output",
        nargs="?",
        default="rendered",
        help="output directory (default: rendered)",
    )
    parser.add_argument(
        "--thread",
        help="only render this thread of JSON message exports",
    )
    parser.add_argument(
        "--style",
        default="github-dark",
        help="Pygments highlight style (default: github-dark)",
    )
    parser.add_argument(
        "--copy-reset-ms",
        type=int,
        default=2000,
        help="delay before a copy button returns to idle (default: 2000)",
    )
    parser.add_argument(
        "--id-prefix",
        default="code-block-",
        help="prefix for code block identifiers (default: code-block-)",
    )
    parser.add_argument(
        "--no-highlight",
        action="store_true",
        help="render code blocks as plain escaped text",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="render sources but don't write pages",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="replace existing pages",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="show progress bar",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="suppress non-error output",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="enable debug logging",
    )

    args = parser.parse_args(argv)

    # configures logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(message)s",
    )

    # validates source path exists
    source_path = Path(args.source)
    if not source_path.exists():
        logger.error("Source not found: %s", args.source)
        return 2

    options = RenderOptions(
        id_prefix=args.id_prefix,
        highlight=not args.no_highlight,
        style=args.style,
        copy_reset_ms=args.copy_reset_ms,
    )

    try:
        return render_sources(
            source=source_path,
            output_dir=Path(args.output),
            thread_id=args.thread,
            options=options,
            dry_run=args.dry_run,
            overwrite=args.overwrite,
            quiet=args.quiet,
            progress=args.progress,
        )
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("Fatal error: %s", e)
        return 2
