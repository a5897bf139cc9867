"""build module for rendering sources to HTML pages."""

import mimetypes
import re
from pathlib import Path
from typing import Optional

from chatrender.core.extract import JSON_MIME_TYPE, parse_file
from chatrender.core.messages import (
    ServerError,
    is_message_export,
    list_messages,
    list_threads,
)
from chatrender.core.models import RenderOptions
from chatrender.progress import PageOutcome, ProgressHandler
from chatrender.render.handlers import render_thread
from chatrender.render.markdown import CodeBlockRenderer
from chatrender.render.page import render_page

MARKDOWN_SUFFIXES = (".md", ".markdown")
EXPORT_SUFFIX = ".json"


def discover_sources(source: Path) -> list[Path]:
    """
    discovers renderable files from source path.

    A file is returned as-is whatever its type; a directory contributes its
    markdown files and JSON message exports.

    Args:
        source: path to a file or directory

    Returns:
        list of paths to render

    Raises:
        FileNotFoundError: if source doesn't exist
    """
    if not source.exists():
        raise FileNotFoundError(f"Source not found: {source}")

    if source.is_file():
        return [source]

    if source.is_dir():
        return sorted(
            path
            for path in source.iterdir()
            if path.is_file()
            and path.suffix.lower() in MARKDOWN_SUFFIXES + (EXPORT_SUFFIX,)
        )

    return []


def safe_filename(name: str) -> str:
    """turns a page name into a filesystem-safe stem."""
    safe = re.sub(r"[^\w\s-]", "", name)
    safe = re.sub(r"[-\s]+", "_", safe).strip("_")
    return safe or "untitled"


def _is_json(path: Path) -> bool:
    return path.suffix.lower() == EXPORT_SUFFIX


def _fenced(text: str, language: str) -> str:
    """wraps text in a fence longer than any backtick run it contains."""
    longest = max((len(run) for run in re.findall(r"`+", text)), default=0)
    fence = "`" * max(3, longest + 1)
    return f"{fence}{language}\n{text.rstrip()}\n{fence}\n"


def _render_source(
    path: Path, thread_id: Optional[str], renderer: CodeBlockRenderer
) -> tuple[str, str]:
    """
    renders one page worth of content.

    Args:
        path: source file
        thread_id: thread to render when path is a message export
        renderer: renderer shared by the whole run

    Returns:
        (title, body HTML) tuple
    """
    if thread_id is not None:
        messages = list_messages(path, thread_id)
        if not messages:
            raise ServerError(404, f"No messages in thread {thread_id}")
        return f"{path.stem} - {thread_id}", render_thread(messages, renderer)

    if path.suffix.lower() in MARKDOWN_SUFFIXES:
        return path.stem, renderer.render(path.read_text(encoding="utf-8"))

    mime_type, _ = mimetypes.guess_type(path.name)
    text = parse_file(path.name, path.read_bytes(), mime_type)
    if mime_type == JSON_MIME_TYPE:
        # plain JSON documents render as one copyable code block
        text = _fenced(text, "json")
    return path.stem, renderer.render(text)


def _collect_jobs(
    files: list[Path], thread_id: Optional[str], handler: ProgressHandler
) -> list[tuple[Path, Optional[str]]]:
    """
    expands sources into (path, thread) jobs, one per page.

    JSON files holding a top-level array are message exports and yield one job
    per thread; other JSON files are rendered as documents. Exports that can't
    be read or hold no threads are recorded as failed pages.
    """
    jobs: list[tuple[Path, Optional[str]]] = []
    for path in files:
        if not _is_json(path):
            jobs.append((path, None))
            continue
        try:
            if not is_message_export(path):
                jobs.append((path, None))
                continue
            threads = [thread_id] if thread_id else list_threads(path)
        except ServerError as e:
            handler.record(path.stem, PageOutcome.FAILED, detail=str(e))
            continue
        if not threads:
            handler.record(
                path.stem, PageOutcome.FAILED, detail="export holds no threads"
            )
            continue
        jobs.extend((path, t) for t in threads)
    return jobs


def render_sources(
    source: Path,
    output_dir: Path,
    thread_id: Optional[str] = None,
    options: Optional[RenderOptions] = None,
    dry_run: bool = False,
    overwrite: bool = False,
    quiet: bool = False,
    progress: bool = False,
) -> int:
    """
    renders sources to standalone HTML pages.

    One renderer serves the whole run, so code block identifiers are unique
    across every page written.

    Args:
        source: markdown file, JSON export, other document, or directory
        output_dir: directory receiving the pages
        thread_id: only render this thread of JSON exports
        options: rendering options
        dry_run: if True, render but don't write pages
        overwrite: if True, replace existing pages
        quiet: if True, suppress non-error output
        progress: if True, show progress bar

    Returns:
        exit code (0 success, 1 partial failure)
    """
    options = options or RenderOptions()

    with ProgressHandler(quiet=quiet, show_progress=progress) as handler:
        handler.start_discovery()

        files = discover_sources(source)
        if not files:
            handler.log_info(f"No sources found in {source}")
            return 0

        jobs = _collect_jobs(files, thread_id, handler)
        handler.start_pages(len(jobs))

        renderer = CodeBlockRenderer(options=options)
        for path, job_thread in jobs:
            name = path.stem if job_thread is None else f"{path.stem}-{job_thread}"
            _build_page(
                path,
                job_thread,
                name,
                renderer,
                output_dir,
                dry_run,
                overwrite,
                handler,
            )

        handler.finish()
        return 1 if handler.failed > 0 else 0


def _build_page(
    path: Path,
    thread_id: Optional[str],
    name: str,
    renderer: CodeBlockRenderer,
    output_dir: Path,
    dry_run: bool,
    overwrite: bool,
    handler: ProgressHandler,
) -> None:
    """renders a single page, writes it unless dry_run, and records the outcome."""
    output_path = output_dir / f"{safe_filename(name)}.html"

    if output_path.exists() and not overwrite and not dry_run:
        handler.record(name, PageOutcome.SKIPPED, detail=str(output_path))
        return

    issued = renderer.allocator.issued
    try:
        title, body = _render_source(path, thread_id, renderer)
    except Exception as e:  # pylint: disable=broad-exception-caught
        handler.record(name, PageOutcome.FAILED, detail=str(e))
        return
    blocks = renderer.allocator.issued - issued

    if dry_run:
        handler.record(name, PageOutcome.DRY_RUN, blocks, str(output_path))
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_page(title, body, renderer.options), encoding="utf-8")
    handler.record(name, PageOutcome.WRITTEN, blocks, str(output_path))
