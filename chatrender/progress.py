"""console reporting for render runs: progress bar, page outcomes, summary."""

from collections import Counter
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
)


class PageOutcome(Enum):
    """what happened to one page of a render run."""

    WRITTEN = "written"
    SKIPPED = "skipped"
    DRY_RUN = "dry-run"
    FAILED = "failed"


OUTCOME_COLORS = {
    PageOutcome.WRITTEN: "green",
    PageOutcome.SKIPPED: "yellow",
    PageOutcome.DRY_RUN: "cyan",
    PageOutcome.FAILED: "red",
}


class ProgressHandler:
    """tallies page outcomes and code blocks, and reports them on stderr."""

    def __init__(self, quiet: bool = False, show_progress: bool = False) -> None:
        self.quiet = quiet
        self.show_progress = show_progress
        self.outcomes: Counter[PageOutcome] = Counter()
        self.code_blocks = 0
        self._console = Console(stderr=True)
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None

    def __enter__(self) -> "ProgressHandler":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self._stop()

    def _stop(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task_id = None

    @property
    def failed(self) -> int:
        """number of pages that failed so far."""
        return self.outcomes[PageOutcome.FAILED]

    def start_discovery(self) -> None:
        """shows a spinner while sources and export threads are collected."""
        if not self.show_progress:
            return

        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self._console,
            transient=True,
        )
        self._progress.start()
        self._task_id = self._progress.add_task("Discovering sources...", total=None)

    def start_pages(self, total: int) -> None:
        """replaces the spinner with a bar over the pages about to render."""
        if not self.show_progress:
            return

        self._stop()
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("{task.fields[blocks]} code block(s) - {task.fields[page]}"),
            console=self._console,
            transient=True,
        )
        self._progress.start()
        self._task_id = self._progress.add_task(
            "Rendering", total=total, page="", blocks=0
        )

    def record(
        self, page: str, outcome: PageOutcome, blocks: int = 0, detail: str = ""
    ) -> None:
        """
        records the outcome of one page.

        Args:
            page: page name
            outcome: what happened to the page
            blocks: code blocks rendered into the page
            detail: output path, or the error for failed pages
        """
        self.outcomes[outcome] += 1
        self.code_blocks += blocks

        if self._progress is not None and self._task_id is not None:
            self._progress.update(
                self._task_id, advance=1, page=page, blocks=self.code_blocks
            )

        if outcome is PageOutcome.FAILED:
            self.log_error(f"{escape(page)}: {escape(detail)}")
            return

        color = OUTCOME_COLORS[outcome]
        line = f"[{color}]{outcome.value}[/{color}] {escape(page)}"
        if outcome is not PageOutcome.SKIPPED:
            line += f" ({blocks} code block(s))"
        if detail:
            line += f" -> {escape(detail)}"
        self.log_info(line)

    def log_error(self, message: str) -> None:
        """prints error message (always shown, even in quiet mode)."""
        self._console.print(f"[red]ERROR:[/red] {message}")

    def log_info(self, message: str) -> None:
        """prints info message (only when not quiet and progress disabled)."""
        if self.quiet or self.show_progress:
            return

        self._console.print(message)

    def finish(self) -> None:
        """stops progress and prints the run summary unless quiet."""
        self._stop()

        if self.quiet:
            return

        total = sum(self.outcomes.values())
        counts = ", ".join(
            f"{self.outcomes[outcome]} {outcome.value}" for outcome in PageOutcome
        )
        self._console.print(
            f"Processed {total} page(s): {counts}; "
            f"{self.code_blocks} code block(s) rendered"
        )
