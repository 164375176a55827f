"""CLI UI components (Rich).

Why separate components:
- Keeps command logic free of visual details.
- The progress bar and the log sink share one console, so log lines render
  above the bar instead of tearing it.
"""

from __future__ import annotations

from loguru import logger
from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table
from rich.text import Text

from core.services.snapshot_pipeline import SnapshotResult


def print_banner(console: Console, description: str) -> None:
    """Print the welcome banner.

    Why here:
    - Avoids circular imports (main <-> doctor).
    - Allows disabling the banner in non-interactive modes (`--quiet`).
    """

    title = Text("pypi-snapshot", style="bold cyan")
    subtitle = Text(description, style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def configure_logging(console: Console, level: str) -> None:
    """Route loguru through the Rich console."""

    logger.remove()
    logger.add(
        lambda message: console.print(message, end="", markup=False, highlight=False),
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | {message}",
        colorize=False,
    )


class RichProgressReporter:
    """`ProgressReporter` drawing a Rich bar (one tick per package)."""

    def __init__(self, console: Console) -> None:
        self.progress = Progress(
            TextColumn("[cyan]{task.description}", justify="left"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            TimeRemainingColumn(),
            console=console,
            transient=False,
        )
        self._task: TaskID = self.progress.add_task("waiting", total=None)

    def __enter__(self) -> "RichProgressReporter":
        self.progress.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.progress.stop()

    def set_length(self, total: int) -> None:
        self.progress.update(self._task, total=total)

    def set_message(self, message: str) -> None:
        self.progress.update(self._task, description=message)

    def inc(self, delta: int = 1) -> None:
        self.progress.advance(self._task, delta)

    def finish(self, message: str) -> None:
        self.progress.update(self._task, description=message)


def build_summary_table(result: SnapshotResult) -> Table:
    table = Table(title="Snapshot")
    table.add_column("Packages", style="cyan", justify="right")
    table.add_column("Artifacts", style="white", justify="right")
    table.add_column("Entries", style="green", justify="right")
    table.add_column("Dropped", style="red", justify="right")
    table.add_row(
        str(result.packages),
        str(result.artifacts),
        str(len(result.entries)),
        str(result.dropped),
    )
    return table
