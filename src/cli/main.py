"""pypi-snapshot CLI (Typer).

Commands:
- `snapshot`: discover, scan and print one snapshot entry per line (stdout).
- `resolve`: map snapshot entries back to absolute download URLs.
- `doctor`: environment diagnostics (proxy, index reachability, BigQuery).

UI (banner, progress bar, logs, summary) goes to stderr so stdout can be
piped straight into the transfer stage.
"""

from __future__ import annotations

import asyncio
from typing import Any, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from cli import doctor
from cli.ui_components import (
    RichProgressReporter,
    build_summary_table,
    configure_logging,
    print_banner,
)
from core.config import AppSettings
from core.domain.snapshot import resolve_transfer_url
from core.errors import SnapshotError
from core.services.context import RunContext
from core.services.snapshot_pipeline import describe, take_snapshot

app = typer.Typer(no_args_is_help=True, help="Point-in-time snapshots of a PyPI simple index.")
app.add_typer(doctor.app, name="doctor")

_console = Console(stderr=True)


def _load_settings(**overrides: Any) -> AppSettings:
    values = {k: v for k, v in overrides.items() if v is not None}
    try:
        return AppSettings(**values)
    except ValidationError as exc:
        _console.print(f"[red]Invalid configuration:[/red]\n{exc}")
        raise typer.Exit(code=2) from exc


@app.command()
def snapshot(
    simple_base: Optional[str] = typer.Option(None, help="Base of simple index."),
    package_base: Optional[str] = typer.Option(None, help="Base of package index."),
    bq_query: Optional[bool] = typer.Option(
        None,
        "--bq-query/--full-index",
        help="Only scan the 1000 most downloaded packages (BigQuery).",
    ),
    keep_recent: Optional[int] = typer.Option(None, help="Only keep recent N versions per package."),
    debug: Optional[bool] = typer.Option(
        None,
        "--debug/--no-debug",
        help="Only parse the first 1000 characters of the index.",
    ),
    concurrency: Optional[int] = typer.Option(None, help="Maximum listing pages fetched at once."),
    log_level: Optional[str] = typer.Option(None, help="Console log level (DEBUG, INFO, ...)."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No banner, progress bar or summary."),
) -> None:
    """Take a snapshot and print its entries, one per line."""

    settings = _load_settings(
        simple_base=simple_base,
        package_base=package_base,
        bq_query=bq_query,
        keep_recent=keep_recent,
        debug=debug,
        concurrent_resolve=concurrency,
        log_level=log_level,
    )
    configure_logging(_console, settings.log_level)

    if not quiet:
        print_banner(_console, describe(settings))

    try:
        if quiet:
            result = asyncio.run(take_snapshot(settings=settings, context=RunContext()))
        else:
            with RichProgressReporter(_console) as progress:
                context = RunContext(progress=progress)
                result = asyncio.run(take_snapshot(settings=settings, context=context))
    except SnapshotError as exc:
        _console.print(f"[red]Snapshot failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    for entry in result.entries:
        typer.echo(entry)

    if not quiet:
        _console.print(build_summary_table(result))


@app.command()
def resolve(
    entries: List[str] = typer.Argument(..., help="Snapshot entries (relative paths)."),
    package_base: Optional[str] = typer.Option(None, help="Base of package index."),
) -> None:
    """Print the download URL of each snapshot entry."""

    settings = _load_settings(package_base=package_base)
    for entry in entries:
        typer.echo(resolve_transfer_url(entry, settings.package_base))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
