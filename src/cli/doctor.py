"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import os

import typer
from rich.console import Console
from rich.table import Table

from adapters.bigquery_index import resolve_credential_provider
from adapters.http_client import build_async_client, select_proxies
from core.config import AppSettings, write_user_env_vars
from core.errors import SnapshotError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console(stderr=True)


async def _check_http(settings: AppSettings, url: str) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return response.is_success, f"HTTP {response.status_code}"
    except Exception as exc:  # noqa: BLE001
        return False, str(exc)


def _check_proxies() -> tuple[bool, str]:
    try:
        proxies = select_proxies()
    except SnapshotError as exc:
        return False, str(exc)
    if not proxies:
        return True, "direct connection"
    return True, ", ".join(f"{scheme} via {url}" for scheme, url in proxies.items())


def _check_bigquery(settings: AppSettings) -> tuple[bool, str]:
    try:
        provider = resolve_credential_provider(settings.project_id)
    except SnapshotError as exc:
        return False, str(exc)
    return True, f"{provider.kind} credentials, project {provider.project_id}"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="pypi-snapshot Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    ok_proxy, detail_proxy = _check_proxies()
    table.add_row("Proxy", "OK" if ok_proxy else "FAIL", detail_proxy)

    if ok_proxy:
        ok_http, detail_http = asyncio.run(_check_http(settings, f"{settings.simple_base}/"))
        table.add_row("Simple index", "OK" if ok_http else "FAIL", detail_http)
    else:
        table.add_row("Simple index", "SKIPPED", "fix the proxy configuration first")

    table.add_row("Package base", "OK", settings.package_base)

    ok_bq, detail_bq = _check_bigquery(settings)
    status_bq = "OK" if ok_bq else ("FAIL" if settings.bq_query else "OPTIONAL")
    table.add_row("BigQuery", status_bq, detail_bq)

    _console.print(table)

    if not ok_bq and not settings.bq_query:
        _console.print("\n[yellow]Note:[/yellow] BigQuery is only needed with `--bq-query`.")


@app.command(name="setup-bigquery")
def setup_bigquery() -> None:
    """Store the Google Cloud project id in the user config .env."""

    default = os.environ.get("PROJECT_ID", "")
    project_id = typer.prompt("Google Cloud project id", default=default, show_default=bool(default)).strip()
    if not project_id:
        raise typer.BadParameter("project id is required")

    env_path = write_user_env_vars({"PYPI_SNAPSHOT_PROJECT_ID": project_id})
    _console.print(f"[green]Saved BigQuery config to:[/green] {env_path}")
