"""Snapshot orchestration.

This module wires the phases of one run together so every entry point (CLI,
batch jobs, tests) shares them:

1. discovery (full index or BigQuery) must finish before anything else;
2. every discovered package is scanned with bounded concurrency;
3. listings are flattened into entries relative to the package base.

Side-effects stay outside: the caller owns the HTTP client, the progress bar
and the log sinks, and decides what to do with the entries.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from adapters.http_client import build_async_client
from adapters.pypi_index import scan_package
from core.config import AppSettings
from core.domain.models import DiscoveryStrategy, ListingEntry, RetentionBudget
from core.domain.snapshot import assemble_snapshot
from core.interfaces.query import QueryExecutor
from core.services.context import RunContext
from core.services.coordinator import run_bounded
from core.services.discovery import discover_packages, strategy_from_settings


@dataclass
class SnapshotResult:
    """Output of a snapshot run."""

    entries: list[str] = field(default_factory=list)
    packages: int = 0
    artifacts: int = 0
    dropped: int = 0


def describe(settings: AppSettings) -> str:
    """One-line summary of the source configuration."""

    strategy = "bigquery top 1000" if settings.bq_query else "full index"
    keep = f"keep_recent={settings.keep_recent}" if settings.keep_recent else "all versions"
    debug = ", debug" if settings.debug else ""
    return f"pypi, {strategy} from {settings.simple_base} -> {settings.package_base} ({keep}{debug})"


def retention_budget(settings: AppSettings) -> RetentionBudget | None:
    if settings.keep_recent is None:
        return None
    return RetentionBudget(keep_recent=settings.keep_recent)


async def scan_all(
    names: list[str],
    *,
    client: httpx.AsyncClient,
    settings: AppSettings,
    context: RunContext,
) -> list[list[ListingEntry]]:
    budget = retention_budget(settings)

    async def worker(name: str) -> list[ListingEntry]:
        return await scan_package(
            client=client,
            simple_base=settings.simple_base,
            name=name,
            budget=budget,
            context=context,
        )

    context.logger.info("downloading package index...")
    return await run_bounded(
        names,
        worker,
        max_concurrency=settings.concurrent_resolve,
        context=context,
    )


async def take_snapshot(
    *,
    settings: AppSettings,
    context: RunContext | None = None,
    client: httpx.AsyncClient | None = None,
    strategy: DiscoveryStrategy | None = None,
    query_executor: QueryExecutor | None = None,
) -> SnapshotResult:
    """Run discovery, the bounded scan and assembly.

    Fatal errors (`DiscoveryError`, `ConfigurationError`) propagate; a
    failing package only contributes nothing.
    """

    context = context or RunContext()
    strategy = strategy or strategy_from_settings(settings)

    owns_client = client is None
    client = client or build_async_client(settings)
    try:
        names = await discover_packages(
            strategy,
            client=client,
            context=context,
            query_executor=query_executor,
        )
        context.logger.info("{} packages discovered", len(names))
        packages = await scan_all(names, client=client, settings=settings, context=context)
    finally:
        if owns_client:
            await client.aclose()

    entries, dropped = assemble_snapshot(packages, settings.package_base, logger=context.logger)
    context.progress.finish("done")

    return SnapshotResult(
        entries=entries,
        packages=len(names),
        artifacts=sum(len(p) for p in packages),
        dropped=dropped,
    )
