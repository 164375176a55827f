"""Package discovery: which package names a run scans.

The strategy is a configuration-selected variant (`FullIndexScan` or
`PopularityQuery`); both honor the same contract of returning an ordered
list of names, and both are fatal on failure.
"""

from __future__ import annotations

import asyncio

import httpx
from pydantic import TypeAdapter

from adapters.bigquery_index import (
    BQ_QUERY,
    acquire_query_executor,
    project_names,
    resolve_credential_provider,
)
from adapters.pypi_index import fetch_index_names
from core.config import AppSettings
from core.domain.models import DiscoveryStrategy, FullIndexScan, PopularityQuery
from core.interfaces.query import QueryExecutor
from core.services.context import RunContext

_STRATEGY_ADAPTER: TypeAdapter[DiscoveryStrategy] = TypeAdapter(DiscoveryStrategy)


def strategy_from_settings(settings: AppSettings) -> DiscoveryStrategy:
    if settings.bq_query:
        payload = {"kind": "popularity", "project_id": settings.project_id, "debug": settings.debug}
    else:
        payload = {"kind": "full_index", "simple_base": settings.simple_base, "debug": settings.debug}
    return _STRATEGY_ADAPTER.validate_python(payload)


async def _popular_packages(
    strategy: PopularityQuery,
    *,
    context: RunContext,
    query_executor: QueryExecutor | None,
) -> list[str]:
    if strategy.debug:
        context.logger.warning("debug mode is ignored in bigquery mode")

    context.logger.info("executing bigquery query...")
    if query_executor is None:
        provider = resolve_credential_provider(strategy.project_id)
        context.logger.info(
            "using {} credentials for project {}", provider.kind, provider.project_id
        )
        query_executor = acquire_query_executor(provider)

    rows = await asyncio.to_thread(query_executor.run, BQ_QUERY)
    return project_names(rows)


async def discover_packages(
    strategy: DiscoveryStrategy,
    *,
    client: httpx.AsyncClient,
    context: RunContext,
    query_executor: QueryExecutor | None = None,
) -> list[str]:
    """Produce the ordered list of package names to scan.

    Raises `DiscoveryError` (or its `CredentialError` subclass) on failure.
    """

    if isinstance(strategy, PopularityQuery):
        return await _popular_packages(strategy, context=context, query_executor=query_executor)
    if isinstance(strategy, FullIndexScan):
        return await fetch_index_names(
            client=client,
            simple_base=strategy.simple_base,
            debug=strategy.debug,
            context=context,
        )
    raise TypeError(f"unknown discovery strategy: {strategy!r}")
