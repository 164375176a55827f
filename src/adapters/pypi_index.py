"""Simple-index scraping (PEP 503 HTML pages).

Two pages matter:
- `{simple_base}/`: one anchor per package, link text is the package name.
- `{simple_base}/{name}/`: one anchor per artifact, href is the (often
  relative, checksum-carrying) download URL and link text the filename.

Index failures are fatal to the run; listing failures only cost that package.
"""

from __future__ import annotations

import httpx

from adapters.http_client import extract_anchors
from core.domain.models import ListingEntry, RetentionBudget
from core.domain.urls import clean_url
from core.errors import DiscoveryError
from core.services.context import RunContext
from core.services.retention import truncate_to_recent

DEBUG_INDEX_CHARS = 1000


def _truncate_index(index: str) -> str:
    """First `DEBUG_INDEX_CHARS` raw characters, minus any anchor the cut left unclosed."""

    head = index[:DEBUG_INDEX_CHARS]
    end = head.lower().rfind("</a>")
    return head[: end + len("</a>")] if end >= 0 else ""


async def fetch_index_names(
    *,
    client: httpx.AsyncClient,
    simple_base: str,
    debug: bool,
    context: RunContext,
) -> list[str]:
    """Download the simple index and return every package name in page order."""

    context.logger.info("downloading pypi index...")
    try:
        resp = await client.get(f"{simple_base}/")
        resp.raise_for_status()
        index = resp.text
    except httpx.HTTPError as exc:
        raise DiscoveryError(f"failed to fetch index {simple_base}/: {exc}") from exc

    context.logger.info("parsing index...")
    if debug:
        index = _truncate_index(index)
    try:
        return [text for _, text in extract_anchors(html=index)]
    except Exception as exc:  # noqa: BLE001
        raise DiscoveryError(f"failed to parse index {simple_base}/: {exc}") from exc


async def fetch_package_listing(
    *,
    client: httpx.AsyncClient,
    simple_base: str,
    name: str,
) -> list[ListingEntry]:
    """Fetch one package page; raises on any network or HTTP error."""

    page_url = f"{simple_base}/{name}/"
    resp = await client.get(page_url)
    resp.raise_for_status()
    return [
        ListingEntry(url=clean_url(href), filename=text)
        for href, text in extract_anchors(html=resp.text, base_url=page_url)
    ]


async def scan_package(
    *,
    client: httpx.AsyncClient,
    simple_base: str,
    name: str,
    budget: RetentionBudget | None,
    context: RunContext,
) -> list[ListingEntry]:
    """Listing entries of one package, retention applied; `[]` on failure."""

    try:
        entries = await fetch_package_listing(client=client, simple_base=simple_base, name=name)
        if budget is not None:
            entries = truncate_to_recent(entries, budget, package=name, context=context)
    except Exception as exc:  # noqa: BLE001
        context.logger.warning("failed to fetch index of {}: {!r}", name, exc)
        return []

    context.logger.debug("{}: {} artifacts", name, len(entries))
    return entries
