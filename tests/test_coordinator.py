"""Tests for the bounded fan-out and the end-to-end pipeline."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from core.domain.snapshot import resolve_transfer_url
from core.errors import ConfigurationError, DiscoveryError
from core.services.coordinator import run_bounded
from core.services.snapshot_pipeline import take_snapshot

from conftest import PACKAGE_BASE, listing_page


def test_concurrency_is_bounded_and_order_preserved(context, progress) -> None:
    names = [f"pkg{i}" for i in range(12)]
    in_flight = 0
    peak = 0

    async def worker(name: str) -> str:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        # Later submissions finish first.
        await asyncio.sleep(0.001 * (12 - int(name[3:])))
        in_flight -= 1
        return name.upper()

    result = asyncio.run(run_bounded(names, worker, max_concurrency=3, context=context))

    assert result == [n.upper() for n in names]
    assert peak <= 3
    assert progress.total == 12
    assert progress.completed == 12


def test_progress_counts_failed_tasks(context, progress) -> None:
    async def worker(name: str) -> list:
        if name == "bad":
            raise RuntimeError("boom")
        return []

    with pytest.raises(RuntimeError):
        asyncio.run(run_bounded(["bad"], worker, max_concurrency=1, context=context))
    assert progress.completed == 1


def test_invalid_concurrency(context) -> None:
    async def worker(name: str) -> str:
        return name

    with pytest.raises(ConfigurationError):
        asyncio.run(run_bounded(["a"], worker, max_concurrency=0, context=context))


def _registry(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/pypi/web/simple/":
        return httpx.Response(
            200,
            text=listing_page(("/simple/foo/", "foo"), ("/simple/bar/", "bar"), ("/simple/baz/", "baz")),
        )
    if path == "/pypi/web/simple/foo/":
        return httpx.Response(
            200,
            text=listing_page(
                ("../../packages/aa/foo-1.0.tar.gz#sha256=1", "foo-1.0.tar.gz"),
                ("https://elsewhere.test/foo-1.0-py3-none-any.whl", "foo-1.0-py3-none-any.whl"),
            ),
        )
    if path == "/pypi/web/simple/bar/":
        return httpx.Response(500)
    if path == "/pypi/web/simple/baz/":
        return httpx.Response(
            200,
            text=listing_page(("../../packages/bb/baz-0.1.zip?md5=2", "baz-0.1.zip")),
        )
    return httpx.Response(404)


def test_failing_package_does_not_abort_run(settings, make_client, context, progress) -> None:
    async def go():
        async with make_client(_registry) as client:
            return await take_snapshot(settings=settings, context=context, client=client)

    result = asyncio.run(go())

    assert result.entries == ["aa/foo-1.0.tar.gz", "bb/baz-0.1.zip"]
    assert result.packages == 3
    assert result.artifacts == 3
    assert result.dropped == 1
    assert progress.completed == 3
    assert progress.message == "done"


def test_discovery_failure_aborts_before_fan_out(settings, make_client, context, progress) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502)

    async def go():
        async with make_client(handler) as client:
            return await take_snapshot(settings=settings, context=context, client=client)

    with pytest.raises(DiscoveryError):
        asyncio.run(go())
    assert progress.completed == 0


def test_snapshot_entries_resolve_back(settings, make_client, context) -> None:
    async def go():
        async with make_client(_registry) as client:
            return await take_snapshot(settings=settings, context=context, client=client)

    result = asyncio.run(go())
    assert [resolve_transfer_url(e, PACKAGE_BASE) for e in result.entries] == [
        f"{PACKAGE_BASE}/aa/foo-1.0.tar.gz",
        f"{PACKAGE_BASE}/bb/baz-0.1.zip",
    ]
