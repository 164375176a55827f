"""Shared pytest fixtures.

HTTP is faked with `httpx.MockTransport`; coroutines run with `asyncio.run`
so no async plugin is needed.
"""

from __future__ import annotations

from typing import Callable

import httpx
import pytest
from loguru import logger

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import ListingEntry
from core.interfaces.progress import NullProgress
from core.services.context import RunContext

SIMPLE_BASE = "https://mirror.test/pypi/web/simple"
PACKAGE_BASE = "https://mirror.test/pypi/web/packages"


@pytest.fixture()
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        simple_base=SIMPLE_BASE,
        package_base=PACKAGE_BASE,
        concurrent_resolve=4,
    )


@pytest.fixture()
def progress() -> NullProgress:
    return NullProgress()


@pytest.fixture()
def context(progress: NullProgress) -> RunContext:
    return RunContext(progress=progress)


@pytest.fixture()
def log_records():
    """Every loguru record emitted during the test (DEBUG and above)."""

    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


def warnings_in(records: list[dict]) -> list[str]:
    return [r["message"] for r in records if r["level"].name == "WARNING"]


@pytest.fixture()
def make_client(settings: AppSettings) -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return build_async_client(settings, transport=httpx.MockTransport(handler))

    return factory


def entries(*filenames: str, base: str = PACKAGE_BASE) -> list[ListingEntry]:
    return [ListingEntry(url=f"{base}/ab/cd/{name}", filename=name) for name in filenames]


def listing_page(*anchors: tuple[str, str]) -> str:
    links = "\n".join(f'    <a href="{href}">{text}</a><br/>' for href, text in anchors)
    return f"<!DOCTYPE html>\n<html>\n  <body>\n{links}\n  </body>\n</html>\n"
