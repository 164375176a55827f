"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and the proxy policy for every request of a
  run (index fetch and each package listing share one client).
- Eases testing: a `transport` can be injected (httpx.MockTransport).
"""

from __future__ import annotations

import os
from typing import Mapping
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from core.config import AppSettings
from core.errors import ProxyConfigurationError

# Lowercase wins over uppercase; scheme-specific wins over the catch-all.
PROXY_ENV_PRIORITY: dict[str, tuple[str, ...]] = {
    "http://": ("http_proxy", "HTTP_PROXY", "all_proxy", "ALL_PROXY"),
    "https://": ("https_proxy", "HTTPS_PROXY", "all_proxy", "ALL_PROXY"),
}

_PROXY_SCHEMES = {"http", "https", "socks5", "socks5h"}


def _validate_proxy(variable: str, value: str) -> str:
    try:
        url = httpx.URL(value)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ProxyConfigurationError(variable, value) from exc
    if url.scheme not in _PROXY_SCHEMES or not url.host:
        raise ProxyConfigurationError(variable, value)
    return value


def select_proxies(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Pick one proxy URL per target scheme from the environment.

    Returns a mapping like `{"http://": "http://proxy:3128"}`; schemes without
    a configured proxy are absent. A malformed value is fatal.
    """

    env = os.environ if environ is None else environ
    selected: dict[str, str] = {}
    for scheme, variables in PROXY_ENV_PRIORITY.items():
        for variable in variables:
            value = (env.get(variable) or "").strip()
            if not value:
                continue
            selected[scheme] = _validate_proxy(variable, value)
            break
    return selected


def build_async_client(
    settings: AppSettings | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults and explicit proxies.

    httpx's own environment handling is disabled so `select_proxies` is the
    only proxy policy in effect.
    """

    settings = settings or AppSettings()
    headers = {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
    }
    timeout = httpx.Timeout(settings.http_timeout_seconds)

    if transport is not None:
        return httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers=headers,
            transport=transport,
            trust_env=False,
        )

    mounts = {
        scheme: httpx.AsyncHTTPTransport(proxy=proxy)
        for scheme, proxy in select_proxies(environ).items()
    }
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers=headers,
        mounts=mounts,
        trust_env=False,
    )


def extract_anchors(*, html: str, base_url: str | None = None) -> list[tuple[str, str]]:
    """Return `(href, text)` for every anchor carrying an href, in page order.

    With `base_url`, hrefs are resolved against it (`../../packages/...`).
    """

    if not html:
        return []

    soup = BeautifulSoup(html, "html.parser")
    anchors: list[tuple[str, str]] = []
    for tag in soup.find_all("a"):
        href = tag.get("href")
        if not isinstance(href, str):
            continue
        if base_url:
            href = urljoin(base_url, href)
        anchors.append((href, tag.get_text().strip()))
    return anchors
