from __future__ import annotations

import pytest

from adapters.http_client import build_async_client, extract_anchors, select_proxies
from core.config import AppSettings
from core.errors import ProxyConfigurationError


def test_no_proxy_configured() -> None:
    assert select_proxies({}) == {}


def test_scheme_specific_variables_win_over_catch_all() -> None:
    env = {
        "HTTP_PROXY": "http://upper:3128",
        "http_proxy": "http://lower:3128",
        "ALL_PROXY": "socks5://all:1080",
    }
    assert select_proxies(env) == {
        "http://": "http://lower:3128",
        "https://": "socks5://all:1080",
    }


def test_https_variable_only_applies_to_https_targets() -> None:
    env = {"HTTPS_PROXY": "http://secure:8080", "all_proxy": "http://all:8080"}
    assert select_proxies(env) == {
        "http://": "http://all:8080",
        "https://": "http://secure:8080",
    }


def test_blank_values_are_ignored() -> None:
    assert select_proxies({"http_proxy": "  ", "HTTP_PROXY": "http://p:1"}) == {"http://": "http://p:1"}


@pytest.mark.parametrize("value", ["not a proxy", "ftp://proxy:21", "http://", "http://:3128"])
def test_malformed_proxy_is_fatal(value: str) -> None:
    with pytest.raises(ProxyConfigurationError) as excinfo:
        select_proxies({"https_proxy": value})
    assert excinfo.value.variable == "https_proxy"


def test_client_construction_rejects_malformed_proxy() -> None:
    settings = AppSettings(_env_file=None)
    with pytest.raises(ProxyConfigurationError):
        build_async_client(settings, environ={"ALL_PROXY": "::::"})


def test_extract_anchors_resolves_and_skips_hrefless_links() -> None:
    html = (
        '<a name="top">anchor only</a>'
        '<a href="../../packages/x-1.0.tar.gz#sha256=0">x-1.0.tar.gz</a>'
        '<a href="https://other.test/y-2.0.zip" data-requires-python="&gt;=3.8">y-2.0.zip</a>'
    )
    assert extract_anchors(html=html, base_url="https://m.test/simple/x/") == [
        ("https://m.test/packages/x-1.0.tar.gz#sha256=0", "x-1.0.tar.gz"),
        ("https://other.test/y-2.0.zip", "y-2.0.zip"),
    ]


def test_extract_anchors_empty_document() -> None:
    assert extract_anchors(html="") == []
