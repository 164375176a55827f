"""Artifact URL normalization.

Mirrors embed per-artifact checksums in the URL (`?sha256=...` or
`#sha256=...`). A snapshot entry must not change when identical bytes are
re-uploaded, so only scheme, authority and path are kept.
"""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit


def clean_url(url: str) -> str:
    """Return `url` without its query string and fragment."""

    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
