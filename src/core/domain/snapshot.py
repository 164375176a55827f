"""Snapshot assembly and transfer resolution.

A snapshot entry is an artifact URL relative to the package base, so the
download stage can rebuild the absolute URL without any I/O.
"""

from __future__ import annotations

from itertools import chain
from typing import TYPE_CHECKING, Iterable

from core.domain.models import ListingEntry

if TYPE_CHECKING:
    from loguru import Logger


def normalize_base(package_base: str) -> str:
    return package_base if package_base.endswith("/") else f"{package_base}/"


def assemble_snapshot(
    packages: Iterable[list[ListingEntry]],
    package_base: str,
    *,
    logger: "Logger",
) -> tuple[list[str], int]:
    """Flatten per-package listings into relative snapshot entries.

    URLs outside `package_base` are dropped with a warning. Returns the
    entries (duplicates kept, order kept) and the number of dropped URLs.
    """

    base = normalize_base(package_base)
    entries: list[str] = []
    dropped = 0
    for entry in chain.from_iterable(packages):
        if entry.url.startswith(base):
            entries.append(entry.url[len(base):])
        else:
            logger.warning("PyPI package isn't stored on base: {!r}", entry.url)
            dropped += 1
    return entries, dropped


def resolve_transfer_url(entry: str, package_base: str) -> str:
    """Absolute download URL of a snapshot entry.

    The base is normalized to end in `/` first, so `packages` and `packages/`
    both resolve to `packages/{entry}`, the inverse of `assemble_snapshot`.
    """

    return normalize_base(package_base) + entry
