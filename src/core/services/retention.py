"""Per-package version retention.

Keeps the `keep_recent` newest versions of a package, spending at most half
of that budget on pre-releases. All artifacts of a retained version are kept
together (sdist + wheels), so a version is never half-mirrored.

Packages whose filenames do not all follow the naming convention are left
untouched: pruning a listing we cannot fully order could drop the wrong files.
"""

from __future__ import annotations

from packaging.version import Version

from core.domain.models import ListingEntry, RetentionBudget
from core.domain.versions import is_stable, version_from_filename
from core.services.context import RunContext


def truncate_to_recent(
    entries: list[ListingEntry],
    budget: RetentionBudget,
    *,
    package: str,
    context: RunContext,
) -> list[ListingEntry]:
    """Select the entries to keep, newest first."""

    candidates: list[tuple[ListingEntry, Version]] = []
    for entry in entries:
        version = version_from_filename(entry.filename)
        if version is None:
            context.logger.warning(
                "give up keep_recent for package {}: cannot parse version from {!r}",
                package,
                entry.filename,
            )
            return entries
        candidates.append((entry, version))

    # sorted() is stable: equal versions keep page order before reversal.
    candidates = sorted(candidates, key=lambda item: item[1])

    result: list[ListingEntry] = []
    selected_versions = 0
    selected_unstable = 0
    previous: Version | None = None

    for entry, version in reversed(candidates):
        if previous is not None and version == previous:
            # Another file of an already retained version.
            result.append(entry)
            continue
        if selected_versions >= budget.keep_recent:
            break

        if is_stable(version):
            result.append(entry)
        else:
            if selected_unstable >= budget.at_most_unstable:
                continue
            result.append(entry)
            selected_unstable += 1
        previous = version
        selected_versions += 1

    return result
