"""Version extraction from artifact filenames.

Filenames follow `<name>-<version><suffix>.<ext>`:

- sdists: `foo-1.0.tar.gz`, `foo-1.0.zip`
- wheels: `foo-1.0-py3-none-any.whl`
- legacy installers/eggs: `foo-1.0.win32.exe`, `foo-1.0-py2.7.egg`

Anything else has no version; callers decide what that means.
"""

from __future__ import annotations

from packaging.version import InvalidVersion, Version

ARCHIVE_EXTENSIONS: tuple[str, ...] = (
    ".tar.gz",
    ".tar.bz2",
    ".zip",
    ".whl",
    ".exe",
    ".egg",
)


def _strip_extension(filename: str) -> str | None:
    for ext in ARCHIVE_EXTENSIONS:
        if filename.endswith(ext) and len(filename) > len(ext):
            return filename[: -len(ext)]
    return None


def version_from_filename(filename: str) -> Version | None:
    """Parse the version embedded in an artifact filename.

    Distribution names may themselves contain dashes (`py-3to2-1.0.tar.gz`),
    so every dash-separated segment after the first is tried in order and the
    first valid PEP 440 version wins.
    """

    stem = _strip_extension(filename)
    if stem is None:
        return None

    segments = stem.split("-")
    if len(segments) < 2 or not segments[0]:
        return None

    for segment in segments[1:]:
        version = _parse_segment(segment)
        if version is not None:
            return version
    return None


def _parse_segment(segment: str) -> Version | None:
    # `1.0.win32` -> `1.0`: trailing platform tags are peeled one dot at a time.
    candidate = segment
    while candidate:
        try:
            return Version(candidate)
        except InvalidVersion:
            head, sep, _ = candidate.rpartition(".")
            if not sep:
                return None
            candidate = head
    return None


def is_stable(version: Version) -> bool:
    """A version is stable unless it carries a pre-release or dev marker."""

    return not version.is_prerelease
