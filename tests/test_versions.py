from __future__ import annotations

import pytest
from packaging.version import Version

from core.domain.versions import is_stable, version_from_filename


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("foo-1.0.0.tar.gz", "1.0.0"),
        ("foo-1.0.tar.bz2", "1.0"),
        ("foo-1.0.zip", "1.0"),
        ("foo_bar-2.0rc1-py3-none-any.whl", "2.0rc1"),
        ("foo-1.0-cp39-cp39-manylinux_2_17_x86_64.whl", "1.0"),
        ("foo-1.0.win32.exe", "1.0"),
        ("foo-1.0-py2.7.egg", "1.0"),
        ("py-3to2-1.1.tar.gz", "1.1"),
    ],
)
def test_version_from_filename(filename: str, expected: str) -> None:
    assert version_from_filename(filename) == Version(expected)


@pytest.mark.parametrize(
    "filename",
    ["data.tar", "readme.txt", "foo.tar.gz", "foo-bar.tar.gz", ".whl", "foo-1.0.tar.xz"],
)
def test_unrecognized_filenames_have_no_version(filename: str) -> None:
    assert version_from_filename(filename) is None


def test_stability_flags() -> None:
    assert is_stable(Version("1.0"))
    assert is_stable(Version("1.0.post1"))
    assert not is_stable(Version("2.0rc1"))
    assert not is_stable(Version("2.0a3"))
    assert not is_stable(Version("1.1.dev0"))
