from __future__ import annotations

import pytest

from vcheck.release.semver import SemVer, bump, is_prerelease, parse


def test_parse() -> None:
    assert parse("1.2.3") == SemVer(1, 2, 3)
    assert parse("1.2.3-beta.2+build.5") == SemVer(1, 2, 3, ("beta", "2"))
    assert parse("01.2.3") is None
    assert parse("latest") is None


def test_is_prerelease() -> None:
    assert is_prerelease("1.0.0-rc.1")
    assert not is_prerelease("1.0.0")
    assert not is_prerelease("not a version")


@pytest.mark.parametrize(
    ("version", "kind", "expected"),
    [
        ("1.2.3", "patch", "1.2.4"),
        ("1.2.3", "minor", "1.3.0"),
        ("1.2.3", "major", "2.0.0"),
        ("1.2.3", "prerelease", "1.2.4-0"),
        ("1.2.3-rc.1", "prerelease", "1.2.3-rc.2"),
        ("1.2.3-alpha", "prerelease", "1.2.3-alpha.0"),
        ("2.0.0-rc.1", "major", "2.0.0"),
        ("2.1.0-rc.1", "major", "3.0.0"),
        ("1.2.3-rc.1", "patch", "1.2.3"),
    ],
)
def test_bump(version: str, kind: str, expected: str) -> None:
    assert bump(version, kind) == expected


def test_bump_rejects_invalid_version() -> None:
    with pytest.raises(ValueError, match="invalid version"):
        bump("next", "patch")


def test_bump_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError, match="unexpected bump kind"):
        bump("1.0.0", "decline")
