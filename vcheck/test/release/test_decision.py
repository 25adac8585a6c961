from __future__ import annotations

import pytest

from vcheck.release.decision import Decision, parse_decision, strategies_for
from vcheck.release.errors import MissingVersionError
from vcheck.release.graph import Workspace


def test_stable_version_offers_every_strategy() -> None:
    strategies = strategies_for(Workspace("a", version="1.2.3"))
    assert strategies == (
        Decision.UNDECIDED,
        Decision.DECLINE,
        Decision.PATCH,
        Decision.MINOR,
        Decision.MAJOR,
        Decision.PRERELEASE,
    )


def test_prerelease_version_offers_reduced_strategies() -> None:
    strategies = strategies_for(Workspace("a", version="2.0.0-rc.1"))
    assert strategies == (
        Decision.UNDECIDED,
        Decision.DECLINE,
        Decision.PRERELEASE,
        Decision.MAJOR,
    )


def test_missing_version_is_fatal() -> None:
    with pytest.raises(MissingVersionError, match="version should have been set"):
        strategies_for(Workspace("a", cwd="packages/a"))


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("minor", Decision.MINOR),
        (" Decline ", Decision.DECLINE),
        ("undecided", Decision.UNDECIDED),
        ("nope", None),
    ],
)
def test_parse_decision(raw: str, expected: Decision | None) -> None:
    assert parse_decision(raw) is expected


def test_is_bump() -> None:
    assert Decision.PATCH.is_bump
    assert not Decision.DECLINE.is_bump
    assert not Decision.UNDECIDED.is_bump
