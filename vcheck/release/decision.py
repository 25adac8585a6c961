"""Release decisions and the strategies offered for a workspace."""

from __future__ import annotations

from enum import StrEnum

from vcheck.release.errors import MissingVersionError
from vcheck.release.graph import Workspace
from vcheck.release.semver import is_prerelease

__all__ = [
    "Decision",
    "BUMP_DECISIONS",
    "parse_decision",
    "strategies_for",
]


class Decision(StrEnum):
    """How a workspace is going to be released.

    UNDECIDED is never stored; a workspace without a decision is simply
    absent from its ReleaseSet.
    """

    UNDECIDED = "undecided"
    DECLINE = "decline"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    PRERELEASE = "prerelease"

    @property
    def is_bump(self) -> bool:
        """True for decisions that produce a new version."""
        return self in BUMP_DECISIONS


BUMP_DECISIONS = frozenset({Decision.PATCH, Decision.MINOR, Decision.MAJOR, Decision.PRERELEASE})

_STABLE_STRATEGIES = (
    Decision.UNDECIDED,
    Decision.DECLINE,
    Decision.PATCH,
    Decision.MINOR,
    Decision.MAJOR,
    Decision.PRERELEASE,
)

# From a prerelease, only continuing the prerelease or graduating it make sense.
_PRERELEASE_STRATEGIES = (
    Decision.UNDECIDED,
    Decision.DECLINE,
    Decision.PRERELEASE,
    Decision.MAJOR,
)


def parse_decision(value: str) -> Decision | None:
    try:
        return Decision(value.strip().lower())
    except ValueError:
        return None


def strategies_for(workspace: Workspace) -> tuple[Decision, ...]:
    """Return the decisions a user may pick for ``workspace``, in UI order.

    Raises:
        MissingVersionError: The workspace manifest has no version.
    """
    if workspace.version is None:
        raise MissingVersionError(workspace)
    if is_prerelease(workspace.version):
        return _PRERELEASE_STRATEGIES
    return _STABLE_STRATEGIES
