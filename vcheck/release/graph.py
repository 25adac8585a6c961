"""Workspace identity and the graph interface the release core consumes.

The core never walks dependency edges itself. It asks a ``WorkspaceGraph``
which undecided workspaces depend on something that is being released, and
treats the answer as opaque. ``vcheck.project`` provides the implementation
backed by package.json manifests; tests build small in-memory graphs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from vcheck.release.decision import Decision

__all__ = ["DependentPair", "Workspace", "WorkspaceGraph"]


@dataclass(frozen=True, slots=True)
class Workspace:
    """A package of the project, identified by its manifest name.

    Attributes:
        name: Package name (stable identity, also the persistence key)
        cwd: Directory relative to the project root, POSIX style ("." for the root)
        version: Current manifest version, None when the manifest has none
        private: Private workspaces are never published but still propagate
    """

    name: str
    cwd: str = "."
    version: str | None = None
    private: bool = False

    def __str__(self) -> str:
        return self.name


# (dependent without a decision, dependency planned for release)
DependentPair = tuple[Workspace, Workspace]


class WorkspaceGraph(Protocol):
    """Read-only snapshot of the project's workspaces and their edges."""

    def workspaces(self) -> Sequence[Workspace]:
        """All workspaces, in discovery order."""
        ...

    def release_roots(self, changed_files: Iterable[str]) -> frozenset[Workspace]:
        """Workspaces owning at least one of ``changed_files``."""
        ...

    def undecided_dependent_workspaces(
        self, releases: Mapping[Workspace, Decision]
    ) -> list[DependentPair]:
        """Pairs (W, D) where W has no entry in ``releases`` and depends on a
        workspace D whose entry is anything but DECLINE."""
        ...
