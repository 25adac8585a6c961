"""Which workspaces currently need a release decision.

Starting from the release roots, every workspace that depends on something
planned for release (any decision but DECLINE) needs a decision of its own.
Once it gets one, its own dependents may need one too, so the search runs
until a pass discovers nothing new.

The closure is always rebuilt from the roots. Retracting a decision drops
every workspace and recorded decision that was only relevant through it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from vcheck.release.graph import Workspace, WorkspaceGraph
from vcheck.release.release_set import ReleaseSet

__all__ = ["Relevancy", "compute_relevancy"]


@dataclass(frozen=True, slots=True)
class Relevancy:
    """Result of a relevancy computation.

    Attributes:
        workspaces: Roots plus every dependent that needs a decision
        releases: The input decisions restricted to ``workspaces``
    """

    workspaces: frozenset[Workspace]
    releases: ReleaseSet


def compute_relevancy(
    release_roots: Iterable[Workspace],
    releases: ReleaseSet,
    graph: WorkspaceGraph,
) -> Relevancy:
    """Compute the relevant workspaces and the decisions that still apply.

    Pure: neither ``releases`` nor the graph is modified, and calling it
    twice with the same inputs gives equal results.
    """
    relevant_workspaces: set[Workspace] = set(release_roots)
    relevant_releases = releases.restricted_to(relevant_workspaces)

    while True:
        has_new_dependents = False

        for workspace, _ in graph.undecided_dependent_workspaces(relevant_releases):
            if workspace in relevant_workspaces:
                continue

            relevant_workspaces.add(workspace)
            has_new_dependents = True

            # A decision recorded earlier becomes effective again
            decision = releases.get(workspace)
            if decision is not None:
                relevant_releases[workspace] = decision

        if not has_new_dependents:
            break

    return Relevancy(workspaces=frozenset(relevant_workspaces), releases=relevant_releases)
