"""Apply release decisions one at a time, keeping the set relevancy-closed.

This is the model behind the interactive editor and ``vcheck decide``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from vcheck.release.decision import Decision
from vcheck.release.graph import Workspace, WorkspaceGraph
from vcheck.release.relevancy import Relevancy, compute_relevancy
from vcheck.release.release_set import ReleaseRoots, ReleaseSet

__all__ = ["DecisionEditor", "DecisionStats"]


@dataclass(frozen=True, slots=True)
class DecisionStats:
    total: int
    releases: int
    remaining: int

    def __str__(self) -> str:
        plural = "" if self.releases == 1 else "s"
        return f"{self.total} total, {self.releases} release{plural}, {self.remaining} remaining"


class DecisionEditor:
    """Owns the working ReleaseSet of one editing session.

    After every ``apply_decision`` the working set only holds decisions for
    workspaces that are still relevant. Decisions of workspaces that fell out
    of relevancy are dropped, even though the user never touched them.
    """

    def __init__(
        self,
        release_roots: Iterable[Workspace],
        graph: WorkspaceGraph,
        releases: ReleaseSet | None = None,
    ) -> None:
        self._roots: ReleaseRoots = frozenset(release_roots)
        self._graph = graph
        self._releases = releases.copy() if releases is not None else ReleaseSet()

    @property
    def release_roots(self) -> ReleaseRoots:
        return self._roots

    @property
    def releases(self) -> ReleaseSet:
        """A copy of the working set; mutate through ``apply_decision``."""
        return self._releases.copy()

    def decision_for(self, workspace: Workspace) -> Decision:
        return self._releases.decision_for(workspace)

    def relevancy(self) -> Relevancy:
        return compute_relevancy(self._roots, self._releases, self._graph)

    def apply_decision(self, workspace: Workspace, decision: Decision) -> ReleaseSet:
        """Record ``decision`` for ``workspace`` and recompute relevancy.

        UNDECIDED removes the entry. Returns the new working set.
        """
        working = self._releases.copy()
        working.assign(workspace, decision)

        self._releases = compute_relevancy(self._roots, working, self._graph).releases
        return self.releases

    def root_workspaces(self) -> list[Workspace]:
        return self._in_graph_order(self._roots)

    def dependent_workspaces(self) -> list[Workspace]:
        """Relevant workspaces that are not release roots, in graph order."""
        relevant = self.relevancy().workspaces
        return self._in_graph_order(relevant - self._roots)

    def stats(self, workspaces: Iterable[Workspace]) -> DecisionStats:
        total = 0
        releases = 0
        remaining = 0
        for workspace in workspaces:
            total += 1
            decision = self._releases.decision_for(workspace)
            if decision is Decision.UNDECIDED:
                remaining += 1
            elif decision is not Decision.DECLINE:
                releases += 1
        return DecisionStats(total=total, releases=releases, remaining=remaining)

    def _in_graph_order(self, workspaces: Iterable[Workspace]) -> list[Workspace]:
        wanted = set(workspaces)
        ordered = [w for w in self._graph.workspaces() if w in wanted]
        ordered += sorted(wanted.difference(ordered), key=lambda w: w.name)
        return ordered
