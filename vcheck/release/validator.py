"""Batch validation of recorded release decisions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from vcheck.release.graph import DependentPair, Workspace, WorkspaceGraph
from vcheck.release.release_set import ReleaseSet

__all__ = ["ValidationReport", "validate"]


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Workspaces that need a decision but do not have one.

    Attributes:
        undecided_roots: Changed workspaces without a decision, in graph order
        undecided_dependents: (dependent, dependency) pairs where the
            dependency is planned for release and the dependent is undecided
    """

    undecided_roots: tuple[Workspace, ...]
    undecided_dependents: tuple[DependentPair, ...]

    @property
    def ok(self) -> bool:
        return not self.undecided_roots and not self.undecided_dependents


def validate(
    release_roots: Iterable[Workspace],
    releases: ReleaseSet,
    graph: WorkspaceGraph,
) -> ValidationReport:
    """Report missing decisions. Never raises on findings.

    Dependents are checked against the full release set, not the relevant
    subset: a stale decision still requires its dependents to be decided.
    """
    roots = set(release_roots)
    ordered = [w for w in graph.workspaces() if w in roots]
    # Roots unknown to the graph still get reported, after the known ones
    ordered += sorted(roots.difference(ordered), key=lambda w: w.name)

    return ValidationReport(
        undecided_roots=tuple(w for w in ordered if w not in releases),
        undecided_dependents=tuple(graph.undecided_dependent_workspaces(releases)),
    )
