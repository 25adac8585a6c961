from __future__ import annotations

from pathlib import Path

from vcheck.project.graph import ProjectGraph
from vcheck.release.decision import Decision
from vcheck.release.graph import Workspace
from vcheck.release.release_set import ReleaseSet
from vcheck.release.validator import validate

A = Workspace("a", "packages/a", "1.0.0")
B = Workspace("b", "packages/b", "1.0.0")
C = Workspace("c", "packages/c", "1.0.0")


def _graph() -> ProjectGraph:
    # b -> a, c -> b
    return ProjectGraph(Path("."), [A, B, C], {B: [A], C: [B]})


def test_success_when_everything_decided() -> None:
    report = validate({A}, ReleaseSet({A: Decision.PATCH, B: Decision.DECLINE}), _graph())
    assert report.ok
    assert report.undecided_roots == ()
    assert report.undecided_dependents == ()


def test_root_with_no_dependents_decided() -> None:
    graph = ProjectGraph(Path("."), [A, B], {})
    report = validate({A}, ReleaseSet({A: Decision.PATCH}), graph)
    assert report.ok


def test_undecided_root_is_reported() -> None:
    report = validate({A}, ReleaseSet(), _graph())
    assert not report.ok
    assert set(report.undecided_roots) == {A}
    assert report.undecided_dependents == ()


def test_undecided_dependent_is_reported_with_its_dependency() -> None:
    report = validate({A}, ReleaseSet({A: Decision.MINOR}), _graph())
    assert report.undecided_roots == ()
    assert report.undecided_dependents == ((B, A),)


def test_declined_dependency_is_not_reported() -> None:
    report = validate({A}, ReleaseSet({A: Decision.DECLINE}), _graph())
    assert report.ok


def test_dependents_checked_against_the_full_release_set() -> None:
    # b is not a root and nothing relevant implicates it, yet its recorded
    # bump still requires c to decide
    report = validate({A}, ReleaseSet({A: Decision.DECLINE, B: Decision.PATCH}), _graph())
    assert report.undecided_dependents == ((C, B),)


def test_undecided_roots_follow_graph_order() -> None:
    report = validate({C, A}, ReleaseSet(), _graph())
    assert report.undecided_roots == (A, C)
