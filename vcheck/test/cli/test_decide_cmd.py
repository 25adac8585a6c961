from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer

from vcheck.cli.context import CLIContext
from vcheck.core.config import Config
from vcheck.core.errors import ErrorCode
from vcheck.core.result import Ok
from vcheck.git.repository import BaseCommit
from vcheck.output.console import MockConsole
from vcheck.project.graph import ProjectGraph
from vcheck.release.decision import Decision
from vcheck.release.graph import Workspace
from vcheck.release.release_set import ReleaseSet
from vcheck.services.version_file import VersionFile

A = Workspace("a", "packages/a", "1.0.0")
B = Workspace("b", "packages/b", "1.0.0")
C = Workspace("c", "packages/c", "1.0.0")
PRE = Workspace("pre", "packages/pre", "2.0.0-rc.1")
NO_VERSION = Workspace("nov", "packages/nov")


def _setup(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    releases: ReleaseSet,
    *,
    root: Workspace = A,
) -> tuple[MockConsole, VersionFile]:
    import vcheck.cli.commands._helpers as helpers
    import vcheck.cli.commands.decide as decide_cmd

    console = MockConsole()
    ctx = CLIContext(project_root=tmp_path, config=Config(), console=console)
    vf = VersionFile(
        root=tmp_path,
        path=tmp_path / ".vcheck" / "versions" / "abcdef12.json",
        base=BaseCommit(hash="abcdef1234", title="Base", ref="main"),
        changed_files=("packages/a/x.js",),
        project=ProjectGraph(tmp_path, [A, B, C, PRE, NO_VERSION], {B: [A]}),
        release_roots=frozenset({root}),
        releases=releases,
    )
    monkeypatch.setattr(decide_cmd, "build_context", lambda: ctx)
    monkeypatch.setattr(helpers, "open_version_file", lambda root, config: Ok(vf))
    return console, vf


def _saved(vf: VersionFile) -> dict[str, object]:
    return json.loads(vf.path.read_text(encoding="utf-8"))


def test_decide_root_saves_and_warns_about_dependents(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import vcheck.cli.commands.decide as decide_cmd

    console, vf = _setup(tmp_path, monkeypatch, ReleaseSet())

    decide_cmd.decide("a", "minor")

    assert _saved(vf)["releases"] == {"a": "minor"}
    assert console.find("OK a: minor")
    assert console.find("now waiting on a decision: b")


def test_decide_dependent(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.decide as decide_cmd

    console, vf = _setup(tmp_path, monkeypatch, ReleaseSet({A: Decision.PATCH}))

    decide_cmd.decide("b", "decline")

    assert _saved(vf) == {"schema": 1, "releases": {"a": "patch"}, "declined": ["b"]}
    assert not console.find("waiting")


def test_decide_undecided_removes_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.decide as decide_cmd

    _, vf = _setup(tmp_path, monkeypatch, ReleaseSet({A: Decision.PATCH, B: Decision.PATCH}))
    vf.path.parent.mkdir(parents=True)
    vf.path.write_text("{}", encoding="utf-8")

    decide_cmd.decide("a", "undecided")

    assert not vf.path.exists()


def test_decide_irrelevant_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.decide as decide_cmd

    console, vf = _setup(tmp_path, monkeypatch, ReleaseSet())

    with pytest.raises(typer.Exit) as exc:
        decide_cmd.decide("c", "patch")

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("c doesn't need a release decision")
    assert not vf.path.exists()


def test_decide_unknown_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.decide as decide_cmd

    console, _ = _setup(tmp_path, monkeypatch, ReleaseSet())

    with pytest.raises(typer.Exit) as exc:
        decide_cmd.decide("nope", "patch")

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("unknown workspace: nope")


def test_decide_unknown_strategy(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.decide as decide_cmd

    console, _ = _setup(tmp_path, monkeypatch, ReleaseSet())

    with pytest.raises(typer.Exit) as exc:
        decide_cmd.decide("a", "huge")

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("Available: undecided, decline, patch, minor, major, prerelease")


def test_decide_prerelease_rejects_minor(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.decide as decide_cmd

    console, vf = _setup(tmp_path, monkeypatch, ReleaseSet(), root=PRE)

    with pytest.raises(typer.Exit) as exc:
        decide_cmd.decide("pre", "minor")

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("minor is not a release strategy for pre@2.0.0-rc.1")
    assert console.find("Available: undecided, decline, prerelease, major")
    assert not vf.path.exists()


def test_decide_prerelease_accepts_prerelease(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import vcheck.cli.commands.decide as decide_cmd

    _, vf = _setup(tmp_path, monkeypatch, ReleaseSet(), root=PRE)

    decide_cmd.decide("pre", "prerelease")

    assert _saved(vf)["releases"] == {"pre": "prerelease"}


def test_decide_without_version_is_env_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import vcheck.cli.commands.decide as decide_cmd

    console, vf = _setup(tmp_path, monkeypatch, ReleaseSet(), root=NO_VERSION)

    with pytest.raises(typer.Exit) as exc:
        decide_cmd.decide("nov", "patch")

    assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)
    assert console.find("The version should have been set (nov at packages/nov)")
    assert not vf.path.exists()
