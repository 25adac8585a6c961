from __future__ import annotations

from pathlib import Path

import pytest
import typer

from vcheck.cli.context import CLIContext
from vcheck.core.config import Config
from vcheck.core.errors import ErrorCode
from vcheck.core.result import Err, Ok
from vcheck.git.repository import BaseCommit
from vcheck.output.console import MockConsole
from vcheck.project.graph import ProjectGraph
from vcheck.release.decision import Decision
from vcheck.release.graph import Workspace
from vcheck.release.release_set import ReleaseSet
from vcheck.services.version_file import VersionFile, VersionFileError

A = Workspace("a", "packages/a", "1.0.0")
B = Workspace("b", "packages/b", "1.0.0")


def _ctx(tmp_path: Path) -> CLIContext:
    return CLIContext(project_root=tmp_path, config=Config(), console=MockConsole())


def _version_file(tmp_path: Path, releases: ReleaseSet) -> VersionFile:
    return VersionFile(
        root=tmp_path,
        path=tmp_path / ".vcheck" / "versions" / "abcdef12.json",
        base=BaseCommit(hash="abcdef1234", title="Base", ref="main"),
        changed_files=("packages/a/x.js",),
        project=ProjectGraph(tmp_path, [A, B], {B: [A]}),
        release_roots=frozenset({A}),
        releases=releases,
    )


def _patch(
    monkeypatch: pytest.MonkeyPatch,
    ctx: CLIContext,
    result: Ok[VersionFile | None] | Err[VersionFileError],
) -> None:
    import vcheck.cli.commands._helpers as helpers
    import vcheck.cli.commands.check as check_cmd

    monkeypatch.setattr(check_cmd, "build_context", lambda: ctx)
    monkeypatch.setattr(helpers, "open_version_file", lambda root, config: result)


def test_standard_fails_on_undecided(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.check as check_cmd

    ctx = _ctx(tmp_path)
    _patch(monkeypatch, ctx, Ok(_version_file(tmp_path, ReleaseSet())))

    with pytest.raises(typer.Exit) as exc:
        check_cmd.check(interactive=False)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_standard_passes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.check as check_cmd

    ctx = _ctx(tmp_path)
    releases = ReleaseSet({A: Decision.PATCH, B: Decision.PATCH})
    _patch(monkeypatch, ctx, Ok(_version_file(tmp_path, releases)))

    check_cmd.check(interactive=False)


def test_nothing_changed_is_success(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.check as check_cmd

    ctx = _ctx(tmp_path)
    _patch(monkeypatch, ctx, Ok(None))

    check_cmd.check(interactive=True)

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("nothing to check")


def test_no_git_root_is_env_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.check as check_cmd

    ctx = _ctx(tmp_path)
    error = VersionFileError(
        kind="no_git_root", message="This command can only be run on Git repositories"
    )
    _patch(monkeypatch, ctx, Err(error))

    with pytest.raises(typer.Exit) as exc:
        check_cmd.check(interactive=False)

    assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)


def test_interactive_saves(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.check as check_cmd

    ctx = _ctx(tmp_path)
    vf = _version_file(tmp_path, ReleaseSet())
    _patch(monkeypatch, ctx, Ok(vf))
    monkeypatch.setattr(check_cmd, "is_interactive_terminal", lambda: True)
    monkeypatch.setattr(
        check_cmd, "prompt_decisions", lambda **_: ReleaseSet({A: Decision.DECLINE})
    )

    check_cmd.check(interactive=True)

    assert vf.path.read_text(encoding="utf-8").count('"a"') == 1


def test_interactive_abort_saves_nothing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.check as check_cmd

    ctx = _ctx(tmp_path)
    vf = _version_file(tmp_path, ReleaseSet())
    _patch(monkeypatch, ctx, Ok(vf))
    monkeypatch.setattr(check_cmd, "is_interactive_terminal", lambda: True)
    monkeypatch.setattr(check_cmd, "prompt_decisions", lambda **_: None)

    with pytest.raises(typer.Exit) as exc:
        check_cmd.check(interactive=True)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert not vf.path.exists()


def test_interactive_requires_tty(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import vcheck.cli.commands.check as check_cmd

    ctx = _ctx(tmp_path)
    _patch(monkeypatch, ctx, Ok(_version_file(tmp_path, ReleaseSet())))
    monkeypatch.setattr(check_cmd, "is_interactive_terminal", lambda: False)

    with pytest.raises(typer.Exit) as exc:
        check_cmd.check(interactive=True)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
