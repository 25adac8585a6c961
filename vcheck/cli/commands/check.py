from __future__ import annotations

import typer

from vcheck.cli.commands._helpers import load_version_file, report_error
from vcheck.cli.context import CLIContext, build_context
from vcheck.cli.decision_prompt import is_interactive_terminal, prompt_decisions
from vcheck.core.errors import ErrorCode
from vcheck.core.result import Err
from vcheck.release.editor import DecisionEditor
from vcheck.release.errors import MissingVersionError
from vcheck.services.check import CheckService
from vcheck.services.version_file import VersionFile


def check(
    interactive: bool = typer.Option(
        False,
        "--interactive",
        "-i",
        help="Open an interactive interface used to set version bumps.",
    ),
) -> None:
    """Check that every modified workspace has a release strategy.

    Workspaces depending on a workspace planned for release need a
    decision too, unless that dependency declined to release.
    """
    ctx = build_context()
    version_file = load_version_file(ctx)
    if version_file is None:
        return

    if interactive:
        _check_interactive(ctx, version_file)
    else:
        _check_standard(ctx, version_file)


def _check_standard(ctx: CLIContext, version_file: VersionFile) -> None:
    outcome = CheckService(version_file=version_file, console=ctx.console).run()
    if outcome.exit_code.is_error:
        raise typer.Exit(code=int(outcome.exit_code))


def _check_interactive(ctx: CLIContext, version_file: VersionFile) -> None:
    if not is_interactive_terminal():
        ctx.console.error("interactive mode requires a TTY")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    editor = DecisionEditor(version_file.release_roots, version_file.project, version_file.releases)
    try:
        decisions = prompt_decisions(editor=editor, changed_files=version_file.changed_files)
    except MissingVersionError as e:
        ctx.console.error(str(e))
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    if decisions is None:
        ctx.console.warning("aborted, no decision saved")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    saved = version_file.save(decisions)
    if isinstance(saved, Err):
        report_error(ctx, saved.error)
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))

    ctx.console.success(f"saved {len(decisions)} decision(s) to {version_file.path}")
