from __future__ import annotations

import typer

from vcheck.cli.commands._helpers import load_version_file, report_error
from vcheck.cli.context import build_context
from vcheck.core.errors import ErrorCode
from vcheck.core.result import Err
from vcheck.output.console import Style
from vcheck.release.decision import Decision, parse_decision, strategies_for
from vcheck.release.editor import DecisionEditor
from vcheck.release.errors import MissingVersionError
from vcheck.services.check import describe_workspace


def decide(
    workspace: str = typer.Argument(..., help="Workspace name, as in its package.json."),
    strategy: str = typer.Argument(
        ...,
        help="One of: undecided, decline, patch, minor, major, prerelease.",
    ),
) -> None:
    """Record a release decision for one workspace."""
    ctx = build_context()

    decision = parse_decision(strategy)
    if decision is None:
        ctx.console.error(f"unknown release strategy: {strategy}")
        ctx.console.print(f"Available: {', '.join(d.value for d in Decision)}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    version_file = load_version_file(ctx)
    if version_file is None:
        return

    target = version_file.project.by_name(workspace)
    if target is None:
        ctx.console.error(f"unknown workspace: {workspace}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    editor = DecisionEditor(version_file.release_roots, version_file.project, version_file.releases)
    if target not in editor.relevancy().workspaces:
        ctx.console.error(f"{workspace} doesn't need a release decision")
        ctx.console.print(
            "hint: only modified workspaces and dependents of released ones can be decided",
            Style.DIM,
        )
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    try:
        strategies = strategies_for(target)
    except MissingVersionError as e:
        ctx.console.error(str(e))
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    if decision not in strategies:
        ctx.console.error(
            f"{decision.value} is not a release strategy for {describe_workspace(target)}"
        )
        ctx.console.print(f"Available: {', '.join(d.value for d in strategies)}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    releases = editor.apply_decision(target, decision)
    saved = version_file.save(releases)
    if isinstance(saved, Err):
        report_error(ctx, saved.error)
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))

    ctx.console.success(f"{workspace}: {decision.value}")
    dependents = editor.dependent_workspaces()
    undecided = [w for w in dependents if editor.decision_for(w) is Decision.UNDECIDED]
    if undecided:
        ctx.console.warning(
            "now waiting on a decision: " + ", ".join(w.name for w in undecided)
        )
