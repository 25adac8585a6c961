"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from vcheck.core.errors import ErrorCode
from vcheck.core.result import Err
from vcheck.output.console import Style
from vcheck.services.version_file import VersionFile, VersionFileError, open_version_file

if TYPE_CHECKING:
    from vcheck.cli.context import CLIContext


def exit_code_for(error: VersionFileError) -> ErrorCode:
    match error.kind:
        case "write_failed":
            return ErrorCode.IO_ERROR
        case _:
            return ErrorCode.ENV_ERROR


def report_error(ctx: CLIContext, error: VersionFileError) -> None:
    ctx.console.error(error.message)
    if error.hint:
        ctx.console.print(f"hint: {error.hint}", Style.DIM)


def load_version_file(ctx: CLIContext) -> VersionFile | None:
    """Open the version file, exiting on git/manifest errors.

    Returns None when there is nothing to check: no changed files, or
    changed files that belong to no workspace.
    """
    result = open_version_file(ctx.project_root, ctx.config)
    if isinstance(result, Err):
        report_error(ctx, result.error)
        raise typer.Exit(code=int(exit_code_for(result.error)))

    version_file = result.value
    if version_file is None or not version_file.release_roots:
        ctx.console.info("no workspace has been modified, nothing to check")
        return None
    return version_file
