from __future__ import annotations

import os
from pathlib import Path

import typer

from vcheck import __version__
from vcheck.cli.commands.check import check
from vcheck.cli.commands.decide import decide
from vcheck.core.errors import ErrorCode
from vcheck.core.project_root import PROJECT_ROOT_ENV


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command()(check)
app.command()(decide)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    project: Path | None = typer.Option(
        None,
        "--project",
        help="Project root (overrides auto detection)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if project is not None:
        try:
            root = project.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --project: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not (root / "package.json").is_file():
            typer.echo(f"error: --project '{root}' has no package.json", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

        os.environ[PROJECT_ROOT_ENV] = str(root)


def main() -> None:
    app()
