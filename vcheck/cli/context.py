from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from vcheck.core.config import Config, load_config_or_default
from vcheck.core.errors import ErrorCode
from vcheck.core.project_root import detect_project_root
from vcheck.core.result import Err
from vcheck.output.console import ConsoleProtocol, RichConsole, Style


@dataclass(frozen=True, slots=True)
class CLIContext:
    project_root: Path
    config: Config
    console: ConsoleProtocol


def build_context() -> CLIContext:
    console = RichConsole()

    root_result = detect_project_root()
    if isinstance(root_result, Err):
        console.error(root_result.error.message)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    root = root_result.value

    config_result = load_config_or_default(root)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        if config_result.error.path is not None:
            console.print(f"hint: {config_result.error.path}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(project_root=root, config=config_result.value, console=console)
