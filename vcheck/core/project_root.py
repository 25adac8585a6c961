"""Project root detection.

The project root is the directory holding the root package.json, i.e. the
one that declares ``workspaces``. Detection order:

1. VCHECK_PROJECT_ROOT environment variable (set by ``--project``)
2. Nearest ancestor of the start directory whose package.json declares
   ``workspaces``
3. Nearest ancestor holding any package.json
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import as_str_dict

__all__ = [
    "PROJECT_ROOT_ENV",
    "ProjectRootError",
    "declares_workspaces",
    "detect_project_root",
]

PROJECT_ROOT_ENV = "VCHECK_PROJECT_ROOT"


@dataclass(frozen=True, slots=True)
class ProjectRootError:
    """Error when the project root cannot be detected."""

    message: str
    searched_from: Path | None = None


def declares_workspaces(directory: Path) -> bool:
    """Check if ``directory/package.json`` has a ``workspaces`` field.

    Unreadable or malformed manifests count as not declaring any.
    """
    try:
        obj: object = json.loads((directory / "package.json").read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return False
    data = as_str_dict(obj)
    return data is not None and "workspaces" in data


def detect_project_root(
    *,
    start_dir: Path | None = None,
    env_var: str = PROJECT_ROOT_ENV,
) -> Result[Path, ProjectRootError]:
    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if (env_path / "package.json").is_file():
            return Ok(env_path)
        return Err(
            ProjectRootError(
                message=f"${env_var} is set to '{env_value}' but it has no package.json",
                searched_from=env_path if env_path.is_dir() else None,
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    candidates = [p for p in (search_start, *search_start.parents) if (p / "package.json").is_file()]

    for candidate in candidates:
        if declares_workspaces(candidate):
            return Ok(candidate)
    if candidates:
        return Ok(candidates[0])

    return Err(
        ProjectRootError(
            message="Could not find a project root (no package.json found)",
            searched_from=search_start,
        )
    )
