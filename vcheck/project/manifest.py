"""package.json reading.

Only the fields the version check needs are extracted. Anything else in
the manifest is ignored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from vcheck.core.result import Err, Ok, Result
from vcheck.core.structured import as_str_dict, get_bool, get_str, get_str_list, get_table

__all__ = ["DEPENDENCY_FIELDS", "MANIFEST_FILENAME", "Manifest", "ProjectError", "read_manifest"]

MANIFEST_FILENAME = "package.json"

# A peer on a released workspace needs a decision as much as a hard dependency.
DEPENDENCY_FIELDS = ("dependencies", "devDependencies", "peerDependencies")


@dataclass(frozen=True, slots=True)
class ProjectError:
    """Error when the project cannot be loaded."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class Manifest:
    """The parts of a package.json relevant to release decisions.

    Attributes:
        name: Package name, None for anonymous manifests
        version: Declared version, None when absent
        private: The "private" flag
        dependencies: Names of all declared dependencies, first occurrence order
        workspaces: Workspace glob patterns (only meaningful on the root)
    """

    name: str | None
    version: str | None
    private: bool
    dependencies: tuple[str, ...]
    workspaces: tuple[str, ...]


def _workspace_patterns(data: dict[str, object]) -> tuple[str, ...]:
    # Both `"workspaces": [...]` and `"workspaces": {"packages": [...]}` are valid
    patterns = get_str_list(data, "workspaces")
    if patterns is None:
        table = get_table(data, "workspaces")
        patterns = get_str_list(table, "packages") if table is not None else None
    return tuple(patterns or ())


def _dependency_names(data: dict[str, object]) -> tuple[str, ...]:
    names: dict[str, None] = {}
    for field_name in DEPENDENCY_FIELDS:
        table = get_table(data, field_name)
        if table is None:
            continue
        for name in table:
            names.setdefault(name, None)
    return tuple(names)


def read_manifest(path: Path) -> Result[Manifest, ProjectError]:
    """Read and parse a package.json file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(ProjectError(f"failed to read manifest: {e}", path=path))

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ProjectError(f"invalid JSON in manifest: {e}", path=path))

    data = as_str_dict(obj)
    if data is None:
        return Err(ProjectError("manifest root must be a JSON object", path=path))

    return Ok(
        Manifest(
            name=get_str(data, "name"),
            version=get_str(data, "version"),
            private=get_bool(data, "private") or False,
            dependencies=_dependency_names(data),
            workspaces=_workspace_patterns(data),
        )
    )
