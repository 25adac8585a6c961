"""The version file: release decisions recorded for the current branch.

Decisions are stored per base commit, in
``<project>/<versions_dir>/<base hash[:8]>.json``::

    {
      "schema": 1,
      "releases": {"@scope/app": "minor"},
      "declined": ["@scope/docs"]
    }

Undecided workspaces are never written.
"""

from __future__ import annotations

import fnmatch
import json
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Literal

from vcheck.core.config import Config
from vcheck.core.result import Err, Ok, Result
from vcheck.core.structured import as_str_dict, get_int, get_str_list, get_table
from vcheck.git.repository import BaseCommit, Repository, find_root
from vcheck.platform.files import atomic_write_text, remove_if_exists
from vcheck.project.graph import ProjectGraph, load_project
from vcheck.release.decision import Decision, parse_decision
from vcheck.release.release_set import ReleaseRoots, ReleaseSet

__all__ = [
    "VERSION_FILE_SCHEMA",
    "VersionFile",
    "VersionFileError",
    "decode_releases",
    "encode_releases",
    "open_version_file",
]

VERSION_FILE_SCHEMA = 1

VersionFileErrorKind = Literal[
    "no_git_root",
    "no_base_ref",
    "git_failed",
    "invalid_project",
    "invalid_version_file",
    "write_failed",
]


@dataclass(frozen=True, slots=True)
class VersionFileError:
    kind: VersionFileErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


@dataclass(frozen=True, slots=True)
class VersionFile:
    """Everything a check session needs, loaded once up front.

    Attributes:
        root: Project root (directory of the root package.json)
        path: Location of the version file (may not exist yet)
        base: Commit the branch started from
        changed_files: Files changed since ``base``, relative to ``root``
        project: Workspace graph snapshot
        release_roots: Workspaces owning at least one changed file
        releases: Decisions loaded from ``path``
    """

    root: Path
    path: Path
    base: BaseCommit
    changed_files: tuple[str, ...]
    project: ProjectGraph
    release_roots: ReleaseRoots
    releases: ReleaseSet

    def save(self, releases: ReleaseSet) -> Result[None, VersionFileError]:
        """Persist ``releases``, replacing whatever the file held.

        An empty set removes the file.
        """
        try:
            if not releases:
                remove_if_exists(self.path)
                return Ok(None)
            payload = encode_releases(releases)
            atomic_write_text(self.path, json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            return Err(
                VersionFileError(
                    kind="write_failed",
                    message=f"failed to write version file: {e}",
                    hint=str(self.path),
                )
            )
        return Ok(None)


def encode_releases(releases: ReleaseSet) -> dict[str, object]:
    bumps: dict[str, str] = {}
    declined: list[str] = []
    for workspace, decision in sorted(releases.items(), key=lambda item: item[0].name):
        if decision is Decision.DECLINE:
            declined.append(workspace.name)
        else:
            bumps[workspace.name] = decision.value

    return {"schema": VERSION_FILE_SCHEMA, "releases": bumps, "declined": declined}


def decode_releases(
    data: dict[str, object], project: ProjectGraph
) -> Result[ReleaseSet, VersionFileError]:
    """Turn a parsed version file into a ReleaseSet.

    Names that no longer match a workspace and unknown strategies are
    dropped rather than rejected: manifests may have been renamed since.
    """
    schema = get_int(data, "schema")
    if schema != VERSION_FILE_SCHEMA:
        return Err(
            VersionFileError(
                kind="invalid_version_file",
                message=f"unsupported version file schema: {schema}",
            )
        )

    releases = ReleaseSet()
    for name, value in (get_table(data, "releases") or {}).items():
        workspace = project.by_name(name)
        decision = parse_decision(value) if isinstance(value, str) else None
        if workspace is None or decision is None or not decision.is_bump:
            continue
        releases[workspace] = decision

    for name in get_str_list(data, "declined") or []:
        workspace = project.by_name(name)
        if workspace is not None and workspace not in releases:
            releases[workspace] = Decision.DECLINE

    return Ok(releases)


def _read_releases(path: Path, project: ProjectGraph) -> Result[ReleaseSet, VersionFileError]:
    if not path.exists():
        return Ok(ReleaseSet())

    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        return Err(
            VersionFileError(
                kind="invalid_version_file",
                message=f"failed to load version file: {e}",
                hint=str(path),
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(
            VersionFileError(
                kind="invalid_version_file",
                message="version file root must be a JSON object",
                hint=str(path),
            )
        )

    return decode_releases(data, project).map_err(
        lambda e: VersionFileError(kind=e.kind, message=e.message, hint=str(path))
    )


def _is_ignored(path: str, patterns: tuple[str, ...]) -> bool:
    for pattern in patterns:
        if fnmatch.fnmatch(path, pattern):
            return True
        # "**/x" should match "x" at the top level too
        if pattern.startswith("**/") and fnmatch.fnmatch(path, pattern[3:]):
            return True
    return False


def _project_relative(git_root: Path, project_root: Path, files: tuple[str, ...]) -> list[str]:
    out: list[str] = []
    for file in files:
        absolute = git_root / file
        if not absolute.is_relative_to(project_root):
            continue
        out.append(absolute.relative_to(project_root).as_posix())
    return out


def open_version_file(
    project_root: Path, config: Config
) -> Result[VersionFile | None, VersionFileError]:
    """Gather changed files, release roots and recorded decisions.

    Returns:
        Ok(None) when nothing changed since the base commit
        Ok(VersionFile) otherwise
        Err(VersionFileError) when git or the manifests are unusable
    """
    project_root = project_root.resolve()
    git_root = find_root(project_root)
    if git_root is None:
        return Err(
            VersionFileError(
                kind="no_git_root",
                message="This command can only be run on Git repositories",
                hint=str(project_root),
            )
        )

    repo = Repository(git_root)
    base = repo.merge_base(config.git.base_refs)
    if isinstance(base, Err):
        return Err(
            VersionFileError(
                kind="no_base_ref",
                message=base.error.message,
                hint="Set git.base_refs in vcheck.toml",
            )
        )

    changed = repo.changed_files(base.value)
    if isinstance(changed, Err):
        return Err(VersionFileError(kind="git_failed", message=changed.error.message))

    versions_dir = PurePosixPath(config.paths.versions_dir)
    changed_files = tuple(
        f
        for f in _project_relative(git_root, project_root, changed.value)
        if not PurePosixPath(f).is_relative_to(versions_dir)
        and not _is_ignored(f, config.paths.ignore)
    )
    if not changed_files:
        return Ok(None)

    project = load_project(project_root)
    if isinstance(project, Err):
        error = project.error
        return Err(
            VersionFileError(
                kind="invalid_project",
                message=error.message,
                hint=str(error.path) if error.path is not None else None,
            )
        )

    path = project_root / config.paths.versions_dir / f"{base.value.hash[:8]}.json"
    releases = _read_releases(path, project.value)
    if isinstance(releases, Err):
        return releases

    return Ok(
        VersionFile(
            root=project_root,
            path=path,
            base=base.value,
            changed_files=changed_files,
            project=project.value,
            release_roots=project.value.release_roots(changed_files),
            releases=releases.value,
        )
    )
