"""Workspace graph built from the project's package.json manifests.

The root manifest lists workspace globs under ``workspaces``; each matching
directory with a package.json is a workspace, and so is the root itself
when it has a name. A dependency edge exists whenever a manifest declares a
dependency on another workspace's name, whatever the version range.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path, PurePosixPath

from vcheck.core.result import Err, Ok, Result
from vcheck.project.manifest import MANIFEST_FILENAME, Manifest, ProjectError, read_manifest
from vcheck.release.decision import Decision
from vcheck.release.graph import DependentPair, Workspace

__all__ = ["ProjectGraph", "load_project"]

_SKIPPED_DIRS = frozenset({"node_modules", ".git"})


class ProjectGraph:
    """Immutable snapshot of a project's workspaces and dependency edges.

    Implements the ``WorkspaceGraph`` protocol.
    """

    def __init__(
        self,
        root: Path,
        workspaces: Sequence[Workspace],
        dependencies: Mapping[Workspace, Sequence[Workspace]],
    ) -> None:
        self.root = root
        self._workspaces = tuple(workspaces)
        self._by_name = {w.name: w for w in self._workspaces}
        self._dependencies = {w: tuple(dependencies.get(w, ())) for w in self._workspaces}

    def workspaces(self) -> Sequence[Workspace]:
        return self._workspaces

    def by_name(self, name: str) -> Workspace | None:
        return self._by_name.get(name)

    def dependencies_of(self, workspace: Workspace) -> tuple[Workspace, ...]:
        """Direct workspace dependencies, in declaration order."""
        return self._dependencies.get(workspace, ())

    def workspace_by_path(self, path: str) -> Workspace | None:
        """Return the deepest workspace whose directory contains ``path``.

        ``path`` is relative to the project root.
        """
        target = PurePosixPath(path)
        best: Workspace | None = None
        best_depth = -1
        for workspace in self._workspaces:
            cwd = PurePosixPath(workspace.cwd)
            depth = 0 if workspace.cwd == "." else len(cwd.parts)
            if depth > best_depth and (depth == 0 or target.is_relative_to(cwd)):
                best = workspace
                best_depth = depth
        return best

    def release_roots(self, changed_files: Iterable[str]) -> frozenset[Workspace]:
        roots: set[Workspace] = set()
        for file in changed_files:
            workspace = self.workspace_by_path(file)
            if workspace is not None:
                roots.add(workspace)
        return frozenset(roots)

    def undecided_dependent_workspaces(
        self, releases: Mapping[Workspace, Decision]
    ) -> list[DependentPair]:
        pairs: list[DependentPair] = []
        for workspace in self._workspaces:
            if workspace in releases:
                continue
            for dependency in self._dependencies[workspace]:
                decision = releases.get(dependency)
                if decision is None or decision is Decision.DECLINE:
                    continue
                pairs.append((workspace, dependency))
        return pairs


def _relative(root: Path, directory: Path) -> str:
    rel = directory.relative_to(root).as_posix()
    return rel or "."


def _expand_patterns(root: Path, patterns: Sequence[str]) -> list[Path]:
    """Resolve workspace globs to directories holding a manifest.

    Patterns prefixed with ``!`` exclude directories matched earlier.
    """
    found: dict[Path, None] = {}
    excluded: set[Path] = set()

    for pattern in patterns:
        negate = pattern.startswith("!")
        glob = pattern[1:] if negate else pattern
        glob = glob.strip().removeprefix("./").rstrip("/")
        if not glob:
            continue

        for candidate in sorted(root.glob(glob)):
            if not candidate.is_dir() or _SKIPPED_DIRS.intersection(candidate.relative_to(root).parts):
                continue
            if not (candidate / MANIFEST_FILENAME).is_file():
                continue
            if negate:
                excluded.add(candidate)
            else:
                found.setdefault(candidate, None)

    return [d for d in found if d not in excluded and d != root]


def load_project(root: Path) -> Result[ProjectGraph, ProjectError]:
    """Load every workspace manifest under ``root``.

    Returns:
        Ok(ProjectGraph) on success
        Err(ProjectError) if the root manifest is missing or any manifest is
        malformed, or two workspaces share a name
    """
    root_manifest_path = root / MANIFEST_FILENAME
    if not root_manifest_path.is_file():
        return Err(ProjectError(f"no {MANIFEST_FILENAME} found at project root", path=root))

    root_manifest = read_manifest(root_manifest_path)
    if isinstance(root_manifest, Err):
        return root_manifest

    loaded: list[tuple[Path, Manifest]] = [(root, root_manifest.value)]
    for directory in _expand_patterns(root, root_manifest.value.workspaces):
        manifest = read_manifest(directory / MANIFEST_FILENAME)
        if isinstance(manifest, Err):
            return manifest
        loaded.append((directory, manifest.value))

    workspaces: list[Workspace] = []
    manifests: dict[Workspace, Manifest] = {}
    seen: dict[str, Path] = {}
    for directory, manifest in loaded:
        if manifest.name is None:
            continue
        if manifest.name in seen:
            return Err(
                ProjectError(
                    f"duplicate workspace name {manifest.name!r} "
                    f"(also in {_relative(root, seen[manifest.name])})",
                    path=directory / MANIFEST_FILENAME,
                )
            )
        seen[manifest.name] = directory

        workspace = Workspace(
            name=manifest.name,
            cwd=_relative(root, directory),
            version=manifest.version,
            private=manifest.private,
        )
        workspaces.append(workspace)
        manifests[workspace] = manifest

    by_name = {w.name: w for w in workspaces}
    dependencies = {
        w: [by_name[n] for n in manifests[w].dependencies if n in by_name and n != w.name]
        for w in workspaces
    }
    return Ok(ProjectGraph(root, workspaces, dependencies))
