"""Project loading: package.json manifests into a workspace graph."""

from vcheck.project.graph import ProjectGraph, load_project
from vcheck.project.manifest import Manifest, ProjectError, read_manifest

__all__ = [
    "Manifest",
    "ProjectError",
    "ProjectGraph",
    "load_project",
    "read_manifest",
]
