"""Exceptions raised by the release core.

Everything here signals a broken precondition. Expected failures (no git
repository, bad manifests) travel as ``Err`` values instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vcheck.release.graph import Workspace

__all__ = ["MissingVersionError", "UndecidedStoredError"]


class MissingVersionError(RuntimeError):
    """A workspace that needs a decision has no version in its manifest."""

    def __init__(self, workspace: Workspace) -> None:
        super().__init__(
            f"Assertion failed: The version should have been set ({workspace.name} at {workspace.cwd})"
        )
        self.workspace = workspace


class UndecidedStoredError(ValueError):
    """Raised when UNDECIDED is assigned into a ReleaseSet."""

    def __init__(self, workspace: Workspace) -> None:
        super().__init__(
            f"cannot store an undecided release for {workspace.name}; remove the entry instead"
        )
        self.workspace = workspace
