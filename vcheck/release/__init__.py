"""Release decision propagation.

- decision: the Decision enum and per-workspace strategy lists
- graph: Workspace identity and the WorkspaceGraph protocol
- release_set: the sparse Workspace -> Decision mapping
- relevancy: fixed-point computation of workspaces needing a decision
- validator: batch report of missing decisions
- editor: single-decision edits for interactive use
"""

from __future__ import annotations

from vcheck.release.decision import Decision, parse_decision, strategies_for
from vcheck.release.editor import DecisionEditor, DecisionStats
from vcheck.release.errors import MissingVersionError, UndecidedStoredError
from vcheck.release.graph import DependentPair, Workspace, WorkspaceGraph
from vcheck.release.relevancy import Relevancy, compute_relevancy
from vcheck.release.release_set import ReleaseRoots, ReleaseSet
from vcheck.release.validator import ValidationReport, validate

__all__ = [
    "Decision",
    "DecisionEditor",
    "DecisionStats",
    "DependentPair",
    "MissingVersionError",
    "ReleaseRoots",
    "ReleaseSet",
    "Relevancy",
    "UndecidedStoredError",
    "ValidationReport",
    "Workspace",
    "WorkspaceGraph",
    "compute_relevancy",
    "parse_decision",
    "strategies_for",
    "validate",
]
