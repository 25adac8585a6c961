"""The sparse mapping of workspaces to release decisions."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping

from vcheck.release.decision import Decision
from vcheck.release.errors import UndecidedStoredError
from vcheck.release.graph import Workspace

__all__ = ["ReleaseRoots", "ReleaseSet"]

ReleaseRoots = frozenset[Workspace]


class ReleaseSet(MutableMapping[Workspace, Decision]):
    """Workspace -> Decision, never holding UNDECIDED.

    Absence of a key is what "undecided" means. Assigning UNDECIDED raises
    ``UndecidedStoredError``; callers delete the entry instead. Values are
    coerced to ``Decision``, so raw strategy strings are accepted and checked
    the same way. Iteration follows insertion order.
    """

    __slots__ = ("_data",)

    def __init__(
        self,
        items: Mapping[Workspace, Decision] | Iterable[tuple[Workspace, Decision]] = (),
    ) -> None:
        self._data: dict[Workspace, Decision] = {}
        pairs = items.items() if isinstance(items, Mapping) else items
        for workspace, decision in pairs:
            self[workspace] = decision

    def __getitem__(self, workspace: Workspace) -> Decision:
        return self._data[workspace]

    def __setitem__(self, workspace: Workspace, decision: Decision) -> None:
        decision = Decision(decision)
        if decision is Decision.UNDECIDED:
            raise UndecidedStoredError(workspace)
        self._data[workspace] = decision

    def __delitem__(self, workspace: Workspace) -> None:
        del self._data[workspace]

    def __iter__(self) -> Iterator[Workspace]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        inner = ", ".join(f"{w.name}: {d.value}" for w, d in self._data.items())
        return f"ReleaseSet({{{inner}}})"

    def decision_for(self, workspace: Workspace) -> Decision:
        return self._data.get(workspace, Decision.UNDECIDED)

    def assign(self, workspace: Workspace, decision: Decision) -> None:
        """Set a decision, treating UNDECIDED as removal."""
        decision = Decision(decision)
        if decision is Decision.UNDECIDED:
            self._data.pop(workspace, None)
        else:
            self._data[workspace] = decision

    def restricted_to(self, workspaces: Iterable[Workspace]) -> ReleaseSet:
        """Entries whose key is in ``workspaces``, keeping this set's order."""
        keep = set(workspaces)
        return ReleaseSet((w, d) for w, d in self._data.items() if w in keep)

    def copy(self) -> ReleaseSet:
        return ReleaseSet(self._data)
