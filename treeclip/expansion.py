"""Expanded-directory state keyed by tree path."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class ExpansionState:
    """Set of expanded directory paths; anything absent is collapsed.

    Keyed by path rather than node identity so it survives tree rebuilds.
    Paths that no longer exist simply never match a node.
    """

    expanded: frozenset[str] = frozenset()

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> "ExpansionState":
        return cls(frozenset(paths))

    def is_expanded(self, path: str) -> bool:
        return path in self.expanded

    def with_expanded(self, path: str, expanded: bool) -> "ExpansionState":
        if expanded:
            return ExpansionState(self.expanded | {path})
        return ExpansionState(self.expanded - {path})

    def toggled(self, path: str) -> "ExpansionState":
        return self.with_expanded(path, not self.is_expanded(path))

    def collapsed_all(self) -> "ExpansionState":
        return ExpansionState()

    def as_map(self) -> dict[str, bool]:
        return {path: True for path in sorted(self.expanded)}


__all__ = ["ExpansionState"]
