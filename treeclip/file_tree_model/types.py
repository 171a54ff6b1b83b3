"""Immutable tree datatypes shared by builder, selection and export code."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NodeKind(Enum):
    """Kind of a filesystem entry as reported by a directory capability."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class DirectoryListingEntry:
    """One ``(name, kind)`` pair yielded by a directory listing."""

    name: str
    kind: NodeKind

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY


@dataclass(frozen=True)
class TreeNode:
    """One filesystem entry in a snapshot tree.

    ``children`` is a tuple for directories and ``None`` for files. Nodes are
    never mutated; selection changes and refreshes produce new trees.
    """

    path: str
    name: str
    kind: NodeKind
    children: tuple["TreeNode", ...] | None = None
    selected: bool = False

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE


Tree = tuple[TreeNode, ...]


__all__ = [
    "NodeKind",
    "DirectoryListingEntry",
    "TreeNode",
    "Tree",
]
