"""Cascading selection over immutable trees.

Selection state lives in the nodes' own ``selected`` flags. The selection set
is always recomputed from the tree, never edited on its own.
"""

from __future__ import annotations

from collections.abc import Iterator

from .file_tree_model.paths import is_same_or_descendant
from .file_tree_model.types import NodeKind, Tree, TreeNode


def iter_nodes(tree: Tree) -> Iterator[TreeNode]:
    """Yield every node in depth-first pre-order, children in listing order."""
    stack: list[TreeNode] = list(reversed(tree))
    while stack:
        node = stack.pop()
        yield node
        if node.children:
            stack.extend(reversed(node.children))


def selected_paths(tree: Tree) -> frozenset[str]:
    """Return the paths of all nodes whose ``selected`` flag is set."""
    return frozenset(node.path for node in iter_nodes(tree) if node.selected)


def selected_kinds(tree: Tree) -> dict[str, NodeKind]:
    """Map each selected path to the kind its node had when it was selected."""
    return {node.path: node.kind for node in iter_nodes(tree) if node.selected}


def find_node(tree: Tree, path: str) -> TreeNode | None:
    """Return the node at ``path`` or ``None``, descending only along its ancestors."""
    nodes = tree
    while nodes:
        for node in nodes:
            if node.path == path:
                return node
            if node.children and is_same_or_descendant(path, node.path):
                nodes = node.children
                break
        else:
            return None
    return None


def is_file(tree: Tree, path: str) -> bool:
    """Return whether ``path`` names a file node in ``tree``."""
    node = find_node(tree, path)
    return node is not None and node.is_file


def _set_subtree(node: TreeNode, selected: bool) -> TreeNode:
    children = node.children
    if children is not None:
        children = tuple(_set_subtree(child, selected) for child in children)
    return TreeNode(path=node.path, name=node.name, kind=node.kind, children=children, selected=selected)


def _apply(nodes: Tree, path: str, selected: bool) -> Tree:
    updated: list[TreeNode] = []
    for node in nodes:
        if node.path == path:
            updated.append(_set_subtree(node, selected))
        elif node.children and is_same_or_descendant(path, node.path):
            updated.append(
                TreeNode(
                    path=node.path,
                    name=node.name,
                    kind=node.kind,
                    children=_apply(node.children, path, selected),
                    selected=node.selected,
                )
            )
        else:
            updated.append(node)
    return tuple(updated)


def toggle(tree: Tree, path: str, selected: bool) -> tuple[Tree, frozenset[str]]:
    """Set ``selected`` on the node at ``path`` and every descendant.

    Ancestors keep their flags. Returns ``(new_tree, new_selection)``; nodes on
    the changed branch are new values and untouched subtrees are shared.
    """
    new_tree = _apply(tree, path, bool(selected))
    return new_tree, selected_paths(new_tree)


__all__ = [
    "iter_nodes",
    "selected_paths",
    "selected_kinds",
    "find_node",
    "is_file",
    "toggle",
]
