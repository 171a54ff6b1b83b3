"""Session engine tying tree building, selection, refresh and export together.

``TreeSession`` is the surface a UI layer talks to. It owns one immutable
``SessionState`` snapshot and replaces it on every operation; renderers read
snapshots and dispatch intents, they never edit state themselves.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from .clipboard import PublishSink, copy_to_clipboard
from .errors import EnumerationError, UserCancelledError
from .expansion import ExpansionState
from .export import ExportDocument, PublishOutcome, aggregate, publish
from .file_tree_model.build import DEFAULT_MAX_WORKERS, build_tree
from .file_tree_model.capability import DirectoryCapability
from .file_tree_model.types import Tree
from .instructions import InstructionDocument, InstructionPicker
from .refresh import FileRefreshResult, RefreshPolicy, refresh, refresh_file
from .selection import find_node, is_file, selected_kinds, selected_paths, toggle

logger = logging.getLogger(__name__)

DirectoryPicker = Callable[[], DirectoryCapability]


@dataclass(frozen=True)
class SessionState:
    """Everything the engine knows about the current session."""

    root: DirectoryCapability | None = None
    tree: Tree = ()
    selection: frozenset[str] = frozenset()
    expansion: ExpansionState = field(default_factory=ExpansionState)
    active_file: str | None = None
    instruction: InstructionDocument | None = None
    last_errors: tuple[EnumerationError, ...] = ()


@dataclass(frozen=True)
class ExportOutcome:
    """Export document, its rendered text, and what happened when publishing it.

    A publish failure does not make the export itself unsuccessful.
    """

    document: ExportDocument
    text: str
    publish: PublishOutcome


class TreeSession:
    """Single-session tree selection engine."""

    def __init__(
        self,
        *,
        policy: RefreshPolicy = RefreshPolicy.PRESERVE_AND_REVALIDATE,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self.policy = policy
        self.max_workers = max_workers
        self._state = SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def tree(self) -> Tree:
        return self._state.tree

    @property
    def last_errors(self) -> tuple[EnumerationError, ...]:
        return self._state.last_errors

    # directory lifecycle
    def open_directory(self, picker: DirectoryPicker) -> bool:
        """Ask ``picker`` for a root and build a fresh tree from it.

        Selection, expansion and the active file are reset. Returns ``False``
        without touching state when the user cancels the picker.
        """
        try:
            root = picker()
        except UserCancelledError:
            logger.debug("directory picker cancelled")
            return False
        self._state = replace(
            self._state,
            root=root,
            tree=(),
            selection=frozenset(),
            expansion=ExpansionState(),
            active_file=None,
        )
        self.build(root)
        return True

    def clear_directory(self) -> None:
        """Forget the root, tree, selection, expansion, active file and instruction."""
        self._state = SessionState()

    def build(self, root: DirectoryCapability, seed_selection: frozenset[str] = frozenset()) -> Tree:
        """Build a tree for ``root`` seeded with ``seed_selection`` and make it current."""
        errors: list[EnumerationError] = []
        tree = build_tree(root, seed_selection, max_workers=self.max_workers, on_error=errors.append)
        self._state = replace(
            self._state,
            root=root,
            tree=tree,
            selection=selected_paths(tree),
            active_file=self._surviving_active_file(tree),
            last_errors=tuple(errors),
        )
        return tree

    def refresh(self) -> Tree:
        """Rebuild the current root against the live filesystem using ``self.policy``.

        Under preserve, selected paths that vanished or changed kind are
        dropped. Entries that appeared inside a selected directory come back
        unselected; only previously selected paths are re-marked.
        """
        root = self._state.root
        if root is None:
            return self._state.tree
        errors: list[EnumerationError] = []
        result = refresh(
            root,
            self._state.selection,
            self._state.expansion,
            policy=self.policy,
            previous_kinds=selected_kinds(self._state.tree),
            max_workers=self.max_workers,
            on_error=errors.append,
        )
        self._state = replace(
            self._state,
            tree=result.tree,
            selection=result.selection,
            expansion=result.expansion,
            active_file=self._surviving_active_file(result.tree),
            last_errors=tuple(errors),
        )
        return result.tree

    def _surviving_active_file(self, tree: Tree) -> str | None:
        active = self._state.active_file
        if active is not None and is_file(tree, active):
            return active
        return None

    # selection
    def toggle(self, path: str, selected: bool) -> frozenset[str]:
        tree, selection = toggle(self._state.tree, path, selected)
        self._state = replace(self._state, tree=tree, selection=selection)
        return selection

    def selected_paths(self) -> frozenset[str]:
        return self._state.selection

    def is_file(self, path: str) -> bool:
        return is_file(self._state.tree, path)

    def is_selected(self, path: str) -> bool:
        node = find_node(self._state.tree, path)
        return node is not None and node.selected

    # expansion
    def is_expanded(self, path: str) -> bool:
        return self._state.expansion.is_expanded(path)

    def set_expanded(self, path: str, expanded: bool) -> None:
        self._state = replace(self._state, expansion=self._state.expansion.with_expanded(path, expanded))

    def toggle_expanded(self, path: str) -> bool:
        expansion = self._state.expansion.toggled(path)
        self._state = replace(self._state, expansion=expansion)
        return expansion.is_expanded(path)

    # targeted file refresh
    def set_active_file(self, path: str | None) -> None:
        """Mark one file for targeted refresh, or clear the mark with ``None``."""
        if path is not None and not self.is_file(path):
            raise ValueError(f"not a file in the current tree: {path}")
        self._state = replace(self._state, active_file=path)

    def refresh_active_file(self) -> FileRefreshResult | None:
        """Re-read the active file's content without touching tree or selection."""
        root = self._state.root
        active = self._state.active_file
        if root is None or active is None:
            return None
        return refresh_file(root, active)

    # instruction document
    def set_instruction(self, document: InstructionDocument | None) -> None:
        self._state = replace(self._state, instruction=document)

    def clear_instruction(self) -> None:
        self.set_instruction(None)

    def load_instruction(self, picker: InstructionPicker) -> bool:
        """Replace the instruction with one from ``picker``; cancelling is a no-op."""
        try:
            document = picker()
        except UserCancelledError:
            logger.debug("instruction picker cancelled")
            return False
        self.set_instruction(document)
        return True

    # export
    def aggregate(self) -> ExportDocument:
        root = self._state.root
        if root is None:
            return ExportDocument()
        return aggregate(self._state.tree, root, self._state.instruction, max_workers=self.max_workers)

    def export(self, sink: PublishSink = copy_to_clipboard) -> ExportOutcome:
        """Aggregate, render and hand the text to ``sink``.

        Empty exports are not published.
        """
        document = self.aggregate()
        text = document.render()
        return ExportOutcome(document=document, text=text, publish=publish(text, sink))


__all__ = [
    "DirectoryPicker",
    "SessionState",
    "ExportOutcome",
    "TreeSession",
]
