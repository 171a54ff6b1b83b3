"""Rebuild a tree against the live filesystem and reconcile session state.

Reconciliation never patches an existing tree. It only chooses the seed for a
fresh build; the refreshed tree is exactly what ``build_tree`` would produce
for the same root and seed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from .errors import ReadError, ResolutionError
from .expansion import ExpansionState
from .file_tree_model.build import DEFAULT_MAX_WORKERS, ErrorReporter, build_tree
from .file_tree_model.capability import DirectoryCapability
from .file_tree_model.resolve import resolve_file
from .file_tree_model.types import NodeKind, Tree
from .selection import selected_paths

logger = logging.getLogger(__name__)


class RefreshPolicy(Enum):
    """What happens to the previous selection when the tree is rebuilt."""

    PRESERVE_AND_REVALIDATE = "preserve"
    DISCARD = "discard"

    @classmethod
    def parse(cls, value: str) -> "RefreshPolicy":
        """Parse a config/CLI value (``preserve`` or ``discard``)."""
        normalized = value.strip().lower()
        for policy in cls:
            if policy.value == normalized:
                return policy
        raise ValueError(f"unknown refresh policy: {value!r}")


@dataclass(frozen=True)
class RefreshResult:
    tree: Tree
    selection: frozenset[str]
    expansion: ExpansionState


@dataclass(frozen=True)
class FileRefreshResult:
    """Fresh content of one file, or the failure that prevented reading it."""

    path: str
    content: str | None = None
    error: ResolutionError | ReadError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def refresh(
    root: DirectoryCapability,
    previous_selection: Iterable[str],
    previous_expansion: ExpansionState,
    *,
    policy: RefreshPolicy,
    previous_kinds: Mapping[str, NodeKind] | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    on_error: ErrorReporter | None = None,
) -> RefreshResult:
    """Rebuild the tree under ``root`` and reconcile selection per ``policy``.

    ``PRESERVE_AND_REVALIDATE`` seeds the build with the previous selection and
    drops paths that no longer resolve. ``previous_kinds`` maps selected paths
    to their kind in the previous tree (see ``selection.selected_kinds``); a
    path whose entry changed kind is dropped as well. ``DISCARD`` seeds with
    nothing. The expansion state is carried over unchanged either way.

    Seeding is by exact path: an entry that appeared inside a selected
    directory since the last build comes back unselected, so the directory's
    subtree is no longer uniformly selected until it is toggled again.
    """
    if policy is RefreshPolicy.DISCARD:
        seed: frozenset[str] = frozenset()
    else:
        seed = frozenset(previous_selection)
    tree = build_tree(
        root,
        seed,
        validate_selection=True,
        seed_kinds=previous_kinds,
        max_workers=max_workers,
        on_error=on_error,
    )
    return RefreshResult(tree=tree, selection=selected_paths(tree), expansion=previous_expansion)


def refresh_file(root: DirectoryCapability, path: str) -> FileRefreshResult:
    """Re-read one file through a freshly resolved handle.

    Read-only: the tree and selection are not involved.
    """
    try:
        handle = resolve_file(root, path)
    except ResolutionError as exc:
        logger.warning("%s", exc)
        return FileRefreshResult(path=path, error=exc)
    try:
        content = handle.read_text()
    except Exception as exc:
        error = ReadError(f"cannot read {path}: {exc}", path=path, cause=exc)
        logger.warning("%s", error)
        return FileRefreshResult(path=path, error=error)
    return FileRefreshResult(path=path, content=content)


__all__ = [
    "RefreshPolicy",
    "RefreshResult",
    "FileRefreshResult",
    "refresh",
    "refresh_file",
]
