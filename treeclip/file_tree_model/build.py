"""Concurrent snapshot-tree construction from a directory capability.

The walk proceeds one tree level at a time: every directory on the current
level is listed on a thread pool, then the next level is scheduled from the
results. Results are combined by listing order, never by completion order, so
repeated builds over an unchanged directory are structurally identical.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from ..errors import EnumerationError, ResolutionError
from .capability import DirectoryCapability
from .paths import join_path
from .resolve import resolve_path
from .types import DirectoryListingEntry, NodeKind, Tree, TreeNode

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8

ErrorReporter = Callable[[EnumerationError], None]


@dataclass(frozen=True)
class _DirectoryScan:
    """Listing of one directory plus resolved handles for its subdirectories.

    ``subdirectories`` is aligned with ``entries``; it holds ``None`` for files
    and for directories whose handle could not be resolved.
    """

    entries: tuple[DirectoryListingEntry, ...]
    subdirectories: tuple[DirectoryCapability | None, ...]
    errors: tuple[EnumerationError, ...]


def _display_path(path: str) -> str:
    return path or "/"


def _scan_directory(path: str, capability: DirectoryCapability) -> _DirectoryScan:
    try:
        entries = tuple(capability.list_entries())
    except Exception as exc:
        error = EnumerationError(
            f"cannot list {_display_path(path)}: {exc}",
            path=_display_path(path),
            cause=exc,
        )
        return _DirectoryScan((), (), (error,))

    subdirectories: list[DirectoryCapability | None] = []
    errors: list[EnumerationError] = []
    for entry in entries:
        if not entry.is_dir:
            subdirectories.append(None)
            continue
        child_path = join_path(path, entry.name)
        try:
            subdirectories.append(capability.get_directory(entry.name))
        except Exception as exc:
            subdirectories.append(None)
            errors.append(EnumerationError(f"cannot open {child_path}: {exc}", path=child_path, cause=exc))
    return _DirectoryScan(entries, tuple(subdirectories), tuple(errors))


def _report(error: EnumerationError, on_error: ErrorReporter | None) -> None:
    logger.warning("%s", error)
    if on_error is not None:
        on_error(error)


def filter_valid_selection(
    root: DirectoryCapability,
    paths: Iterable[str],
    kinds: Mapping[str, NodeKind] | None = None,
) -> frozenset[str]:
    """Keep only paths that still resolve through the capability chain.

    When ``kinds`` records what a path denoted at selection time, the final
    segment must still be of that kind; a directory replaced by a same-named
    file (or the reverse) is dropped. Paths without a recorded kind accept
    either. Paths whose segments went missing or changed kind are dropped
    silently.
    """
    kinds = kinds or {}
    valid: set[str] = set()
    for path in sorted(set(paths)):
        try:
            resolve_path(root, path, kinds.get(path))
        except ResolutionError as exc:
            logger.debug("dropping stale selection %s: %s", path, exc)
            continue
        valid.add(path)
    return frozenset(valid)


def _assemble(directory_path: str, scans: dict[str, _DirectoryScan], seed: frozenset[str]) -> Tree:
    scan = scans.get(directory_path)
    if scan is None:
        return ()
    nodes: list[TreeNode] = []
    for entry in scan.entries:
        path = join_path(directory_path, entry.name)
        if entry.is_dir:
            nodes.append(
                TreeNode(
                    path=path,
                    name=entry.name,
                    kind=NodeKind.DIRECTORY,
                    children=_assemble(path, scans, seed),
                    selected=path in seed,
                )
            )
            continue
        nodes.append(TreeNode(path=path, name=entry.name, kind=NodeKind.FILE, selected=path in seed))
    return tuple(nodes)


def build_tree(
    root: DirectoryCapability,
    seed_selection: Iterable[str] = frozenset(),
    *,
    validate_selection: bool = True,
    seed_kinds: Mapping[str, NodeKind] | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    on_error: ErrorReporter | None = None,
) -> Tree:
    """Walk ``root`` into a fresh tree, seeding selection flags from ``seed_selection``.

    ``seed_kinds`` optionally maps seed paths to the kind they had when
    selected, so validation can reject paths that changed kind.

    No file content is read. Directories that cannot be listed or opened are
    produced with empty children; each failure is logged and passed to
    ``on_error`` as an ``EnumerationError``. Nothing is raised.
    """
    seed = frozenset(seed_selection)
    if validate_selection and seed:
        seed = filter_valid_selection(root, seed, seed_kinds)

    scans: dict[str, _DirectoryScan] = {}
    frontier: list[tuple[str, DirectoryCapability]] = [("", root)]
    with ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="treeclip-build") as executor:
        while frontier:
            level = list(executor.map(lambda job: _scan_directory(*job), frontier))
            next_frontier: list[tuple[str, DirectoryCapability]] = []
            for (directory_path, _capability), scan in zip(frontier, level):
                scans[directory_path] = scan
                for error in scan.errors:
                    _report(error, on_error)
                for entry, subdirectory in zip(scan.entries, scan.subdirectories):
                    if subdirectory is not None:
                        next_frontier.append((join_path(directory_path, entry.name), subdirectory))
            frontier = next_frontier

    return _assemble("", scans, seed)


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "ErrorReporter",
    "build_tree",
    "filter_valid_selection",
]
