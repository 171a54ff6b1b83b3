"""Resolve tree paths to fresh handles by walking the capability chain."""

from __future__ import annotations

from ..errors import ResolutionError
from .capability import DirectoryCapability, FileCapability, NotADirectoryEntryError
from .paths import split_path
from .types import NodeKind


def resolve_path(
    root: DirectoryCapability,
    path: str,
    kind: NodeKind | None = None,
) -> DirectoryCapability | FileCapability:
    """Resolve ``path`` from ``root`` one segment at a time.

    Every intermediate segment must be a directory. The final segment must
    match ``kind`` when given, otherwise either kind is accepted. Raises
    ``ResolutionError`` naming ``path`` when any step fails.
    """
    segments = split_path(path)
    if not segments:
        raise ResolutionError(f"malformed path: {path!r}", path=path)

    current = root
    try:
        for segment in segments[:-1]:
            current = current.get_directory(segment)
        last = segments[-1]
        if kind is NodeKind.FILE:
            return current.get_file(last)
        if kind is NodeKind.DIRECTORY:
            return current.get_directory(last)
        try:
            return current.get_directory(last)
        except NotADirectoryEntryError:
            return current.get_file(last)
    except Exception as exc:
        raise ResolutionError(f"cannot resolve {path}: {exc}", path=path, cause=exc) from exc


def resolve_file(root: DirectoryCapability, path: str) -> FileCapability:
    """Resolve a fresh file handle for ``path``."""
    return resolve_path(root, path, NodeKind.FILE)


__all__ = [
    "resolve_path",
    "resolve_file",
]
