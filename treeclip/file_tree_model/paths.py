"""Root-relative path helpers.

Tree paths are plain strings: segments joined by ``/`` with a leading ``/``
(``/docs/readme.txt``). They never touch the host filesystem namespace.
"""

from __future__ import annotations

SEPARATOR = "/"


def join_path(parent: str, name: str) -> str:
    """Return the path of ``name`` under ``parent`` (``""`` is the root)."""
    return f"{parent}{SEPARATOR}{name}"


def split_path(path: str) -> tuple[str, ...] | None:
    """Split ``path`` into segments, or ``None`` when it is malformed.

    A well-formed path starts with ``/`` and has no empty, ``.`` or ``..``
    segments.
    """
    if not path.startswith(SEPARATOR):
        return None
    segments = tuple(path[1:].split(SEPARATOR))
    for segment in segments:
        if not segment or segment in {".", ".."}:
            return None
    return segments


def is_same_or_descendant(path: str, ancestor: str) -> bool:
    """Return whether ``path`` is ``ancestor`` or lies below it.

    Matches on a segment boundary: ``/a/bc`` is not under ``/a/b``.
    """
    return path == ancestor or path.startswith(ancestor + SEPARATOR)


__all__ = [
    "SEPARATOR",
    "join_path",
    "split_path",
    "is_same_or_descendant",
]
