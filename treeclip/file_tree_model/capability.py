"""Directory capabilities: revocable handles for listing and reading entries.

The engine never touches host paths directly. It walks a chain of
capabilities from a root handle, so a tree path only means something relative
to the capability that produced it.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Protocol

from .types import DirectoryListingEntry, NodeKind


class CapabilityError(Exception):
    """Base error raised by capability operations."""


class EntryNotFoundError(CapabilityError):
    """A named child does not exist (or the name is not a valid child name)."""


class NotADirectoryEntryError(CapabilityError):
    """A named child exists but is not a directory."""


class NotAFileEntryError(CapabilityError):
    """A named child exists but is not a file."""


class CapabilityRevokedError(CapabilityError):
    """The capability (or the root it was derived from) has been revoked."""


class FileCapability(Protocol):
    @property
    def name(self) -> str: ...

    def read_text(self) -> str: ...


class DirectoryCapability(Protocol):
    @property
    def name(self) -> str: ...

    def list_entries(self) -> tuple[DirectoryListingEntry, ...]: ...

    def get_directory(self, name: str) -> "DirectoryCapability": ...

    def get_file(self, name: str) -> FileCapability: ...


class _Grant:
    """Revocation flag shared by a root capability and everything derived from it."""

    __slots__ = ("revoked",)

    def __init__(self) -> None:
        self.revoked = False

    def check(self) -> None:
        if self.revoked:
            raise CapabilityRevokedError("directory access has been revoked")


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def _is_valid_child_name(name: str) -> bool:
    if not name or name in {".", ".."}:
        return False
    return "/" not in name and os.sep not in name


def _listing_sort_key(entry: DirectoryListingEntry) -> tuple[bool, str, str]:
    return (not entry.is_dir, entry.name.lower(), entry.name)


class LocalFile:
    """File capability backed by a host path."""

    def __init__(self, path: Path, grant: _Grant) -> None:
        self._path = path
        self._grant = grant

    @property
    def name(self) -> str:
        return self._path.name

    def read_text(self) -> str:
        self._grant.check()
        # a symlink may still point at a fifo or device, which would block
        if not stat.S_ISREG(os.stat(self._path).st_mode):
            raise OSError(f"not a regular file: {str(self._path)!r}")
        return read_text(self._path)

    def __repr__(self) -> str:
        return f"LocalFile({str(self._path)!r})"


class LocalDirectory:
    """Directory capability backed by a host directory.

    Listings put directories first and then sort case-insensitively by name,
    so repeated listings of an unchanged directory are identical. Symlinks are
    reported as files and never followed when classifying entries.
    """

    def __init__(self, path: Path, *, show_hidden: bool = False, _grant: _Grant | None = None) -> None:
        self._path = path
        self._show_hidden = show_hidden
        self._grant = _grant if _grant is not None else _Grant()

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def path(self) -> Path:
        return self._path

    @property
    def show_hidden(self) -> bool:
        return self._show_hidden

    @property
    def revoked(self) -> bool:
        return self._grant.revoked

    def revoke(self) -> None:
        """Revoke this capability and every capability derived from the same root."""
        self._grant.revoked = True

    def list_entries(self) -> tuple[DirectoryListingEntry, ...]:
        self._grant.check()
        entries: list[DirectoryListingEntry] = []
        with os.scandir(self._path) as scanned:
            for child in scanned:
                name = child.name
                if not self._show_hidden and name.startswith("."):
                    continue
                try:
                    is_dir = child.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                entries.append(DirectoryListingEntry(name, NodeKind.DIRECTORY if is_dir else NodeKind.FILE))
        entries.sort(key=_listing_sort_key)
        return tuple(entries)

    def _lstat_child(self, name: str) -> tuple[Path, os.stat_result]:
        self._grant.check()
        if not _is_valid_child_name(name):
            raise EntryNotFoundError(f"invalid entry name: {name!r}")
        target = self._path / name
        try:
            return target, os.lstat(target)
        except FileNotFoundError as exc:
            raise EntryNotFoundError(f"no such entry: {name!r}") from exc
        except NotADirectoryError as exc:
            raise EntryNotFoundError(f"no such entry: {name!r}") from exc

    def get_directory(self, name: str) -> "LocalDirectory":
        target, st = self._lstat_child(name)
        if not stat.S_ISDIR(st.st_mode):
            raise NotADirectoryEntryError(f"not a directory: {name!r}")
        return LocalDirectory(target, show_hidden=self._show_hidden, _grant=self._grant)

    def get_file(self, name: str) -> LocalFile:
        target, st = self._lstat_child(name)
        if not (stat.S_ISREG(st.st_mode) or stat.S_ISLNK(st.st_mode)):
            raise NotAFileEntryError(f"not a file: {name!r}")
        return LocalFile(target, self._grant)

    def __repr__(self) -> str:
        return f"LocalDirectory({str(self._path)!r}, show_hidden={self._show_hidden})"


def open_local_directory(path: Path, *, show_hidden: bool = False) -> LocalDirectory:
    """Open a root capability for ``path``, which must be an existing directory."""
    resolved = path.expanduser().resolve()
    if not resolved.exists():
        raise EntryNotFoundError(f"path not found: {path}")
    if not resolved.is_dir():
        raise NotADirectoryEntryError(f"not a directory: {path}")
    return LocalDirectory(resolved, show_hidden=show_hidden)


__all__ = [
    "CapabilityError",
    "EntryNotFoundError",
    "NotADirectoryEntryError",
    "NotAFileEntryError",
    "CapabilityRevokedError",
    "FileCapability",
    "DirectoryCapability",
    "LocalFile",
    "LocalDirectory",
    "open_local_directory",
    "read_text",
]
