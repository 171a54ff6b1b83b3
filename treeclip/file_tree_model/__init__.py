"""Domain model for capability-backed file/directory trees.

This package contains non-UI tree primitives:
- immutable tree node datatypes keyed by root-relative paths
- directory capabilities (protocol plus a local filesystem implementation)
- path resolution through capability chains
- concurrent tree building with selection seeding and validity filtering
"""

from __future__ import annotations

from .types import DirectoryListingEntry, NodeKind, Tree, TreeNode
from .paths import SEPARATOR, is_same_or_descendant, join_path, split_path
from .capability import (
    CapabilityError,
    CapabilityRevokedError,
    DirectoryCapability,
    EntryNotFoundError,
    FileCapability,
    LocalDirectory,
    LocalFile,
    NotADirectoryEntryError,
    NotAFileEntryError,
    open_local_directory,
    read_text,
)
from .resolve import resolve_file, resolve_path
from .build import DEFAULT_MAX_WORKERS, build_tree, filter_valid_selection

__all__ = [
    "NodeKind",
    "DirectoryListingEntry",
    "TreeNode",
    "Tree",
    "SEPARATOR",
    "join_path",
    "split_path",
    "is_same_or_descendant",
    "CapabilityError",
    "CapabilityRevokedError",
    "EntryNotFoundError",
    "NotADirectoryEntryError",
    "NotAFileEntryError",
    "DirectoryCapability",
    "FileCapability",
    "LocalDirectory",
    "LocalFile",
    "open_local_directory",
    "read_text",
    "resolve_path",
    "resolve_file",
    "DEFAULT_MAX_WORKERS",
    "build_tree",
    "filter_valid_selection",
]
