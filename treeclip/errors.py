"""Structured failures reported by the tree engine.

None of these are fatal. Builders and aggregators absorb them into partial
results and hand them back to the caller, which decides how to surface them.
"""

from __future__ import annotations


class TreeclipError(Exception):
    """Base failure carrying the root-relative path it concerns, if any."""

    def __init__(self, message: str, *, path: str | None = None, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.cause = cause


class EnumerationError(TreeclipError):
    """A directory could not be listed; its subtree degrades to empty."""


class ResolutionError(TreeclipError):
    """A path segment no longer resolves through the capability chain."""


class ReadError(TreeclipError):
    """File content could not be read during aggregation or targeted refresh."""


class PublishError(TreeclipError):
    """The rendered export could not be handed to the publish sink."""


class UserCancelledError(TreeclipError):
    """The user dismissed a picker prompt."""

    def __init__(self, message: str = "cancelled by user") -> None:
        super().__init__(message)


__all__ = [
    "TreeclipError",
    "EnumerationError",
    "ResolutionError",
    "ReadError",
    "PublishError",
    "UserCancelledError",
]
