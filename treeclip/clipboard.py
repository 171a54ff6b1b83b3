"""System clipboard publish sink."""

from __future__ import annotations

from collections.abc import Callable

import pyperclip

from .errors import PublishError

PublishSink = Callable[[str], None]


def copy_to_clipboard(text: str) -> None:
    """Copy ``text`` to the system clipboard.

    Raises ``PublishError`` when no clipboard mechanism is available or the
    platform refuses access.
    """
    try:
        pyperclip.copy(text)
    except (pyperclip.PyperclipException, OSError) as exc:
        raise PublishError(f"failed to copy to clipboard: {exc}", cause=exc) from exc


__all__ = [
    "PublishSink",
    "copy_to_clipboard",
]
