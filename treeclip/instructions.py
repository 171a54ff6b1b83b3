"""Instruction documents placed ahead of the exported file contents."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .file_tree_model.capability import read_text


@dataclass(frozen=True)
class InstructionDocument:
    """Opaque ``(name, text)`` pair supplied by an instruction picker."""

    name: str
    text: str


InstructionPicker = Callable[[], InstructionDocument]


def load_instruction_file(path: Path) -> InstructionDocument:
    """Read an instruction document from ``path``, labelled by its file name.

    Raises ``OSError`` when the file cannot be read.
    """
    return InstructionDocument(name=path.name, text=read_text(path))


__all__ = [
    "InstructionDocument",
    "InstructionPicker",
    "load_instruction_file",
]
