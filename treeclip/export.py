"""Aggregate selected file contents into one ordered export document.

Selected files are collected in depth-first pre-order, read concurrently
through freshly resolved handles, and rendered in collection order. Identical
trees over identical file contents render to byte-identical text.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from .clipboard import PublishSink
from .errors import PublishError, ReadError, ResolutionError
from .file_tree_model.build import DEFAULT_MAX_WORKERS
from .file_tree_model.capability import DirectoryCapability
from .file_tree_model.resolve import resolve_file
from .file_tree_model.types import Tree
from .instructions import InstructionDocument
from .selection import iter_nodes

logger = logging.getLogger(__name__)

INSTRUCTION_HEADER = "--- Prompt Instruction: {label} ---"
FILE_HEADER = "--- {label} ---"


@dataclass(frozen=True)
class ExportRecord:
    """One labelled block of the export (a file path or an instruction name)."""

    label: str
    content: str
    is_instruction: bool = False

    def header(self) -> str:
        template = INSTRUCTION_HEADER if self.is_instruction else FILE_HEADER
        return template.format(label=self.label)

    def render(self) -> str:
        body = self.content if self.content.endswith("\n") else self.content + "\n"
        return f"\n{self.header()}\n{body}"


@dataclass(frozen=True)
class ExportDocument:
    """Ordered export: optional instruction record, then file records.

    ``failures`` lists selected files that were skipped, in tree order.
    """

    instruction: ExportRecord | None = None
    records: tuple[ExportRecord, ...] = ()
    failures: tuple[ResolutionError | ReadError, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.instruction is None and not self.records

    def all_records(self) -> tuple[ExportRecord, ...]:
        if self.instruction is None:
            return self.records
        return (self.instruction, *self.records)

    def render(self) -> str:
        return "".join(record.render() for record in self.all_records())


@dataclass(frozen=True)
class PublishOutcome:
    published: bool
    error: PublishError | None = None


def _read_selected(
    root: DirectoryCapability,
    path: str,
) -> tuple[ExportRecord | None, ResolutionError | ReadError | None]:
    try:
        handle = resolve_file(root, path)
    except ResolutionError as exc:
        logger.warning("skipping %s: %s", path, exc)
        return None, exc
    try:
        content = handle.read_text()
    except Exception as exc:
        error = ReadError(f"cannot read {path}: {exc}", path=path, cause=exc)
        logger.warning("skipping %s: %s", path, error)
        return None, error
    return ExportRecord(label=path, content=content), None


def aggregate(
    tree: Tree,
    root: DirectoryCapability,
    instruction: InstructionDocument | None = None,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> ExportDocument:
    """Collect the contents of every selected file in ``tree``.

    Directory nodes contribute nothing themselves; traversal descends into all
    of them so selected descendants are always reached. A non-empty
    instruction becomes the first record. Files that fail to resolve or read
    are recorded in ``failures`` and skipped.
    """
    instruction_record = None
    if instruction is not None and instruction.text:
        instruction_record = ExportRecord(label=instruction.name, content=instruction.text, is_instruction=True)

    paths = [node.path for node in iter_nodes(tree) if node.selected and node.is_file]
    results: list[tuple[ExportRecord | None, ResolutionError | ReadError | None]] = []
    if paths:
        with ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="treeclip-export") as executor:
            results = list(executor.map(lambda path: _read_selected(root, path), paths))

    records = tuple(record for record, _error in results if record is not None)
    failures = tuple(error for _record, error in results if error is not None)
    return ExportDocument(instruction=instruction_record, records=records, failures=failures)


def publish(text: str, sink: PublishSink) -> PublishOutcome:
    """Hand ``text`` to ``sink`` once; failures are reported, not retried.

    Empty text is never published.
    """
    if not text:
        return PublishOutcome(published=False)
    try:
        sink(text)
    except PublishError as exc:
        logger.warning("%s", exc)
        return PublishOutcome(published=False, error=exc)
    except Exception as exc:
        error = PublishError(f"publish failed: {exc}", cause=exc)
        logger.warning("%s", error)
        return PublishOutcome(published=False, error=error)
    return PublishOutcome(published=True)


__all__ = [
    "INSTRUCTION_HEADER",
    "FILE_HEADER",
    "ExportRecord",
    "ExportDocument",
    "PublishOutcome",
    "aggregate",
    "publish",
]
