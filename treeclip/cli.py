"""Command-line front door for treeclip.

Opens a directory, applies cascading selections, then either lists the tree
or exports the selected file contents to the clipboard (or stdout).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import config
from .file_tree_model.capability import open_local_directory
from .file_tree_model.types import Tree
from .instructions import load_instruction_file
from .refresh import RefreshPolicy
from .selection import find_node
from .session import TreeSession


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _refresh_policy(value: str) -> RefreshPolicy:
    try:
        return RefreshPolicy.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def normalize_selection_arg(raw: str) -> str:
    """Turn ``docs/readme.txt`` or ``/docs/`` style input into a tree path."""
    stripped = raw.strip().replace("\\", "/").strip("/")
    return "/" + stripped


def format_tree(tree: Tree) -> str:
    """Render ``tree`` as indented rows with ``[x]``/``[ ]`` selection markers."""
    out: list[str] = []

    def walk(nodes: Tree, depth: int) -> None:
        for node in nodes:
            marker = "[x]" if node.selected else "[ ]"
            suffix = "/" if node.is_dir else ""
            out.append(f"{'  ' * depth}{marker} {node.name}{suffix}\n")
            if node.children:
                walk(node.children, depth + 1)

    walk(tree, 0)
    return "".join(out)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Copy the contents of selected files under a directory as one text blob."
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to current directory.")
    parser.add_argument(
        "-s",
        "--select",
        action="append",
        default=[],
        metavar="PATH",
        help="Select a file or folder (relative to the directory); folders select everything below them.",
    )
    parser.add_argument("-i", "--instructions", metavar="FILE", help="Instruction file placed before the file contents.")
    parser.add_argument(
        "--policy",
        type=_refresh_policy,
        default=None,
        help="Selection handling on refresh: preserve or discard (default: saved preference).",
    )
    parser.add_argument(
        "--show-hidden",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include (or with --no-show-hidden, exclude) dot-files and dot-directories.",
    )
    parser.add_argument("--max-workers", type=_positive_int, default=None, help="Concurrent I/O workers.")
    parser.add_argument("--list", action="store_true", help="Print the tree with selection markers and exit.")
    parser.add_argument("--stdout", action="store_true", help="Print the export instead of copying it to the clipboard.")
    parser.add_argument("--save-preferences", action="store_true", help="Persist policy, hidden-file and worker options.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug diagnostics to stderr.")
    return parser


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments, build the tree and list or export the selection.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = _build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    policy = args.policy if args.policy is not None else config.load_refresh_policy()
    show_hidden = args.show_hidden if args.show_hidden is not None else config.load_show_hidden()
    max_workers = args.max_workers if args.max_workers is not None else config.load_max_workers()
    if args.save_preferences:
        config.save_refresh_policy(policy)
        config.save_show_hidden(show_hidden)
        config.save_max_workers(max_workers)

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path or default_path)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if not path.is_dir():
        raise SystemExit(f"Not a directory: {path}")

    session = TreeSession(policy=policy, max_workers=max_workers)
    session.open_directory(lambda: open_local_directory(path, show_hidden=show_hidden))
    for error in session.last_errors:
        sys.stderr.write(f"warning: {error}\n")

    for raw in args.select:
        target = normalize_selection_arg(raw)
        if target == "/":
            for node in session.tree:
                session.toggle(node.path, True)
        elif find_node(session.tree, target) is not None:
            session.toggle(target, True)
        else:
            sys.stderr.write(f"warning: not in tree: {raw}\n")

    if args.instructions is not None:
        instruction_path = Path(args.instructions)
        try:
            session.set_instruction(load_instruction_file(instruction_path))
        except OSError as exc:
            raise SystemExit(f"Cannot read instruction file {instruction_path}: {exc}") from exc

    if args.list:
        sys.stdout.write(format_tree(session.tree))
        return

    if args.stdout:
        outcome = session.export(sink=sys.stdout.write)
    else:
        outcome = session.export()
    for failure in outcome.document.failures:
        sys.stderr.write(f"skipped {failure.path}: {failure}\n")
    if outcome.document.is_empty:
        sys.stderr.write("No file content to copy.\n")
        return
    if outcome.publish.error is not None:
        sys.stderr.write(f"{outcome.publish.error}\n")
        raise SystemExit(1)
    if not args.stdout:
        sys.stderr.write(f"Copied {len(outcome.document.records)} file(s) to the clipboard.\n")


if __name__ == "__main__":
    main()
