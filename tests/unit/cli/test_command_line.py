"""CLI argument, listing and export behavior tests."""

from __future__ import annotations

import io
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from treeclip import cli
from treeclip.errors import PublishError
from treeclip.refresh import RefreshPolicy


def _make_project(root: Path) -> None:
    (root / "docs").mkdir()
    (root / "docs" / "readme.txt").write_text("hello\n", encoding="utf-8")
    (root / "src").mkdir()
    (root / "src" / "main.txt").write_text("world\n", encoding="utf-8")


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name).resolve()
        _make_project(self.root)
        patcher = mock.patch("treeclip.config.CONFIG_PATH", self.root / "config" / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, *argv: str, default_path: Path | None = None) -> tuple[str, str]:
        stdout = io.StringIO()
        stderr = io.StringIO()
        with mock.patch.object(sys, "argv", ["treeclip", *argv]), mock.patch.object(
            sys, "stdout", stdout
        ), mock.patch.object(sys, "stderr", stderr):
            cli.main(default_path=default_path)
        return stdout.getvalue(), stderr.getvalue()

    def test_list_marks_cascaded_selection(self) -> None:
        stdout, _stderr = self._run(str(self.root), "--select", "docs", "--list")
        self.assertEqual(
            stdout,
            "[x] docs/\n  [x] readme.txt\n[ ] src/\n  [ ] main.txt\n",
        )

    def test_stdout_export_includes_only_selected_files(self) -> None:
        stdout, _stderr = self._run(str(self.root), "-s", "docs/", "--stdout")
        self.assertEqual(stdout, "\n--- /docs/readme.txt ---\nhello\n")

    def test_instruction_file_is_exported_first(self) -> None:
        instructions = self.root / "prompt.md"
        instructions.write_text("Be concise", encoding="utf-8")

        stdout, _stderr = self._run(str(self.root), "-s", "/src/main.txt", "-i", str(instructions), "--stdout")

        self.assertEqual(
            stdout,
            "\n--- Prompt Instruction: prompt.md ---\nBe concise\n\n--- /src/main.txt ---\nworld\n",
        )

    def test_defaults_to_current_working_directory(self) -> None:
        previous_cwd = Path.cwd()
        try:
            os.chdir(self.root)
            stdout, _stderr = self._run("--list")
        finally:
            os.chdir(previous_cwd)
        self.assertIn("[ ] docs/", stdout)

    def test_unknown_selection_warns(self) -> None:
        _stdout, stderr = self._run(str(self.root), "-s", "nope", "--stdout")
        self.assertIn("warning: not in tree: nope", stderr)
        self.assertIn("No file content to copy.", stderr)

    def test_missing_path_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self._run(str(self.root / "missing"))
        self.assertIn("Path not found", str(ctx.exception.code))

    def test_clipboard_export_and_publish_failure(self) -> None:
        with mock.patch("treeclip.clipboard.pyperclip.copy") as copy:
            _stdout, stderr = self._run(str(self.root), "-s", "src")
        copy.assert_called_once_with("\n--- /src/main.txt ---\nworld\n")
        self.assertIn("Copied 1 file(s)", stderr)

        with mock.patch("treeclip.cli.TreeSession.export") as export:
            export.return_value = mock.Mock(
                document=mock.Mock(failures=(), is_empty=False, records=()),
                publish=mock.Mock(error=PublishError("failed to copy to clipboard: no backend")),
            )
            with self.assertRaises(SystemExit) as ctx:
                self._run(str(self.root), "-s", "src")
        self.assertEqual(ctx.exception.code, 1)

    def test_save_preferences_persists_effective_options(self) -> None:
        self._run(str(self.root), "--policy", "discard", "--max-workers", "2", "--save-preferences", "--list")
        self.assertIs(cli.config.load_refresh_policy(), RefreshPolicy.DISCARD)
        self.assertEqual(cli.config.load_max_workers(), 2)
        self.assertFalse(cli.config.load_show_hidden())

    def test_no_show_hidden_overrides_saved_preference(self) -> None:
        (self.root / ".env").write_text("secret\n", encoding="utf-8")
        cli.config.save_show_hidden(True)

        shown, _ = self._run(str(self.root), "--list")
        hidden, _ = self._run(str(self.root), "--no-show-hidden", "--list")

        self.assertIn(".env", shown)
        self.assertNotIn(".env", hidden)
        self.assertTrue(cli.config.load_show_hidden())

    def test_format_tree_and_selection_normalization(self) -> None:
        self.assertEqual(cli.normalize_selection_arg("docs/readme.txt"), "/docs/readme.txt")
        self.assertEqual(cli.normalize_selection_arg("/docs/"), "/docs")
        self.assertEqual(cli.normalize_selection_arg("docs\\readme.txt"), "/docs/readme.txt")
        self.assertEqual(cli.format_tree(()), "")


if __name__ == "__main__":
    unittest.main()
