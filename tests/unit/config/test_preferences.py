"""Tests for persisted preferences and input sanitization."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from treeclip import config
from treeclip.refresh import RefreshPolicy


class PreferenceTests(unittest.TestCase):
    def test_defaults_when_config_missing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("treeclip.config.CONFIG_PATH", Path(tmp) / "missing" / "config.json"):
                self.assertEqual(config.load_config(), {})
                self.assertIs(config.load_refresh_policy(), RefreshPolicy.PRESERVE_AND_REVALIDATE)
                self.assertFalse(config.load_show_hidden())
                self.assertEqual(config.load_max_workers(), 8)

    def test_preferences_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("treeclip.config.CONFIG_PATH", config_path):
                config.save_refresh_policy(RefreshPolicy.DISCARD)
                config.save_show_hidden(True)
                config.save_max_workers(3)

                self.assertIs(config.load_refresh_policy(), RefreshPolicy.DISCARD)
                self.assertTrue(config.load_show_hidden())
                self.assertEqual(config.load_max_workers(), 3)
                self.assertEqual(
                    config.load_config(),
                    {"refresh_policy": "discard", "show_hidden": True, "max_workers": 3},
                )

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("treeclip.config.CONFIG_PATH", config_path):
                config.save_config({"refresh_policy": "merge", "show_hidden": "yes", "max_workers": True})
                self.assertIs(config.load_refresh_policy(), RefreshPolicy.PRESERVE_AND_REVALIDATE)
                self.assertFalse(config.load_show_hidden())
                self.assertEqual(config.load_max_workers(), 8)

                config.save_config({"max_workers": 500})
                self.assertEqual(config.load_max_workers(), 8)

    def test_save_max_workers_clamps_range(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("treeclip.config.CONFIG_PATH", Path(tmp) / "config.json"):
                config.save_max_workers(1000)
                self.assertEqual(config.load_max_workers(), 64)
                config.save_max_workers(0)
                self.assertEqual(config.load_max_workers(), 1)

    def test_malformed_json_loads_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("{not json", encoding="utf-8")
            with mock.patch("treeclip.config.CONFIG_PATH", config_path):
                with self.assertLogs("treeclip.config", level="WARNING"):
                    self.assertEqual(config.load_config(), {})
            config_path.write_text("[1, 2]", encoding="utf-8")
            with mock.patch("treeclip.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})

    def test_unwritable_config_is_logged_not_raised(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "blocker"
            blocker.write_text("", encoding="utf-8")
            with mock.patch("treeclip.config.CONFIG_PATH", blocker / "config.json"):
                with self.assertLogs("treeclip.config", level="WARNING"):
                    config.save_show_hidden(True)
                self.assertFalse(config.load_show_hidden())


if __name__ == "__main__":
    unittest.main()
