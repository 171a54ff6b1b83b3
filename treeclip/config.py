"""Persistent JSON preference helpers.

Stores the refresh policy, hidden-file preference, and worker count.
Tree and selection state are never persisted; they live for one session.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from .file_tree_model.build import DEFAULT_MAX_WORKERS
from .refresh import RefreshPolicy

logger = logging.getLogger(__name__)

APP_NAME = "treeclip"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_REFRESH_POLICY = RefreshPolicy.PRESERVE_AND_REVALIDATE
MAX_WORKERS_LIMIT = 64


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem and serialization errors are logged and otherwise ignored, so
    an unwritable config never stops a run.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("cannot write config %s: %s", CONFIG_PATH, exc)


def load_refresh_policy() -> RefreshPolicy:
    """Return the persisted refresh policy, defaulting to preserve-and-revalidate."""
    value = load_config().get("refresh_policy")
    if not isinstance(value, str):
        return DEFAULT_REFRESH_POLICY
    try:
        return RefreshPolicy.parse(value)
    except ValueError:
        return DEFAULT_REFRESH_POLICY


def save_refresh_policy(policy: RefreshPolicy) -> None:
    config = load_config()
    config["refresh_policy"] = policy.value
    save_config(config)


def load_show_hidden() -> bool:
    """Return persisted hidden-file visibility preference.

    Only explicit boolean values are accepted; any other type falls back to
    ``False``.
    """
    value = load_config().get("show_hidden")
    return bool(value) if isinstance(value, bool) else False


def save_show_hidden(show_hidden: bool) -> None:
    """Persist hidden-file visibility preference as a boolean."""
    config = load_config()
    config["show_hidden"] = bool(show_hidden)
    save_config(config)


def load_max_workers() -> int:
    """Load the I/O worker count.

    Booleans, non-integers and values outside ``1..64`` fall back to the
    default.
    """
    value = load_config().get("max_workers")
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_MAX_WORKERS
    if value < 1 or value > MAX_WORKERS_LIMIT:
        return DEFAULT_MAX_WORKERS
    return value


def save_max_workers(max_workers: int) -> None:
    """Persist the I/O worker count clamped to ``1..64``."""
    config = load_config()
    config["max_workers"] = max(1, min(MAX_WORKERS_LIMIT, int(max_workers)))
    save_config(config)
