"""Static configuration for feedwatch.

All user-editable settings (storage, commands, refresh windows, notifications,
logging) live in a single JSON file for quick edits without touching Python.
Secrets stay in the environment (see client.py).
"""

import json
import os
from datetime import timedelta

from feedwatch.core.config import CommandConfig, RefreshConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

# FEEDWATCH_CONFIG points at an alternative config file when set.
CONFIG_PATH = os.getenv("FEEDWATCH_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite key-value database.
_storage = _CONFIG.get("storage", {})
DB_PATH = _resolve_path(_storage.get("db_path", "feedwatch.db"))

# Command grammar and how many commands may run at once.
_commands = _CONFIG.get("commands", {})
COMMAND_CONFIG = CommandConfig(
    prefix=_commands.get("prefix", "!rss"),
    max_concurrency=int(_commands.get("max_concurrency", 8)),
)
ADVERTISE_COMMANDS = bool(_commands.get("advertise", True))

# Item windows:
# - freshness_hours: unrecorded items younger than this are notified
# - retention_days: recorded items younger than this are retired
_refresh = _CONFIG.get("refresh", {})
REFRESH_CONFIG = RefreshConfig(
    freshness_window=timedelta(hours=float(_refresh.get("freshness_hours", 24))),
    retention_window=timedelta(days=float(_refresh.get("retention_days", 10))),
)
# Optional User-Agent sent with feed requests.
FEED_USER_AGENT = _refresh.get("user_agent")

# Notification format switches the message layout without changing core logic.
_notifications = _CONFIG.get("notifications", {})
PARSE_MODE = _notifications.get("parse_mode", "markdown")
# Descriptions are clipped to this many characters in item notifications.
DESCRIPTION_CHARS = int(_notifications.get("description_chars", 1000))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
