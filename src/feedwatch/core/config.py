"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

CONFIG_KEY = "config"


@dataclass(frozen=True)
class RefreshConfig:
    """Time windows used to classify feed items on each refresh."""

    freshness_window: timedelta = timedelta(hours=24)
    retention_window: timedelta = timedelta(days=10)


@dataclass(frozen=True)
class CommandConfig:
    """Command grammar and worker pool settings for the dispatcher."""

    prefix: str = "!rss"
    max_concurrency: int = 8
