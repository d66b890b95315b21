"""Core refresh engine.

This module is integration-agnostic. It only relies on ports for storage,
fetching, and notifications. The engine holds no state between calls: every
refresh recomputes what exists from the store.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from feedwatch.core.config import CONFIG_KEY, RefreshConfig
from feedwatch.core.errors import NoSubscription, NotFound, StoreUnavailable
from feedwatch.core.items import ItemOutcome, build_record, classify_item
from feedwatch.core.models import Subscription
from feedwatch.core.ports import FetcherPort, NotifierPort, StorePort

LOGGER = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RefreshReport:
    """Per-refresh tally of what happened to each item id."""

    channel: str
    notified: List[str] = field(default_factory=list)
    retired: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class RefreshEngine:
    """Fetches a channel's feed and decides notify, retire, or skip per item."""

    def __init__(
        self,
        store: StorePort,
        fetcher: FetcherPort,
        notifier: NotifierPort,
        config: Optional[RefreshConfig] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._notifier = notifier
        self._config = config or RefreshConfig()
        self._clock = clock

    def _load_subscription(self, channel: str) -> Subscription:
        try:
            raw = self._store.get(channel, CONFIG_KEY)
        except NotFound as exc:
            raise NoSubscription(channel, CONFIG_KEY) from exc
        return Subscription.from_json(raw)

    async def refresh(self, channel: str) -> RefreshReport:
        """Run one refresh pass for ``channel``.

        Raises ``NoSubscription``, ``StoreUnavailable`` or ``FetchError``
        before any mutation. Once items are being processed, a failed delete
        or put is logged and the pass moves on; earlier mutations are kept.
        """

        LOGGER.info("Refreshing feed for %s", channel)
        subscription = self._load_subscription(channel)
        existing = self._store.list_keys(channel)

        # Feed parsing does blocking network IO.
        items = await asyncio.to_thread(self._fetcher.fetch, subscription.url)
        LOGGER.debug("Fetched %s items from %s", len(items), subscription.url)

        report = RefreshReport(channel=channel)
        now = self._clock()
        for item in items:
            record = build_record(item)
            if record.id == CONFIG_KEY:
                # Would collide with the subscription record in the same namespace.
                LOGGER.warning("Skipping item with reserved id %r for %s", record.id, channel)
                report.skipped.append(record.id)
                continue
            outcome = classify_item(
                item.published_at,
                record.id in existing,
                now,
                self._config,
            )

            if outcome is ItemOutcome.RETIRE:
                try:
                    self._store.delete(channel, record.id)
                except StoreUnavailable:
                    LOGGER.exception("Failed to delete expired key %s for %s", record.id, channel)
                    report.failed.append(record.id)
                    continue
                report.retired.append(record.id)
                continue

            if outcome is ItemOutcome.SKIP:
                report.skipped.append(record.id)
                continue

            await self._notifier.send_item(channel, record)
            report.notified.append(record.id)
            try:
                self._store.put(channel, record.id, record.to_json())
            except StoreUnavailable:
                LOGGER.exception("Failed to store item %s for %s", record.id, channel)
                report.failed.append(record.id)

        LOGGER.info(
            "Refresh complete for %s: notified=%s, retired=%s, skipped=%s, failed=%s",
            channel,
            len(report.notified),
            len(report.retired),
            len(report.skipped),
            len(report.failed),
        )
        return report
