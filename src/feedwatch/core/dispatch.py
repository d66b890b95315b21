"""Command dispatch onto a bounded pool of asyncio tasks.

Each inbound command runs as its own task. The pool caps how many run at
once and logs every failure so nothing disappears with a dropped task.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, Set

from feedwatch.core.commands import Command, parse_command
from feedwatch.core.config import CommandConfig
from feedwatch.core.errors import FeedwatchError, MalformedCommand
from feedwatch.core.models import CommandContext
from feedwatch.core.ports import NotifierPort
from feedwatch.core.refresh import RefreshEngine
from feedwatch.core.subscriptions import SubscriptionService

LOGGER = logging.getLogger(__name__)


class WorkerPool:
    """Semaphore-bounded set of fire-and-forget tasks."""

    def __init__(self, max_concurrency: int) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._tasks: Set[asyncio.Task] = set()
        self.completed = 0
        self.failed = 0

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, coro: Awaitable[None], name: str) -> asyncio.Task:
        task = asyncio.ensure_future(self._run(coro))
        task.set_name(name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    async def _run(self, coro: Awaitable[None]) -> None:
        async with self._semaphore:
            await coro

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            LOGGER.warning("Task %s was cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is None:
            self.completed += 1
            return
        self.failed += 1
        if isinstance(exc, FeedwatchError):
            LOGGER.error("Task %s failed: %s", task.get_name(), exc)
        else:
            LOGGER.error("Task %s crashed", task.get_name(), exc_info=exc)

    async def drain(self) -> None:
        """Wait for every submitted task to finish."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class CommandDispatcher:
    """Maps parsed commands onto subscription and refresh operations."""

    def __init__(
        self,
        subscriptions: SubscriptionService,
        engine: RefreshEngine,
        notifier: NotifierPort,
        config: Optional[CommandConfig] = None,
    ) -> None:
        self._subscriptions = subscriptions
        self._engine = engine
        self._notifier = notifier
        self._config = config or CommandConfig()
        self.pool = WorkerPool(self._config.max_concurrency)

    def parse(self, context: CommandContext) -> Optional[Command]:
        """Parse the message; malformed commands are logged and dropped."""

        try:
            command = parse_command(context.text, self._config.prefix)
        except MalformedCommand as exc:
            LOGGER.warning("%s (from %s in %s)", exc, context.user, context.channel)
            LOGGER.debug("%s: %s", context.user, context.text)
            return None
        if command is not None:
            LOGGER.info("rss command %s detected in %s", command.verb, context.channel)
        return command

    def submit(self, context: CommandContext) -> Optional[asyncio.Task]:
        """Schedule the command carried by ``context`` on the worker pool."""

        command = self.parse(context)
        if command is None:
            return None
        return self.pool.submit(
            self.execute(command, context),
            name=f"{command.verb}:{context.channel}",
        )

    async def execute(self, command: Command, context: CommandContext) -> None:
        """Run one command to completion. Domain errors propagate to the pool."""

        channel = context.channel
        if command.verb == "subscribe":
            self._subscriptions.subscribe(
                channel, command.args["url"], context.user, context.is_team
            )
        elif command.verb == "unsubscribe":
            self._subscriptions.unsubscribe(channel)
        elif command.verb == "status":
            raw = self._subscriptions.status(channel)
            await self._notifier.send_text(channel, f"Current status: ```{raw}```")
        elif command.verb == "get":
            record = self._subscriptions.get_item(channel, command.args["id"])
            await self._notifier.send_text(channel, f"```{record.to_json()}```")
        elif command.verb == "refresh":
            await self._engine.refresh(channel)
        else:
            raise MalformedCommand(f"Unrecognized command {command.verb}")
