"""Command grammar for inbound chat text.

A command is ``<prefix> <verb> [args...]``. The verb is case-sensitive and
each verb declares the positional arguments it needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from feedwatch.core.errors import MalformedCommand

VERB_ARGUMENTS: Dict[str, Tuple[str, ...]] = {
    "subscribe": ("url",),
    "get": ("id",),
    "status": (),
    "refresh": (),
    "unsubscribe": (),
}

VERB_HELP: Dict[str, str] = {
    "subscribe": "Subscribe to an RSS Feed by URL",
    "get": "Get message by ID",
    "status": "Get RSS Feed Status",
    "refresh": "Refresh RSS Feed",
    "unsubscribe": "Unsubscribe from RSS Feed",
}


@dataclass(frozen=True)
class Command:
    """A validated command with its named arguments."""

    verb: str
    args: Dict[str, str]


def usage(prefix: str, verb: str) -> str:
    """Return the usage line for a verb, e.g. ``!rss subscribe <url>``."""

    params = " ".join(f"<{name}>" for name in VERB_ARGUMENTS[verb])
    return f"{prefix} {verb} {params}".strip()


def parse_command(text: str, prefix: str) -> Optional[Command]:
    """Parse chat text into a Command.

    Returns None when the text is not addressed to the bot. Raises
    MalformedCommand for a missing or unknown verb or missing arguments.
    Extra trailing tokens are ignored.
    """

    tokens = text.split()
    if not tokens or tokens[0] != prefix:
        return None
    if len(tokens) < 2:
        raise MalformedCommand(f"Missing verb after {prefix}")

    verb = tokens[1]
    if verb not in VERB_ARGUMENTS:
        raise MalformedCommand(f"Unrecognized command {verb}")

    names = VERB_ARGUMENTS[verb]
    values = tokens[2:]
    if len(values) < len(names):
        raise MalformedCommand(f"Not enough parameters, expected: {usage(prefix, verb)}")

    return Command(verb=verb, args=dict(zip(names, values)))
