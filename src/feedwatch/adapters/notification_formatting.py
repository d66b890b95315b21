"""Shared notification formatting helpers.

Keeping formatting here prevents drift between adapters and keeps messages
consistent regardless of delivery channel. Descriptions are clipped so one
long feed entry cannot exceed Telegram's message size and stall a refresh.
"""

from __future__ import annotations

import html
from typing import Callable

from feedwatch.core.models import ItemRecord

# Telegram rejects messages longer than this.
MAX_MESSAGE_CHARS = 4096
DEFAULT_DESCRIPTION_CHARS = 1000
ELLIPSIS = "…"


def clip(text: str, limit: int) -> str:
    """Return ``text`` cut to ``limit`` characters, marking the cut."""

    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + ELLIPSIS


def _format_markdown(title: str, description: str, record: ItemRecord) -> str:
    """Create the Markdown notification body.

    Layout: quoted title, fenced description, quoted publish date, bare link.
    """

    lines = [
        f"> {title}",
        f"```{description}```",
        f"> {record.pub_date}",
        record.link,
    ]
    return "\n".join(lines)


def _format_html(title: str, description: str, record: ItemRecord) -> str:
    """Create the HTML notification body with the same layout."""

    parts = [
        f"<blockquote>{html.escape(title)}</blockquote>",
        f"<pre>{html.escape(description)}</pre>",
        f"<blockquote>{html.escape(record.pub_date)}</blockquote>",
    ]
    if record.link:
        safe_link = html.escape(record.link)
        parts.append(f"<a href=\"{safe_link}\">{safe_link}</a>")
    return "\n".join(parts)


def _fit(
    render: Callable[[str, str, ItemRecord], str],
    record: ItemRecord,
    description_chars: int,
) -> str:
    title = record.title
    description = clip(record.description, description_chars)
    message = render(title, description, record)
    # Escaping only grows text, so trimming the overflow from the raw field
    # shrinks the rendered message by at least as much.
    overflow = len(message) - MAX_MESSAGE_CHARS
    if overflow > 0 and description:
        description = clip(description, len(description) - overflow - 1)
        message = render(title, description, record)
        overflow = len(message) - MAX_MESSAGE_CHARS
    if overflow > 0:
        title = clip(title, len(title) - overflow - 1)
        message = render(title, description, record)
    return message[:MAX_MESSAGE_CHARS]


def format_notification(
    record: ItemRecord,
    mode: str,
    description_chars: int = DEFAULT_DESCRIPTION_CHARS,
) -> str:
    """Return the notification formatted for the requested mode.

    The description is clipped to ``description_chars`` and, if the whole
    message is still too long, further until it fits MAX_MESSAGE_CHARS.
    """

    if mode == "markdown":
        return _fit(_format_markdown, record, description_chars)
    if mode == "html":
        return _fit(_format_html, record, description_chars)
    raise ValueError(f"Unsupported notification format: {mode}")
