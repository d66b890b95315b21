"""Bot command advertisement for the Telegram command menu."""

from __future__ import annotations

import logging

from telethon import functions, types

from feedwatch.core.commands import VERB_ARGUMENTS, VERB_HELP, usage

LOGGER = logging.getLogger(__name__)


def command_menu(prefix: str) -> list[types.BotCommand]:
    """Return the menu entry for the prefix command.

    Telegram command names cannot hold spaces, so every verb is listed in the
    description of a single entry named after the prefix.
    """

    name = prefix.lstrip("/!")
    verbs = "; ".join(f"{usage(prefix, verb)} ({VERB_HELP[verb]})" for verb in VERB_ARGUMENTS)
    # Telegram caps descriptions at 256 characters.
    return [types.BotCommand(command=name, description=verbs[:256])]


async def advertise_commands(client, prefix: str) -> None:
    """Publish the command menu for every chat."""

    await client(
        functions.bots.SetBotCommandsRequest(
            scope=types.BotCommandScopeDefault(),
            lang_code="",
            commands=command_menu(prefix),
        )
    )
    LOGGER.info("Advertised %s command verbs", len(VERB_ARGUMENTS))


async def clear_commands(client) -> None:
    """Remove the command menu. Runs at shutdown, so failures are only logged."""

    try:
        await client(
            functions.bots.ResetBotCommandsRequest(
                scope=types.BotCommandScopeDefault(),
                lang_code="",
            )
        )
    except Exception:
        LOGGER.exception("Error clearing bot commands during cleanup")
        return
    LOGGER.info("Cleared bot commands")
