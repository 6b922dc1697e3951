from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar

import discord
from discord import app_commands
from discord.ext import commands

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

PLATFORM_ERRORS: tuple[type[BaseException], ...] = (discord.DiscordException,)
PLATFORM_AND_IO_ERRORS: tuple[type[BaseException], ...] = (discord.DiscordException, OSError)

GENERIC_FAILURE_MESSAGE = "Something went wrong, please try again later."


class BotError(RuntimeError):
    user_message: str = "An unexpected error occurred."

    def __init__(self, user_message: str | None = None) -> None:
        if user_message is not None:
            self.user_message = user_message
        super().__init__(self.user_message)


class PermissionDeniedError(BotError):
    user_message = "You do not have permission to run this action."


async def best_effort(
    awaitable: Awaitable[T],
    *,
    action: str,
    errors: tuple[type[BaseException], ...] = PLATFORM_ERRORS,
) -> T | None:
    """Await ``awaitable`` and contain the listed failures.

    Returns the awaited result, or ``None`` when one of ``errors`` was raised.
    The failure is logged with its traceback; anything not listed propagates.
    """
    try:
        return await awaitable
    except errors:
        LOGGER.warning("Best-effort step failed: %s", action, exc_info=True, extra={"action": action})
        return None


def _humanize_command_error(error: Exception) -> str:
    if isinstance(error, commands.CommandInvokeError) and isinstance(error.original, BotError):
        return error.original.user_message
    if isinstance(error, BotError):
        return error.user_message
    if isinstance(error, commands.NoPrivateMessage):
        return "This command only works inside a server."
    if isinstance(error, commands.CheckFailure):
        return PermissionDeniedError.user_message
    if isinstance(error, commands.MemberNotFound):
        return "That member could not be found."
    if isinstance(error, (commands.BadArgument, commands.MissingRequiredArgument)):
        return "Command argument was invalid."
    return "An unexpected command error occurred."


async def handle_prefix_command_error(
    ctx: commands.Context[commands.Bot], error: commands.CommandError
) -> None:
    if isinstance(error, commands.CommandNotFound):
        return
    message = _humanize_command_error(error)
    if isinstance(error, (commands.CheckFailure, commands.UserInputError)):
        LOGGER.info(
            "Prefix command rejected. command=%s user=%s reason=%s",
            getattr(ctx.command, "qualified_name", None),
            ctx.author.id,
            type(error).__name__,
        )
    else:
        LOGGER.error(
            "Prefix command failed. command=%s guild=%s user=%s",
            getattr(ctx.command, "qualified_name", None),
            getattr(ctx.guild, "id", None),
            ctx.author.id,
            exc_info=error,
        )
    await best_effort(ctx.reply(message, mention_author=False), action="reply with command error")


async def handle_interaction_error(interaction: discord.Interaction, error: BaseException) -> None:
    """Last-resort handler for slash commands and components.

    Sends a reply only while the interaction is still unanswered; once an
    initial response exists the error is logged and suppressed.
    """
    original = getattr(error, "original", error)
    if isinstance(original, BotError):
        message = original.user_message
    elif isinstance(error, app_commands.CheckFailure):
        message = PermissionDeniedError.user_message
    else:
        message = GENERIC_FAILURE_MESSAGE

    LOGGER.error(
        "Interaction handler failed. guild=%s channel=%s user=%s",
        getattr(interaction.guild, "id", None),
        getattr(interaction.channel, "id", None),
        interaction.user.id if interaction.user else None,
        exc_info=error,
    )
    if interaction.response.is_done():
        return
    await best_effort(
        interaction.response.send_message(message, ephemeral=True),
        action="reply with interaction error",
    )


async def handle_app_command_error(
    interaction: discord.Interaction, error: app_commands.AppCommandError
) -> None:
    await handle_interaction_error(interaction, error)
