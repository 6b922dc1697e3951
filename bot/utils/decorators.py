from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from discord.ext import commands

from core.errors import PermissionDeniedError

F = TypeVar("F", bound=Callable[..., Any])


def privileged_command() -> Callable[[F], F]:
    """Prefix-command check backed by the bot's admin gate."""

    async def predicate(ctx: commands.Context[Any]) -> bool:
        if ctx.guild is None:
            raise commands.NoPrivateMessage()
        if ctx.bot.admin_gate.allows(ctx.author):
            return True
        raise commands.CheckFailure(PermissionDeniedError.user_message)

    return commands.check(predicate)
