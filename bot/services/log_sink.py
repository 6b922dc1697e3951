from __future__ import annotations

import logging
from pathlib import Path

import discord

from core.config import ChannelsConfig
from core.errors import best_effort

LOGGER = logging.getLogger(__name__)


class LogSink:
    """Audit channel for join/leave/delete notices and ticket transcripts.

    Sends are fire-and-forget: a missing channel or a failed send is logged
    and otherwise ignored.
    """

    def __init__(self, config: ChannelsConfig) -> None:
        self.config = config

    def resolve(self, guild: discord.Guild) -> discord.abc.Messageable | None:
        if not self.config.log_channel_id:
            return None
        channel = guild.get_channel(self.config.log_channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            LOGGER.debug("Log channel %s not found in guild %s", self.config.log_channel_id, guild.id)
            return None
        return channel

    async def send(self, guild: discord.Guild, content: str, path: Path | None = None) -> None:
        channel = self.resolve(guild)
        if channel is None:
            return
        if path is None:
            await best_effort(channel.send(content), action="send log notice")
            return
        await best_effort(
            channel.send(content=content, file=discord.File(path, filename=path.name)),
            action="send log attachment",
        )
