from __future__ import annotations

import logging

import discord
from discord.ext import commands

from core.bot import CommunityBot
from core.errors import best_effort
from utils.constants import NON_TEXT_PLACEHOLDER
from utils.embeds import make_embed

LOGGER = logging.getLogger(__name__)


class EventsCog(commands.Cog):
    """Welcome messages and audit notices for membership and deletions."""

    def __init__(self, bot: CommunityBot) -> None:
        self.bot = bot

    async def _send_welcome(self, member: discord.Member) -> None:
        channel_id = self.bot.config.channels.welcome_channel_id
        if not channel_id:
            return
        channel = member.guild.get_channel(channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            return
        appearance = self.bot.config.appearance
        embed = make_embed(appearance.welcome_title, f"{member.mention} welcome to the server!", appearance)
        await best_effort(channel.send(embed=embed), action="send welcome message")

    @commands.Cog.listener()
    async def on_member_join(self, member: discord.Member) -> None:
        await self._send_welcome(member)
        await self.bot.log_sink.send(member.guild, f"➡️ {member} joined the server.")

    @commands.Cog.listener()
    async def on_member_remove(self, member: discord.Member) -> None:
        await self.bot.log_sink.send(member.guild, f"⬅️ {member} left the server.")

    @commands.Cog.listener()
    async def on_message_delete(self, message: discord.Message) -> None:
        if message.guild is None:
            return
        author = str(message.author) if message.author else "Unknown"
        await self.bot.log_sink.send(
            message.guild,
            f"🗑️ Deleted message by {author}: {message.content or NON_TEXT_PLACEHOLDER}",
        )


async def setup(bot: CommunityBot) -> None:
    await bot.add_cog(EventsCog(bot))
