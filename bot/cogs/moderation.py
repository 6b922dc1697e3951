from __future__ import annotations

import logging

import discord
from discord.ext import commands

from core.bot import CommunityBot
from core.errors import best_effort
from utils.constants import CLEAR_CONFIRMATION_SECONDS, DEFAULT_CLEAR_MESSAGES, MAX_CLEAR_MESSAGES
from utils.decorators import privileged_command

LOGGER = logging.getLogger(__name__)


class ModerationCog(commands.Cog):
    """Prefix moderation commands, gated by the admin allow-list or Manage Server."""

    def __init__(self, bot: CommunityBot) -> None:
        self.bot = bot

    @commands.command(name="clear")
    @commands.guild_only()
    @privileged_command()
    async def clear(self, ctx: commands.Context[CommunityBot], amount: int = DEFAULT_CLEAR_MESSAGES) -> None:
        amount = max(1, min(amount, MAX_CLEAR_MESSAGES))
        # +1 for the command message itself.
        deleted = await best_effort(ctx.channel.purge(limit=amount + 1), action="clear messages")  # type: ignore[union-attr]
        if deleted is None:
            await ctx.reply("Could not delete messages here.", mention_author=False)
            return
        removed = max(len(deleted) - 1, 0)
        LOGGER.info(
            "Cleared %s messages",
            removed,
            extra={"guild_id": ctx.guild.id if ctx.guild else None, "channel_id": ctx.channel.id, "user_id": ctx.author.id},
        )
        await best_effort(
            ctx.send(f"✔ Deleted {removed} messages.", delete_after=CLEAR_CONFIRMATION_SECONDS),
            action="send clear confirmation",
        )

    @commands.command(name="ban")
    @commands.guild_only()
    @privileged_command()
    async def ban(self, ctx: commands.Context[CommunityBot], member: discord.Member | None = None) -> None:
        if member is None:
            await ctx.reply("Mention the member to ban.", mention_author=False)
            return
        try:
            await member.ban(reason=f"Banned by {ctx.author}")
        except discord.HTTPException:
            LOGGER.warning("Ban failed for %s", member.id, exc_info=True, extra={"user_id": ctx.author.id})
            await ctx.reply("Ban failed.", mention_author=False)
            return
        await ctx.reply(f"✔ Banned {member}.", mention_author=False)

    @commands.command(name="kick")
    @commands.guild_only()
    @privileged_command()
    async def kick(self, ctx: commands.Context[CommunityBot], member: discord.Member | None = None) -> None:
        if member is None:
            await ctx.reply("Mention the member to kick.", mention_author=False)
            return
        try:
            await member.kick(reason=f"Kicked by {ctx.author}")
        except discord.HTTPException:
            LOGGER.warning("Kick failed for %s", member.id, exc_info=True, extra={"user_id": ctx.author.id})
            await ctx.reply("Kick failed.", mention_author=False)
            return
        await ctx.reply(f"✔ Kicked {member}.", mention_author=False)


async def setup(bot: CommunityBot) -> None:
    await bot.add_cog(ModerationCog(bot))
