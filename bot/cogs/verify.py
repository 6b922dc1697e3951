from __future__ import annotations

import discord
from discord import app_commands
from discord.ext import commands

from core.bot import CommunityBot
from utils.embeds import make_embed
from utils.interactions import InteractionResponder
from views.verify_panel import VerifyPanelView


class VerifyCog(commands.Cog):
    def __init__(self, bot: CommunityBot) -> None:
        self.bot = bot

    async def cog_load(self) -> None:
        self.bot.add_view(VerifyPanelView())

    @app_commands.command(name="verify_setup", description="Post the verify panel (button) in this channel.")
    @app_commands.guild_only()
    async def verify_setup(self, interaction: discord.Interaction) -> None:
        responder = InteractionResponder(interaction)
        if not self.bot.admin_gate.allows(interaction.user):
            await responder.respond("You do not have permission to run this command.")
            return
        if not isinstance(interaction.channel, discord.abc.Messageable):
            await responder.respond("The verify panel can only be posted in a text channel.")
            return
        appearance = self.bot.config.appearance
        await interaction.channel.send(
            embed=make_embed(appearance.verify_title, appearance.verify_message, appearance),
            view=VerifyPanelView(),
        )
        await responder.respond("✔ Verify panel created.")


async def setup(bot: CommunityBot) -> None:
    await bot.add_cog(VerifyCog(bot))
