from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from core.bot import CommunityBot
from utils.embeds import make_embed
from utils.interactions import InteractionResponder
from views.ticket_controls import TicketControlsView
from views.ticket_panel import TicketPanelView

LOGGER = logging.getLogger(__name__)


class TicketsCog(commands.Cog):
    def __init__(self, bot: CommunityBot) -> None:
        self.bot = bot

    async def cog_load(self) -> None:
        # Panels and close buttons posted before a restart keep working.
        self.bot.add_view(TicketPanelView(self.bot.config.tickets.reasons))
        self.bot.add_view(TicketControlsView())

    @app_commands.command(name="setup_ticket", description="Post the ticket panel (menu + button) in this channel.")
    @app_commands.guild_only()
    async def setup_ticket(self, interaction: discord.Interaction) -> None:
        responder = InteractionResponder(interaction)
        if not self.bot.admin_gate.allows(interaction.user):
            await responder.respond("You do not have permission to run this command.")
            return
        if not isinstance(interaction.channel, discord.abc.Messageable):
            await responder.respond("The ticket panel can only be posted in a text channel.")
            return

        appearance = self.bot.config.appearance
        await interaction.channel.send(
            embed=make_embed(appearance.ticket_title, appearance.ticket_message, appearance),
            view=TicketPanelView(self.bot.config.tickets.reasons),
        )
        LOGGER.info(
            "Ticket panel posted by %s",
            interaction.user,
            extra={"guild_id": getattr(interaction.guild, "id", None), "channel_id": interaction.channel.id},
        )
        await responder.respond("✔ Ticket panel created.")


async def setup(bot: CommunityBot) -> None:
    await bot.add_cog(TicketsCog(bot))
