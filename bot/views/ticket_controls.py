from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import discord

from core.errors import handle_interaction_error
from utils.constants import CLOSE_TICKET_ID
from utils.interactions import InteractionResponder

if TYPE_CHECKING:
    from core.bot import CommunityBot


class TicketControlsView(discord.ui.View):
    """Close control posted into every ticket channel; persistent across restarts."""

    def __init__(self) -> None:
        super().__init__(timeout=None)

    @discord.ui.button(
        label="Close ticket",
        style=discord.ButtonStyle.danger,
        emoji="🔒",
        custom_id=CLOSE_TICKET_ID,
    )
    async def close_button(self, interaction: discord.Interaction, _: discord.ui.Button) -> None:
        bot = cast("CommunityBot", interaction.client)
        await bot.ticket_service.close_ticket(InteractionResponder(interaction))

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item[Any]) -> None:
        await handle_interaction_error(interaction, error)
