from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, cast

import discord

from core.config import TicketReason
from core.errors import handle_interaction_error
from utils.constants import GENERAL_TICKET_REASON, TICKET_BUTTON_ID, TICKET_MENU_ID
from utils.interactions import InteractionResponder

if TYPE_CHECKING:
    from core.bot import CommunityBot


async def _open_ticket(interaction: discord.Interaction, reason: str) -> None:
    bot = cast("CommunityBot", interaction.client)
    responder = InteractionResponder(interaction)
    await responder.defer()
    await bot.ticket_service.open_ticket(responder, reason)


class TicketReasonSelect(discord.ui.Select["TicketPanelView"]):
    def __init__(self, reasons: Sequence[TicketReason]) -> None:
        super().__init__(
            placeholder="Choose a ticket type",
            options=[discord.SelectOption(label=reason.label[:100], value=reason.value[:100]) for reason in reasons],
            min_values=1,
            max_values=1,
            custom_id=TICKET_MENU_ID,
        )

    async def callback(self, interaction: discord.Interaction) -> None:
        await _open_ticket(interaction, self.values[0])


class OpenTicketButton(discord.ui.Button["TicketPanelView"]):
    def __init__(self) -> None:
        super().__init__(
            label="Open ticket",
            emoji="🎫",
            style=discord.ButtonStyle.primary,
            custom_id=TICKET_BUTTON_ID,
        )

    async def callback(self, interaction: discord.Interaction) -> None:
        await _open_ticket(interaction, GENERAL_TICKET_REASON)


class TicketPanelView(discord.ui.View):
    def __init__(self, reasons: Sequence[TicketReason]) -> None:
        super().__init__(timeout=None)
        self.add_item(TicketReasonSelect(reasons))
        self.add_item(OpenTicketButton())

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item[Any]) -> None:
        await handle_interaction_error(interaction, error)
