from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import discord

from core.errors import handle_interaction_error
from services.verify_service import VerifyOutcome
from utils.constants import VERIFY_BUTTON_ID
from utils.interactions import InteractionResponder

if TYPE_CHECKING:
    from core.bot import CommunityBot

OUTCOME_MESSAGES = {
    VerifyOutcome.NOT_CONFIGURED: "The verify role has not been configured.",
    VerifyOutcome.ALREADY_VERIFIED: "You are already verified.",
    VerifyOutcome.GRANTED: "✔ You have been verified.",
    VerifyOutcome.FAILED: "Could not grant the verify role, please contact staff.",
}


class VerifyPanelView(discord.ui.View):
    def __init__(self) -> None:
        super().__init__(timeout=None)

    @discord.ui.button(
        label="Verify",
        style=discord.ButtonStyle.success,
        emoji="✅",
        custom_id=VERIFY_BUTTON_ID,
    )
    async def verify_button(self, interaction: discord.Interaction, _: discord.ui.Button) -> None:
        bot = cast("CommunityBot", interaction.client)
        responder = InteractionResponder(interaction)
        await responder.defer()
        if not isinstance(interaction.user, discord.Member):
            await responder.update("Verification only works inside a server.")
            return
        outcome = await bot.verify_service.grant(interaction.user)
        await responder.update(OUTCOME_MESSAGES[outcome])

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item[Any]) -> None:
        await handle_interaction_error(interaction, error)
