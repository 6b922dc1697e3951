from __future__ import annotations

import discord

from services.models import Ticket, TicketState
from utils.constants import TICKET_CHANNEL_PREFIX


def ticket_channel_name(username: str) -> str:
    return f"{TICKET_CHANNEL_PREFIX}{username}".lower()


class TicketRegistry:
    """Finds a user's open ticket from the guild's live channel list.

    Nothing is stored: a ticket exists exactly while a channel with the
    derived name exists, so the answer always matches platform state. Each
    lookup is a linear scan of the guild's cached channels.
    """

    def find_open_ticket(self, guild: discord.Guild, username: str) -> Ticket | None:
        wanted = ticket_channel_name(username)
        for channel in guild.channels:
            if channel.name.lower() == wanted:
                return Ticket(
                    guild_id=guild.id,
                    channel_id=channel.id,
                    channel_name=channel.name,
                    owner_name=username,
                    status=TicketState.OPEN,
                )
        return None
