from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import discord

from core.config import AppConfig
from core.errors import PLATFORM_AND_IO_ERRORS, best_effort
from services.log_sink import LogSink
from services.models import Ticket, TicketOpenResult, TicketState
from services.scheduler import ScheduledTask, TaskScheduler
from services.ticket_registry import TicketRegistry, ticket_channel_name
from services.transcript_service import TranscriptService
from utils.embeds import error_embed, make_embed
from utils.interactions import InteractionResponder
from utils.time import utc_now
from views.ticket_controls import TicketControlsView

LOGGER = logging.getLogger(__name__)

TICKET_FAILURE_MESSAGE = "Something went wrong while creating your ticket."


@dataclass(slots=True)
class TicketServiceDeps:
    registry: TicketRegistry
    transcripts: TranscriptService
    log_sink: LogSink
    scheduler: TaskScheduler


@dataclass(slots=True)
class _KeyedLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class TicketService:
    """Opens and closes ticket channels.

    Opening runs check-then-create against the live channel list. With
    ``serialize_creation`` enabled the check and the channel creation for one
    (guild, derived name) pair run under a shared lock, so concurrent requests
    from the same user queue up instead of both passing the duplicate check.

    Closing acknowledges the interaction, then after ``close_delay_seconds``
    archives a transcript (best effort) and deletes the channel. Deletion runs
    even when the transcript step fails.
    """

    def __init__(self, config: AppConfig, deps: TicketServiceDeps) -> None:
        self.config = config
        self.deps = deps
        self._creation_locks: dict[tuple[int, str], _KeyedLock] = {}
        # channel id -> pending close; None while the close is being acknowledged.
        self._closing: dict[int, ScheduledTask | None] = {}

    def reason_label(self, value: str) -> str:
        for reason in self.config.tickets.reasons:
            if reason.value == value:
                return reason.label
        return value

    def is_closing(self, channel_id: int) -> bool:
        return channel_id in self._closing

    @asynccontextmanager
    async def _creation_guard(self, guild_id: int, name: str) -> AsyncIterator[None]:
        if not self.config.tickets.serialize_creation:
            yield
            return
        key = (guild_id, name)
        entry = self._creation_locks.setdefault(key, _KeyedLock())
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                self._creation_locks.pop(key, None)

    def _ticket_category(self, guild: discord.Guild) -> discord.CategoryChannel | None:
        category_id = self.config.tickets.category_id
        if not category_id:
            return None
        channel = guild.get_channel(category_id)
        if not isinstance(channel, discord.CategoryChannel):
            LOGGER.warning("Ticket category %s is missing or not a category", category_id, extra={"guild_id": guild.id})
            return None
        return channel

    def build_overwrites(
        self, guild: discord.Guild, opener: discord.abc.User
    ) -> dict[discord.abc.Snowflake, discord.PermissionOverwrite]:
        overwrites: dict[discord.abc.Snowflake, discord.PermissionOverwrite] = {
            guild.default_role: discord.PermissionOverwrite(view_channel=False),
            opener: discord.PermissionOverwrite(view_channel=True, send_messages=True),
        }
        if guild.me is not None:
            overwrites[guild.me] = discord.PermissionOverwrite(
                view_channel=True,
                send_messages=True,
                read_message_history=True,
                manage_channels=True,
            )
        for role_id in self.config.tickets.handler_role_ids:
            role = guild.get_role(role_id)
            if role is None:
                LOGGER.warning("Handler role %s not found", role_id, extra={"guild_id": guild.id})
                continue
            overwrites[role] = discord.PermissionOverwrite(view_channel=True, send_messages=True)
        return overwrites

    async def _post_introduction(
        self, channel: discord.TextChannel, opener: discord.abc.User, reason: str
    ) -> None:
        mentions = [opener.mention, *(f"<@&{role_id}>" for role_id in self.config.tickets.mention_role_ids)]
        embed = make_embed(
            title="🎟️ Your ticket",
            description=f"Opened by {opener.mention}\n**Reason:** {self.reason_label(reason)}",
            appearance=self.config.appearance,
        )
        await channel.send(
            content=" ".join(mentions),
            embed=embed,
            view=TicketControlsView(),
            allowed_mentions=discord.AllowedMentions(everyone=False, users=True, roles=True),
        )

    async def open_ticket(self, responder: InteractionResponder, reason: str) -> TicketOpenResult:
        interaction = responder.interaction
        guild = interaction.guild
        opener = interaction.user
        # Channel creation can outlast the initial response window.
        await responder.defer()
        if guild is None:
            await responder.respond(embed=error_embed("Tickets can only be opened inside a server."))
            return TicketOpenResult(ticket=None, created=False, error="no guild")

        name = ticket_channel_name(opener.name)
        context = {"guild_id": guild.id, "user_id": opener.id}
        async with self._creation_guard(guild.id, name):
            existing = self.deps.registry.find_open_ticket(guild, opener.name)
            if existing is not None:
                await responder.update(f"You already have an open ticket: {existing.mention}")
                return TicketOpenResult(ticket=existing, created=False)
            try:
                channel = await guild.create_text_channel(
                    name=name,
                    category=self._ticket_category(guild),
                    overwrites=self.build_overwrites(guild, opener),
                    reason=f"Ticket opened by {opener} ({opener.id})",
                )
            except discord.DiscordException:
                LOGGER.exception("Failed to create ticket channel %s", name, extra=context)
                await responder.respond(embed=error_embed(TICKET_FAILURE_MESSAGE))
                return TicketOpenResult(ticket=None, created=False, error="channel creation failed")

        ticket = Ticket(
            guild_id=guild.id,
            channel_id=channel.id,
            channel_name=name,
            owner_name=opener.name,
            owner_id=opener.id,
            reason=reason,
            created_at=utc_now(),
            status=TicketState.REQUESTED,
        )
        try:
            await self._post_introduction(channel, opener, reason)
        except discord.DiscordException:
            LOGGER.exception("Failed to set up ticket channel %s", name, extra=context)
            # A leftover channel would count as an open ticket.
            await best_effort(channel.delete(reason="Ticket setup failed"), action="roll back ticket channel")
            await responder.respond(embed=error_embed(TICKET_FAILURE_MESSAGE))
            return TicketOpenResult(ticket=None, created=False, error="ticket setup failed")

        await self.deps.log_sink.send(
            guild, f"🎫 New ticket from {opener} ({self.reason_label(reason)}): {channel.mention}"
        )
        ticket.status = TicketState.OPEN
        LOGGER.info("Opened ticket %s", name, extra={**context, "channel_id": channel.id})
        await responder.update(f"✔ Ticket created: {channel.mention}")
        return TicketOpenResult(ticket=ticket, created=True)

    async def close_ticket(self, responder: InteractionResponder) -> ScheduledTask | None:
        interaction = responder.interaction
        channel = interaction.channel
        if interaction.guild is None or not isinstance(channel, discord.TextChannel):
            await responder.respond(embed=error_embed("This is not a ticket channel."))
            return None
        if channel.id in self._closing:
            await responder.respond("This ticket is already closing.")
            return None
        self._closing[channel.id] = None

        delay = self.config.tickets.close_delay_seconds
        await responder.defer()
        await responder.update(f"This ticket will close in {delay:g} seconds...")

        closer = interaction.user
        handle = self.deps.scheduler.schedule(
            delay,
            lambda: self._finish_close(channel, closer),
            name=f"close-ticket-{channel.id}",
        )
        self._closing[channel.id] = handle
        # Also runs when the close is cancelled before it fires.
        handle.add_done_callback(lambda _handle: self._closing.pop(channel.id, None))
        LOGGER.info(
            "Ticket #%s closing in %ss",
            channel.name,
            delay,
            extra={"guild_id": interaction.guild.id, "channel_id": channel.id, "user_id": closer.id},
        )
        return handle

    async def _finish_close(self, channel: discord.TextChannel, closer: discord.abc.User) -> None:
        try:
            await best_effort(
                self.deps.transcripts.archive(channel, closer),
                action="archive ticket transcript",
                errors=PLATFORM_AND_IO_ERRORS,
            )
        finally:
            await best_effort(channel.delete(reason=f"Ticket closed by {closer}"), action="delete ticket channel")
            self._closing.pop(channel.id, None)
            LOGGER.info("Closed ticket #%s", channel.name, extra={"channel_id": channel.id})
