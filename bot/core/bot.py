from __future__ import annotations

import logging
from typing import Any

import discord
from discord.ext import commands

from core.config import AppConfig
from core.errors import handle_app_command_error, handle_prefix_command_error
from core.extensions import load_extensions
from services.log_sink import LogSink
from services.scheduler import TaskScheduler
from services.ticket_registry import TicketRegistry
from services.ticket_service import TicketService, TicketServiceDeps
from services.transcript_service import TranscriptService
from services.verify_service import VerifyService
from utils.permissions import AdminGate

LOGGER = logging.getLogger(__name__)

ACTIVITY_TYPES = {
    "playing": discord.ActivityType.playing,
    "listening": discord.ActivityType.listening,
    "watching": discord.ActivityType.watching,
    "competing": discord.ActivityType.competing,
}


def build_intents() -> discord.Intents:
    # Members for join/leave notices, message content for deletion logs and transcripts.
    intents = discord.Intents.default()
    intents.members = True
    intents.message_content = True
    return intents


class CommunityBot(commands.Bot):
    def __init__(self, config: AppConfig) -> None:
        super().__init__(
            command_prefix=config.discord.prefix,
            intents=build_intents(),
            application_id=config.discord.application_id,
            allowed_mentions=discord.AllowedMentions(everyone=False, roles=True, users=True, replied_user=False),
            help_command=None,
        )
        self.config = config
        self.admin_gate = AdminGate(config.admins)
        self.log_sink = LogSink(config.channels)
        self.scheduler = TaskScheduler()

        # Services are initialized during setup_hook.
        self.ticket_service: TicketService
        self.transcript_service: TranscriptService
        self.verify_service: VerifyService

    async def setup_hook(self) -> None:
        self.transcript_service = TranscriptService(self.config.tickets, self.log_sink)
        self.ticket_service = TicketService(
            self.config,
            TicketServiceDeps(
                registry=TicketRegistry(),
                transcripts=self.transcript_service,
                log_sink=self.log_sink,
                scheduler=self.scheduler,
            ),
        )
        self.verify_service = VerifyService(self.config.verify)

        report = await load_extensions(self, self.config.enabled_extensions)
        if report.failed:
            LOGGER.warning("Running without extensions: %s", ", ".join(report.failed))
        self.tree.on_error = handle_app_command_error  # type: ignore[assignment]

        if self.config.discord.sync_commands_on_start:
            await self._sync_commands()

    async def _sync_commands(self) -> None:
        guild_id = self.config.discord.guild_id
        try:
            if guild_id:
                guild = discord.Object(id=guild_id)
                # Guild-scoped commands show up immediately; global ones can take an hour.
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
            else:
                synced = await self.tree.sync()
        except discord.HTTPException:
            LOGGER.exception("Failed to sync application commands")
            return
        LOGGER.info("Synced %s application commands (guild=%s)", len(synced), guild_id or "global")

    def presence_activity(self) -> discord.BaseActivity:
        discord_cfg = self.config.discord
        activity_type = ACTIVITY_TYPES.get(discord_cfg.activity_type.lower(), discord.ActivityType.watching)
        if activity_type is discord.ActivityType.playing:
            return discord.Game(name=discord_cfg.status_text)
        return discord.Activity(type=activity_type, name=discord_cfg.status_text)

    async def on_ready(self) -> None:
        LOGGER.info("Logged in as %s in %s guild(s)", self.user, len(self.guilds))
        await self.change_presence(status=discord.Status.online, activity=self.presence_activity())

    async def on_command_error(self, ctx: commands.Context[commands.Bot], error: commands.CommandError) -> None:
        if ctx.command and ctx.command.has_error_handler():
            return
        await handle_prefix_command_error(ctx, error)

    async def on_error(self, event_method: str, /, *args: Any, **kwargs: Any) -> None:
        LOGGER.exception("Unhandled error in event handler %s", event_method)

    async def close(self) -> None:
        pending = self.scheduler.pending
        if pending:
            LOGGER.info("Cancelling %s pending ticket closes", pending)
        self.scheduler.cancel_all()
        await super().close()
