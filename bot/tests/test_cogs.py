from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from cogs.events import EventsCog
from cogs.moderation import ModerationCog
from cogs.tickets import TicketsCog
from cogs.utility import UtilityCog
from cogs.verify import VerifyCog
from core.config import AppConfig, ChannelsConfig, DiscordConfig
from services.log_sink import LogSink
from utils.permissions import AdminGate
from views.ticket_panel import TicketPanelView
from views.verify_panel import VerifyPanelView


def fake_bot(**channels) -> SimpleNamespace:
    config = AppConfig(discord=DiscordConfig(token="x"), admins=frozenset({"42"}), channels=ChannelsConfig(**channels))
    return SimpleNamespace(
        config=config,
        admin_gate=AdminGate(config.admins),
        log_sink=LogSink(config.channels),
        latency=0.1234,
        add_view=MagicMock(),
    )


def caller(user_id: int, manage_guild: bool = False) -> SimpleNamespace:
    return SimpleNamespace(id=user_id, guild_permissions=SimpleNamespace(manage_guild=manage_guild))


@pytest.mark.asyncio
async def test_setup_ticket_posts_panel_for_admin(make_guild, make_text_channel, make_interaction) -> None:
    bot = fake_bot()
    cog = TicketsCog(bot)
    guild = make_guild()
    channel = make_text_channel(50, "support", guild)
    interaction = make_interaction(guild=guild, user=caller(42), channel=channel)

    await cog.setup_ticket.callback(cog, interaction)

    channel.send.assert_awaited_once()
    sent = channel.send.await_args.kwargs
    assert sent["embed"].title == bot.config.appearance.ticket_title
    assert isinstance(sent["view"], TicketPanelView)
    interaction.response.send_message.assert_awaited_once_with(content="✔ Ticket panel created.", ephemeral=True)


@pytest.mark.asyncio
async def test_setup_ticket_rejects_unprivileged_caller(make_guild, make_text_channel, make_interaction) -> None:
    cog = TicketsCog(fake_bot())
    channel = make_text_channel(50, "support")
    interaction = make_interaction(guild=make_guild(), user=caller(7), channel=channel)

    await cog.setup_ticket.callback(cog, interaction)

    channel.send.assert_not_awaited()
    interaction.response.send_message.assert_awaited_once_with(
        content="You do not have permission to run this command.", ephemeral=True
    )


@pytest.mark.asyncio
async def test_verify_setup_allows_manage_guild(make_guild, make_text_channel, make_interaction) -> None:
    cog = VerifyCog(fake_bot())
    channel = make_text_channel(50, "verify")
    interaction = make_interaction(guild=make_guild(), user=caller(7, manage_guild=True), channel=channel)

    await cog.verify_setup.callback(cog, interaction)

    assert isinstance(channel.send.await_args.kwargs["view"], VerifyPanelView)


@pytest.mark.asyncio
async def test_persistent_views_are_registered() -> None:
    bot = fake_bot()

    await TicketsCog(bot).cog_load()
    await VerifyCog(bot).cog_load()

    assert bot.add_view.call_count == 3


@pytest.mark.asyncio
async def test_member_join_sends_welcome_and_log(make_guild, make_text_channel) -> None:
    bot = fake_bot(log_channel_id=900, welcome_channel_id=901)
    guild = make_guild()
    welcome = make_text_channel(901, "welcome", guild)
    guild.get_channel.side_effect = {900: guild.log_channel, 901: welcome}.get
    member = MagicMock()
    member.guild = guild
    member.mention = "<@7>"
    member.__str__.return_value = "Alice"

    await EventsCog(bot).on_member_join(member)

    assert "<@7>" in welcome.send.await_args.kwargs["embed"].description
    guild.log_channel.send.assert_awaited_once_with("➡️ Alice joined the server.")


@pytest.mark.asyncio
async def test_message_delete_logs_placeholder_for_empty_content(make_guild) -> None:
    bot = fake_bot(log_channel_id=900)
    guild = make_guild()
    message = SimpleNamespace(guild=guild, author="Bob", content="")

    await EventsCog(bot).on_message_delete(message)

    guild.log_channel.send.assert_awaited_once_with("🗑️ Deleted message by Bob: [embed/attachment]")


@pytest.mark.asyncio
async def test_message_delete_outside_guild_is_ignored(make_guild) -> None:
    bot = fake_bot(log_channel_id=900)

    await EventsCog(bot).on_message_delete(SimpleNamespace(guild=None, author="Bob", content="hi"))


def fake_context() -> MagicMock:
    ctx = MagicMock()
    ctx.guild = SimpleNamespace(id=1)
    ctx.author = SimpleNamespace(id=42)
    ctx.channel.id = 50
    ctx.channel.purge = AsyncMock(return_value=[object()] * 6)
    ctx.send = AsyncMock()
    ctx.reply = AsyncMock()
    return ctx


@pytest.mark.asyncio
async def test_clear_deletes_requested_messages() -> None:
    cog = ModerationCog(fake_bot())
    ctx = fake_context()

    await cog.clear.callback(cog, ctx, 5)

    ctx.channel.purge.assert_awaited_once_with(limit=6)
    ctx.send.assert_awaited_once_with("✔ Deleted 5 messages.", delete_after=3.0)


@pytest.mark.asyncio
async def test_clear_caps_amount() -> None:
    cog = ModerationCog(fake_bot())
    ctx = fake_context()

    await cog.clear.callback(cog, ctx, 500)

    ctx.channel.purge.assert_awaited_once_with(limit=101)


@pytest.mark.asyncio
async def test_ban_reports_failure(make_http_error) -> None:
    cog = ModerationCog(fake_bot())
    ctx = fake_context()
    target = MagicMock(spec=discord.Member)
    target.id = 7
    target.ban = AsyncMock(side_effect=make_http_error("Missing Permissions"))

    await cog.ban.callback(cog, ctx, target)

    ctx.reply.assert_awaited_once_with("Ban failed.", mention_author=False)


@pytest.mark.asyncio
async def test_kick_requires_member() -> None:
    cog = ModerationCog(fake_bot())
    ctx = fake_context()

    await cog.kick.callback(cog, ctx, None)

    ctx.reply.assert_awaited_once_with("Mention the member to kick.", mention_author=False)


@pytest.mark.asyncio
async def test_ping_reports_latency(make_guild, make_interaction) -> None:
    cog = UtilityCog(fake_bot())
    interaction = make_interaction(guild=make_guild(), user=caller(7))

    await cog.ping.callback(cog, interaction)

    interaction.response.send_message.assert_awaited_once_with(content="Pong! 123ms", ephemeral=True)


@pytest.mark.asyncio
async def test_guess_reports_result(monkeypatch, make_guild, make_interaction) -> None:
    cog = UtilityCog(fake_bot())
    monkeypatch.setattr("cogs.utility.random.randint", lambda low, high: 4)
    interaction = make_interaction(guild=make_guild(), user=caller(7))

    await cog.guess.callback(cog, interaction, 4)

    interaction.response.send_message.assert_awaited_once_with(
        content="🎉 Correct! The number was 4.", ephemeral=True
    )
