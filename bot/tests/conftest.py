from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

LOG_CHANNEL_ID = 900


async def _aiter(items: Iterable[Any]):
    for item in items:
        yield item


class ManualClock:
    """Stand-in for ``asyncio.sleep`` that only returns once ``advance`` is called."""

    def __init__(self) -> None:
        self.sleeps: list[float] = []
        self._waiters: list[asyncio.Future[None]] = []

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(future)
        await future

    def advance(self) -> None:
        waiters, self._waiters = self._waiters, []
        for future in waiters:
            if not future.done():
                future.set_result(None)


def _user(user_id: int = 7, name: str = "Alice") -> MagicMock:
    user = MagicMock()
    user.id = user_id
    user.name = name
    user.mention = f"<@{user_id}>"
    user.__str__.return_value = name
    return user


def _text_channel(channel_id: int, name: str, guild: Any = None) -> MagicMock:
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = channel_id
    channel.name = name
    channel.mention = f"<#{channel_id}>"
    channel.guild = guild
    channel.send = AsyncMock()
    channel.delete = AsyncMock()
    channel.history = MagicMock(side_effect=lambda limit=None: _aiter([]))
    return channel


def _guild(guild_id: int = 1) -> MagicMock:
    guild = MagicMock()
    guild.id = guild_id
    guild.channels = []
    guild.default_role = discord.Object(id=guild_id)
    guild.me = discord.Object(id=1000)
    guild.get_role = MagicMock(return_value=None)
    guild.log_channel = _text_channel(LOG_CHANNEL_ID, "logs", guild)
    guild.get_channel = MagicMock(
        side_effect=lambda channel_id: guild.log_channel if channel_id == LOG_CHANNEL_ID else None
    )
    guild.create_text_channel = AsyncMock()
    return guild


def _interaction(*, guild: Any, user: Any, channel: Any = None, client: Any = None) -> MagicMock:
    interaction = MagicMock()
    interaction.id = 555
    interaction.guild = guild
    interaction.user = user
    interaction.channel = channel
    interaction.client = client
    interaction.response = MagicMock()
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.response.is_done = MagicMock(return_value=False)
    interaction.edit_original_response = AsyncMock()
    return interaction


def _message(content: str, author: str, created_at: datetime) -> SimpleNamespace:
    return SimpleNamespace(content=content, author=author, created_at=created_at)


def http_error(message: str = "boom") -> discord.HTTPException:
    return discord.HTTPException(MagicMock(status=500, reason="Server Error"), message)


@pytest.fixture
def make_user() -> Callable[..., MagicMock]:
    return _user


@pytest.fixture
def make_text_channel() -> Callable[..., MagicMock]:
    return _text_channel


@pytest.fixture
def make_guild() -> Callable[..., MagicMock]:
    return _guild


@pytest.fixture
def make_interaction() -> Callable[..., MagicMock]:
    return _interaction


@pytest.fixture
def make_message() -> Callable[..., SimpleNamespace]:
    return _message


@pytest.fixture
def make_http_error() -> Callable[..., discord.HTTPException]:
    return http_error


@pytest.fixture
def history_of() -> Callable[[list[Any]], MagicMock]:
    def factory(messages: list[Any]) -> MagicMock:
        return MagicMock(side_effect=lambda limit=None: _aiter(messages[:limit] if limit else messages))

    return factory


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def utc() -> Callable[..., datetime]:
    def factory(*args: int) -> datetime:
        return datetime(*args, tzinfo=UTC)

    return factory
