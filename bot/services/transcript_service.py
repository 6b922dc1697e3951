from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import discord

from core.config import TicketsConfig
from services.log_sink import LogSink
from utils.constants import NON_TEXT_PLACEHOLDER
from utils.time import to_iso

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TranscriptLine:
    timestamp: str
    author: str
    content: str

    def render(self) -> str:
        return f"[{self.timestamp}] {self.author}: {self.content}"


@dataclass(slots=True)
class Transcript:
    channel_name: str
    lines: list[TranscriptLine] = field(default_factory=list)

    def render(self) -> str:
        return "\n".join(line.render() for line in self.lines)


def build_transcript(channel_name: str, newest_first: Iterable[discord.Message]) -> Transcript:
    """Build a chronological transcript from messages fetched newest first."""
    messages = list(newest_first)
    messages.reverse()
    return Transcript(
        channel_name=channel_name,
        lines=[
            TranscriptLine(
                timestamp=to_iso(message.created_at),
                author=str(message.author),
                content=message.content or NON_TEXT_PLACEHOLDER,
            )
            for message in messages
        ],
    )


class TranscriptService:
    def __init__(self, config: TicketsConfig, log_sink: LogSink) -> None:
        self.config = config
        self.log_sink = log_sink
        self.base_dir = Path(config.transcript_directory)

    async def capture(self, channel: discord.TextChannel, limit: int | None = None) -> Transcript:
        # history() yields newest first unless asked otherwise.
        messages = [message async for message in channel.history(limit=limit or self.config.transcript_limit)]
        return build_transcript(channel.name, messages)

    def transcript_path(self, channel: discord.TextChannel) -> Path:
        return self.base_dir / f"transcript-{channel.id}.txt"

    async def archive(self, channel: discord.TextChannel, closed_by: discord.abc.User) -> None:
        """Capture the channel, forward it to the log sink, then drop the file."""
        transcript = await self.capture(channel)
        path = self.transcript_path(channel)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        try:
            path.write_text(transcript.render(), encoding="utf-8")
            await self.log_sink.send(
                channel.guild,
                f"Transcript for {channel.name} (closed by {closed_by})",
                path=path,
            )
            LOGGER.info(
                "Archived %s transcript lines for #%s",
                len(transcript.lines),
                channel.name,
                extra={"guild_id": channel.guild.id, "channel_id": channel.id},
            )
        finally:
            path.unlink(missing_ok=True)
