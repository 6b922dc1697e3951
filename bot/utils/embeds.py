from __future__ import annotations

import discord

from core.config import AppearanceConfig
from utils.time import utc_now


def parse_color(value: str | None) -> discord.Color:
    if not value:
        return discord.Color.blurple()
    try:
        return discord.Color.from_str(value.strip())
    except ValueError:
        return discord.Color.blurple()


def make_embed(
    title: str,
    description: str,
    appearance: AppearanceConfig | None = None,
    color: discord.Color | None = None,
) -> discord.Embed:
    appearance = appearance or AppearanceConfig()
    embed = discord.Embed(
        title=title,
        description=description,
        color=color if color is not None else parse_color(appearance.embed_color),
        timestamp=utc_now(),
    )
    if appearance.footer_text:
        embed.set_footer(text=appearance.footer_text)
    return embed


def success_embed(message: str) -> discord.Embed:
    return make_embed(title="Success", description=message, color=discord.Color.green())


def error_embed(message: str) -> discord.Embed:
    return make_embed(title="Error", description=message, color=discord.Color.red())
