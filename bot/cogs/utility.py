from __future__ import annotations

import random

import discord
from discord import app_commands
from discord.ext import commands

from core.bot import CommunityBot
from utils.interactions import InteractionResponder


class UtilityCog(commands.Cog):
    def __init__(self, bot: CommunityBot) -> None:
        self.bot = bot

    @app_commands.command(name="ping", description="Check bot latency.")
    async def ping(self, interaction: discord.Interaction) -> None:
        await InteractionResponder(interaction).respond(f"Pong! {round(self.bot.latency * 1000)}ms")

    @app_commands.command(name="guess", description="Guess a number from 1 to 10.")
    @app_commands.describe(number="Your guess from 1 to 10")
    async def guess(self, interaction: discord.Interaction, number: app_commands.Range[int, 1, 10]) -> None:
        answer = random.randint(1, 10)
        if number == answer:
            message = f"🎉 Correct! The number was {answer}."
        else:
            message = f"❌ Wrong! The number was {answer}."
        await InteractionResponder(interaction).respond(message)


async def setup(bot: CommunityBot) -> None:
    await bot.add_cog(UtilityCog(bot))
