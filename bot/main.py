from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import discord

from core.bot import CommunityBot
from core.config import AppConfig, ConfigError, load_config
from core.logging import configure_logging

LOGGER = logging.getLogger(__name__)


async def _run_bot(config: AppConfig) -> None:
    bot = CommunityBot(config=config)
    async with bot:
        await bot.start(config.discord.token)


def main() -> None:
    root = Path(__file__).resolve().parent
    try:
        config = load_config(root / "config" / "config.yaml")
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(1)
    log_path = configure_logging(config.logging)
    LOGGER.info("Logging to %s", log_path)
    try:
        asyncio.run(_run_bot(config))
    except discord.LoginFailure:
        LOGGER.critical("Failed to log in: the Discord token was rejected")
        sys.exit(1)
    except KeyboardInterrupt:
        LOGGER.info("Shutting down")


if __name__ == "__main__":
    main()
