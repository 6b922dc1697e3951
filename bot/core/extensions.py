from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from discord.ext import commands

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ExtensionReport:
    loaded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


async def load_extensions(bot: commands.Bot, extension_names: Iterable[str]) -> ExtensionReport:
    """Load each cog module; a broken one is logged and skipped."""
    report = ExtensionReport()
    for ext in extension_names:
        if ext in bot.extensions:
            LOGGER.warning("Extension %s is listed twice, skipping", ext)
            continue
        try:
            await bot.load_extension(ext)
        except commands.ExtensionError:
            LOGGER.exception("Could not load %s", ext)
            report.failed.append(ext)
        else:
            report.loaded.append(ext)
    LOGGER.info("Extensions ready: %s loaded, %s failed", len(report.loaded), len(report.failed))
    return report
