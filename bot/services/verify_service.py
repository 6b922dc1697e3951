from __future__ import annotations

import enum
import logging

import discord

from core.config import VerifyConfig

LOGGER = logging.getLogger(__name__)


class VerifyOutcome(enum.Enum):
    NOT_CONFIGURED = "not_configured"
    ALREADY_VERIFIED = "already_verified"
    GRANTED = "granted"
    FAILED = "failed"


class VerifyService:
    def __init__(self, config: VerifyConfig) -> None:
        self.config = config

    async def grant(self, member: discord.Member) -> VerifyOutcome:
        role_id = self.config.role_id
        if not role_id:
            return VerifyOutcome.NOT_CONFIGURED
        if any(role.id == role_id for role in member.roles):
            return VerifyOutcome.ALREADY_VERIFIED
        try:
            # add_roles only needs the id.
            await member.add_roles(discord.Object(id=role_id), reason="Verify panel")
        except discord.HTTPException:
            LOGGER.warning(
                "Failed to grant verify role %s", role_id, exc_info=True, extra={"user_id": member.id}
            )
            return VerifyOutcome.FAILED
        LOGGER.info("Verified member %s", member.id, extra={"guild_id": member.guild.id, "user_id": member.id})
        return VerifyOutcome.GRANTED
