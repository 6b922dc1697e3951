from __future__ import annotations

import enum
import logging
from typing import Any

import discord

from core.errors import best_effort

LOGGER = logging.getLogger(__name__)


class ReplyState(enum.Enum):
    UNANSWERED = "unanswered"
    REPLIED = "replied"
    DEFERRED = "deferred"


def _payload(
    content: str | None,
    embed: discord.Embed | None,
    view: discord.ui.View | None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if content is not None:
        payload["content"] = content
    if embed is not None:
        payload["embed"] = embed
    if view is not None:
        payload["view"] = view
    return payload


class InteractionResponder:
    """Reply-once, edit-after wrapper around a single interaction.

    Discord accepts exactly one initial response per interaction (a message or
    a deferral); everything after that has to edit the original response. The
    responder tracks which of the two happened so callers never issue a second
    initial response, and swallows platform failures because user feedback is
    best effort.
    """

    def __init__(self, interaction: discord.Interaction, *, ephemeral: bool = True) -> None:
        self.interaction = interaction
        self.ephemeral = ephemeral
        self.state = ReplyState.UNANSWERED

    @property
    def acknowledged(self) -> bool:
        return self.state is not ReplyState.UNANSWERED

    async def respond(
        self,
        content: str | None = None,
        *,
        embed: discord.Embed | None = None,
        view: discord.ui.View | None = None,
    ) -> None:
        if self.acknowledged:
            await self.update(content, embed=embed, view=view)
            return
        # Claimed before the call: a failed reply still consumed the slot.
        self.state = ReplyState.REPLIED
        await best_effort(
            self.interaction.response.send_message(
                ephemeral=self.ephemeral, **_payload(content, embed, view)
            ),
            action="initial interaction reply",
        )

    async def defer(self) -> None:
        if self.acknowledged:
            return
        self.state = ReplyState.DEFERRED
        await best_effort(
            self.interaction.response.defer(ephemeral=self.ephemeral, thinking=True),
            action="defer interaction",
        )

    async def update(
        self,
        content: str | None = None,
        *,
        embed: discord.Embed | None = None,
        view: discord.ui.View | None = None,
    ) -> None:
        if not self.acknowledged:
            LOGGER.debug("Ignoring update for unacknowledged interaction %s", self.interaction.id)
            return
        await best_effort(
            self.interaction.edit_original_response(**_payload(content, embed, view)),
            action="edit interaction response",
        )
