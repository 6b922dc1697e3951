from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime


class TicketState(enum.Enum):
    REQUESTED = "requested"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass(slots=True)
class Ticket:
    guild_id: int
    channel_id: int
    channel_name: str
    owner_name: str
    owner_id: int | None = None
    reason: str | None = None
    created_at: datetime | None = None
    status: TicketState = TicketState.OPEN

    @property
    def mention(self) -> str:
        return f"<#{self.channel_id}>"


@dataclass(slots=True)
class TicketOpenResult:
    ticket: Ticket | None
    created: bool
    error: str | None = None
