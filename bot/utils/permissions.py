from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import discord


class AdminGate:
    """Decides whether a caller may run privileged actions.

    A caller is privileged when their id is on the configured admin allow-list
    or when the platform reports the Manage Server permission for them.
    """

    def __init__(self, admin_ids: Iterable[str | int]) -> None:
        self._admin_ids = frozenset(str(admin_id).strip() for admin_id in admin_ids)

    def is_privileged(self, caller_id: str | int, has_manage_permission: bool = False) -> bool:
        if has_manage_permission:
            return True
        return str(caller_id) in self._admin_ids

    def allows(self, user: discord.abc.User | Any) -> bool:
        return self.is_privileged(user.id, has_manage_guild(user))


def has_manage_guild(user: discord.abc.User | Any) -> bool:
    # Plain users (DMs, uncached members) carry no guild permissions.
    permissions = getattr(user, "guild_permissions", None)
    if permissions is None:
        return False
    return bool(permissions.manage_guild)
