from __future__ import annotations

from types import SimpleNamespace

import pytest

from utils.permissions import AdminGate, has_manage_guild


def member(user_id: int, manage_guild: bool = False) -> SimpleNamespace:
    return SimpleNamespace(id=user_id, guild_permissions=SimpleNamespace(manage_guild=manage_guild))


@pytest.mark.parametrize(
    ("caller_id", "manage", "expected"),
    [
        ("42", False, True),
        (42, False, True),
        ("7", True, True),
        ("7", False, False),
    ],
)
def test_is_privileged(caller_id, manage, expected) -> None:
    gate = AdminGate(["42"])
    assert gate.is_privileged(caller_id, manage) is expected


def test_allows_uses_guild_permissions() -> None:
    gate = AdminGate([" 42 "])

    assert gate.allows(member(42)) is True
    assert gate.allows(member(7, manage_guild=True)) is True
    assert gate.allows(member(7)) is False


def test_plain_user_has_no_manage_permission() -> None:
    assert has_manage_guild(SimpleNamespace(id=1)) is False
    assert AdminGate([]).allows(SimpleNamespace(id=1)) is False
