from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class DiscordConfig:
    token: str
    prefix: str = "!"
    application_id: int | None = None
    guild_id: int | None = None
    sync_commands_on_start: bool = True
    status_text: str = "Community tickets"
    activity_type: str = "watching"


@dataclass(frozen=True, slots=True)
class ChannelsConfig:
    log_channel_id: int | None = None
    welcome_channel_id: int | None = None


@dataclass(frozen=True, slots=True)
class TicketReason:
    label: str
    value: str


DEFAULT_TICKET_REASONS: tuple[TicketReason, ...] = (
    TicketReason(label="Technical support", value="support"),
    TicketReason(label="Purchase", value="buy"),
    TicketReason(label="Report", value="report"),
)


@dataclass(frozen=True, slots=True)
class TicketsConfig:
    category_id: int | None = None
    handler_role_ids: tuple[int, ...] = ()
    mention_role_ids: tuple[int, ...] = ()
    close_delay_seconds: float = 5.0
    transcript_limit: int = 100
    transcript_directory: str = "artifacts/transcripts"
    serialize_creation: bool = True
    reasons: tuple[TicketReason, ...] = DEFAULT_TICKET_REASONS


@dataclass(frozen=True, slots=True)
class VerifyConfig:
    role_id: int | None = None


@dataclass(frozen=True, slots=True)
class AppearanceConfig:
    embed_color: str = "#2b2d31"
    footer_text: str = ""
    ticket_title: str = "🎫 Support Tickets"
    ticket_message: str = "Pick a ticket type from the menu or press the button."
    verify_title: str = "Verification"
    verify_message: str = "Press the button to get verified."
    welcome_title: str = "Welcome 🎉"


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: str = "INFO"
    directory: str = "logs"
    file_name: str = "bot.log"
    max_bytes: int = 10_000_000
    backup_count: int = 10
    json_console: bool = False


DEFAULT_EXTENSIONS: tuple[str, ...] = (
    "cogs.events",
    "cogs.tickets",
    "cogs.verify",
    "cogs.moderation",
    "cogs.utility",
)


@dataclass(frozen=True, slots=True)
class AppConfig:
    discord: DiscordConfig
    admins: frozenset[str] = frozenset()
    channels: ChannelsConfig = field(default_factory=ChannelsConfig)
    tickets: TicketsConfig = field(default_factory=TicketsConfig)
    verify: VerifyConfig = field(default_factory=VerifyConfig)
    appearance: AppearanceConfig = field(default_factory=AppearanceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    enabled_extensions: tuple[str, ...] = DEFAULT_EXTENSIONS


def _get_env_str(key: str, fallback: str | None = None) -> str | None:
    value = os.getenv(key)
    if value is None:
        return fallback
    cleaned = value.strip()
    return cleaned if cleaned else fallback


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _as_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_optional_id(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_id_list(value: Any) -> tuple[int, ...]:
    """Accept a single id or a list of ids; drop anything that is not an integer."""
    if value is None or value == "":
        return ()
    items = value if isinstance(value, (list, tuple)) else [value]
    ids: list[int] = []
    for item in items:
        parsed = _as_optional_id(item)
        if parsed is not None:
            ids.append(parsed)
    return tuple(ids)


def _deep_get(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    node: Any = data
    for key in keys:
        if not isinstance(node, dict):
            return default
        node = node.get(key)
        if node is None:
            return default
    return node


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    return raw


def _load_reasons(raw_reasons: Any) -> tuple[TicketReason, ...]:
    if not isinstance(raw_reasons, list) or not raw_reasons:
        return DEFAULT_TICKET_REASONS
    reasons: list[TicketReason] = []
    for row in raw_reasons:
        if isinstance(row, dict) and row.get("value"):
            value = str(row["value"])
            reasons.append(TicketReason(label=str(row.get("label", value)), value=value))
        elif isinstance(row, str) and row.strip():
            reasons.append(TicketReason(label=row.strip(), value=row.strip().lower()))
    # Discord select menus accept at most 25 options.
    return tuple(reasons[:25]) or DEFAULT_TICKET_REASONS


def load_config(config_path: Path) -> AppConfig:
    env_path = config_path.parent.parent / ".env"
    load_dotenv(env_path)
    raw = _load_yaml(config_path)

    discord_token = _get_env_str("DISCORD_TOKEN", _deep_get(raw, "discord", "token"))
    if not discord_token or "${" in discord_token:
        raise ConfigError("DISCORD_TOKEN is required")

    discord_cfg = DiscordConfig(
        token=discord_token,
        prefix=str(_get_env_str("BOT_PREFIX", _deep_get(raw, "discord", "prefix", default="!"))),
        application_id=_as_optional_id(
            _get_env_str("DISCORD_APPLICATION_ID", _deep_get(raw, "discord", "application_id"))
        ),
        guild_id=_as_optional_id(_get_env_str("DISCORD_GUILD_ID", _deep_get(raw, "discord", "guild_id"))),
        sync_commands_on_start=_as_bool(
            _get_env_str("SYNC_COMMANDS"),
            _as_bool(_deep_get(raw, "discord", "sync_commands_on_start"), True),
        ),
        status_text=str(_deep_get(raw, "discord", "status_text", default="Community tickets")),
        activity_type=str(_deep_get(raw, "discord", "activity_type", default="watching")),
    )

    admins = frozenset(str(admin_id).strip() for admin_id in list(_deep_get(raw, "admins", default=[])))

    channels_cfg = ChannelsConfig(
        log_channel_id=_as_optional_id(
            _get_env_str("LOG_CHANNEL_ID", _deep_get(raw, "channels", "log_channel_id"))
        ),
        welcome_channel_id=_as_optional_id(_deep_get(raw, "channels", "welcome_channel_id")),
    )

    tickets_cfg = TicketsConfig(
        category_id=_as_optional_id(_deep_get(raw, "tickets", "category_id")),
        handler_role_ids=_as_id_list(_deep_get(raw, "tickets", "handler_role_ids")),
        mention_role_ids=_as_id_list(_deep_get(raw, "tickets", "mention_role_ids")),
        close_delay_seconds=_as_float(_deep_get(raw, "tickets", "close_delay_seconds"), 5.0),
        transcript_limit=max(1, min(_as_int(_deep_get(raw, "tickets", "transcript_limit"), 100), 100)),
        transcript_directory=str(
            _deep_get(raw, "tickets", "transcript_directory", default="artifacts/transcripts")
        ),
        serialize_creation=_as_bool(_deep_get(raw, "tickets", "serialize_creation"), True),
        reasons=_load_reasons(_deep_get(raw, "tickets", "reasons")),
    )

    verify_cfg = VerifyConfig(role_id=_as_optional_id(_deep_get(raw, "verify", "role_id")))

    defaults = AppearanceConfig()
    appearance_cfg = AppearanceConfig(
        embed_color=str(_deep_get(raw, "appearance", "embed_color", default=defaults.embed_color)),
        footer_text=str(_deep_get(raw, "appearance", "footer_text", default=defaults.footer_text)),
        ticket_title=str(_deep_get(raw, "appearance", "ticket_title", default=defaults.ticket_title)),
        ticket_message=str(_deep_get(raw, "appearance", "ticket_message", default=defaults.ticket_message)),
        verify_title=str(_deep_get(raw, "appearance", "verify_title", default=defaults.verify_title)),
        verify_message=str(_deep_get(raw, "appearance", "verify_message", default=defaults.verify_message)),
        welcome_title=str(_deep_get(raw, "appearance", "welcome_title", default=defaults.welcome_title)),
    )

    logging_cfg = LoggingConfig(
        level=str(_get_env_str("LOG_LEVEL", _deep_get(raw, "logging", "level", default="INFO"))),
        directory=str(_deep_get(raw, "logging", "directory", default="logs")),
        file_name=str(_deep_get(raw, "logging", "file_name", default="bot.log")),
        max_bytes=_as_int(_deep_get(raw, "logging", "max_bytes"), 10_000_000),
        backup_count=_as_int(_deep_get(raw, "logging", "backup_count"), 10),
        json_console=_as_bool(_deep_get(raw, "logging", "json_console"), False),
    )

    enabled_extensions = tuple(
        str(ext) for ext in list(_deep_get(raw, "enabled_extensions", default=list(DEFAULT_EXTENSIONS)))
    )

    return AppConfig(
        discord=discord_cfg,
        admins=admins,
        channels=channels_cfg,
        tickets=tickets_cfg,
        verify=verify_cfg,
        appearance=appearance_cfg,
        logging=logging_cfg,
        enabled_extensions=enabled_extensions,
    )
