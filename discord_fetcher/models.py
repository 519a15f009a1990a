"""
models.py
─────────
Typed records for a Discord guild as seen through the REST API.

Everything here is a plain value: records are built fresh from one API
response and never mutated.  The helpers at the bottom translate raw wire
values (channel type codes, emoji objects, message authorship) into those
records.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any

# Discord "snowflake" – an opaque, string-encoded numeric ID.  Passed through
# exactly as received; never parsed or compared arithmetically.
Snowflake = str


class ChannelType(Enum):
    GUILD_TEXT = "GUILD_TEXT"
    DM = "DM"
    GUILD_VOICE = "GUILD_VOICE"
    GROUP_DM = "GROUP_DM"
    GUILD_CATEGORY = "GUILD_CATEGORY"
    GUILD_NEWS = "GUILD_NEWS"
    GUILD_STORE = "GUILD_STORE"
    UNKNOWN = "UNKNOWN"


# Discord channel type codes
_D_TEXT = 0
_D_DM = 1
_D_VOICE = 2
_D_GROUP_DM = 3
_D_CATEGORY = 4
_D_NEWS = 5
_D_STORE = 6

_CHANNEL_TYPE_MAP = {
    _D_TEXT: ChannelType.GUILD_TEXT,
    _D_DM: ChannelType.DM,
    _D_VOICE: ChannelType.GUILD_VOICE,
    _D_GROUP_DM: ChannelType.GROUP_DM,
    _D_CATEGORY: ChannelType.GUILD_CATEGORY,
    _D_NEWS: ChannelType.GUILD_NEWS,
    _D_STORE: ChannelType.GUILD_STORE,
}


@dataclass(frozen=True)
class Emoji:
    id: Snowflake | None  # None for built-in (unicode) emoji
    name: str

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> Emoji:
        return cls(id=raw.get("id"), name=raw["name"])


@dataclass(frozen=True)
class Guild:
    id: Snowflake
    name: str
    permissions: Any  # as returned by the API; not interpreted


@dataclass(frozen=True)
class Channel:
    id: Snowflake
    name: str
    type: ChannelType


@dataclass(frozen=True)
class GuildUser:
    id: Snowflake
    username: str
    discriminator: str
    bot: bool  # bot or system account


@dataclass(frozen=True)
class GuildMember:
    user: GuildUser
    nick: str | None
    roles: tuple[Snowflake, ...]


@dataclass(frozen=True)
class Message:
    id: Snowflake
    channel_id: Snowflake
    author_id: Snowflake
    timestamp_ms: int  # epoch milliseconds
    content: str
    reaction_emoji: tuple[Emoji, ...]
    non_user_author: bool
    mentions: tuple[Snowflake, ...]


@dataclass(frozen=True)
class Reaction:
    emoji: Emoji
    channel_id: Snowflake
    message_id: Snowflake
    author_id: Snowflake


def channel_type_from_id(code: int) -> ChannelType:
    return _CHANNEL_TYPE_MAP.get(code, ChannelType.UNKNOWN)


def emoji_to_ref(emoji: Emoji) -> str:
    """
    Reference string used in reaction routes.
    Built-in emoji are referenced by their unicode name, custom emoji by
    ``name:id``.
    """
    if not emoji.id:
        return emoji.name
    if ":" in emoji.name:
        raise ValueError(f"Unexpected ':' in emoji name: {emoji.name!r}")
    return f"{emoji.name}:{emoji.id}"


def is_authored_by_non_user(raw_message: dict[str, Any]) -> bool:
    # Webhook posts carry a webhook_id and a synthetic author.
    return raw_message.get("webhook_id") is not None
