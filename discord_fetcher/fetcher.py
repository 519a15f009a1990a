"""
fetcher.py
──────────
Paginating fetcher for a single Discord guild.

The Fetcher is responsible for:
  • building the endpoint for guilds, channels, members, messages and reactions
  • shaping each raw response item into a typed record (see models.py)
  • deriving pagination info (hasNextPage / endCursor) for the paged resources

Discord returns no "more results" flag, so a page is assumed to be the last
one when it comes back shorter than the requested limit.  A final page that is
exactly ``limit`` long is therefore reported as having a next page, and the
caller's following request returns an empty page.

The end cursor is the ID of the last raw item.  This assumes Discord returns
results in ascending ID order; the assumption is not checked.

Channels are not paginated by Discord, so ``channels()`` returns the whole
list without page info.
See: https://discord.com/developers/docs/resources/guild#get-guild-channels

The transport is injected: any ``async def fetch(path) -> json`` will do.
Errors it raises reach the caller untouched – nothing here retries, logs or
wraps them.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Generic, TypeVar

from .models import (
    Channel,
    Emoji,
    Guild,
    GuildMember,
    GuildUser,
    Message,
    Reaction,
    Snowflake,
    channel_type_from_id,
    emoji_to_ref,
    is_authored_by_non_user,
)

T = TypeVar("T")

FetchEndpoint = Callable[[str], Awaitable[Any]]

EndCursor = Snowflake

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Fractional seconds; fromisoformat before 3.11 takes exactly 3 or 6 digits
_FRACTION = re.compile(r"\.(\d+)")


@dataclass(frozen=True)
class FetchOptions:
    """Guild to fetch against, and the page size for each paged resource."""

    guild_id: Snowflake
    members_limit: int
    messages_limit: int
    reactions_limit: int


@dataclass(frozen=True)
class PageInfo:
    has_next_page: bool
    end_cursor: EndCursor | None  # None iff the raw response was empty


@dataclass(frozen=True)
class ResultPage(Generic[T]):
    page_info: PageInfo
    results: tuple[T, ...]


# ── per-field default rules ───────────────────────────────────────────────────


def member_nick(raw_member: dict[str, Any]) -> str | None:
    return raw_member.get("nick") or None


def member_is_bot(raw_user: dict[str, Any]) -> bool:
    # System accounts (e.g. "Discord" itself) count as bots too.
    return bool(raw_user.get("bot") or raw_user.get("system"))


def message_reaction_emoji(raw_message: dict[str, Any]) -> tuple[Emoji, ...]:
    return tuple(Emoji.from_raw(r["emoji"]) for r in raw_message.get("reactions") or [])


def message_mentions(raw_message: dict[str, Any]) -> tuple[Snowflake, ...]:
    return tuple(user["id"] for user in raw_message.get("mentions") or [])


def timestamp_to_ms(timestamp: str) -> int:
    """Parse an ISO-8601 timestamp into integer epoch milliseconds."""
    if timestamp.endswith("Z"):
        timestamp = timestamp[:-1] + "+00:00"
    timestamp = _FRACTION.sub(
        lambda m: "." + m.group(1)[:6].ljust(6, "0"), timestamp, count=1
    )
    parsed = datetime.fromisoformat(timestamp)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return (parsed - _EPOCH) // timedelta(milliseconds=1)


# ── normalizers ───────────────────────────────────────────────────────────────


def normalize_guild(raw: dict[str, Any]) -> Guild:
    return Guild(id=raw["id"], name=raw["name"], permissions=raw["permissions"])


def normalize_channel(raw: dict[str, Any]) -> Channel:
    return Channel(id=raw["id"], name=raw["name"], type=channel_type_from_id(raw["type"]))


def normalize_member(raw: dict[str, Any]) -> GuildMember:
    user = raw["user"]
    return GuildMember(
        user=GuildUser(
            id=user["id"],
            username=user["username"],
            discriminator=user["discriminator"],
            bot=member_is_bot(user),
        ),
        nick=member_nick(raw),
        roles=tuple(raw["roles"]),
    )


def normalize_message(raw: dict[str, Any], channel: Snowflake) -> Message:
    return Message(
        id=raw["id"],
        channel_id=channel,
        author_id=raw["author"]["id"],
        timestamp_ms=timestamp_to_ms(raw["timestamp"]),
        content=raw["content"],
        reaction_emoji=message_reaction_emoji(raw),
        non_user_author=is_authored_by_non_user(raw),
        mentions=message_mentions(raw),
    )


def normalize_reaction(
    raw: dict[str, Any],
    channel: Snowflake,
    message: Snowflake,
    emoji: Emoji,
) -> Reaction:
    # The reactions route returns the users who reacted: the item's own "id"
    # is the reacting user.
    raw_emoji = raw.get("emoji")
    return Reaction(
        emoji=Emoji.from_raw(raw_emoji) if raw_emoji else emoji,
        channel_id=channel,
        message_id=message,
        author_id=raw["id"],
    )


# ── fetcher ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class _PagedResource(Generic[T]):
    path: str
    limit: int
    normalize: Callable[[dict[str, Any]], T]
    raw_id: Callable[[dict[str, Any]], EndCursor]


def _item_id(raw: dict[str, Any]) -> EndCursor:
    return raw["id"]


def _member_id(raw: dict[str, Any]) -> EndCursor:
    return raw["user"]["id"]


class Fetcher:
    def __init__(self, fetch_endpoint: FetchEndpoint, options: FetchOptions):
        self._fetch = fetch_endpoint
        self._options = options

    @property
    def options(self) -> FetchOptions:
        return self._options

    async def guild(self) -> Guild:
        response = await self._fetch(f"guilds/{self._options.guild_id}")
        return normalize_guild(response)

    async def channels(self) -> tuple[Channel, ...]:
        response = await self._fetch(f"/guilds/{self._options.guild_id}/channels")
        return tuple(normalize_channel(x) for x in response)

    async def members(self, after: EndCursor) -> ResultPage[GuildMember]:
        opts = self._options
        return await self._fetch_page(
            _PagedResource(
                path=f"/guilds/{opts.guild_id}/members?after={after}&limit={opts.members_limit}",
                limit=opts.members_limit,
                normalize=normalize_member,
                raw_id=_member_id,
            )
        )

    async def messages(self, channel: Snowflake, after: EndCursor) -> ResultPage[Message]:
        limit = self._options.messages_limit
        return await self._fetch_page(
            _PagedResource(
                path=f"/channels/{channel}/messages?after={after}&limit={limit}",
                limit=limit,
                normalize=lambda x: normalize_message(x, channel),
                raw_id=_item_id,
            )
        )

    async def reactions(
        self,
        channel: Snowflake,
        message: Snowflake,
        emoji: Emoji,
        after: EndCursor,
    ) -> ResultPage[Reaction]:
        limit = self._options.reactions_limit
        emoji_ref = emoji_to_ref(emoji)
        return await self._fetch_page(
            _PagedResource(
                path=(
                    f"/channels/{channel}/messages/{message}/reactions/{emoji_ref}"
                    f"?after={after}&limit={limit}"
                ),
                limit=limit,
                normalize=lambda x: normalize_reaction(x, channel, message, emoji),
                raw_id=_item_id,
            )
        )

    async def _fetch_page(self, resource: _PagedResource[T]) -> ResultPage[T]:
        response = await self._fetch(resource.path)
        results = tuple(resource.normalize(x) for x in response)
        # Cursor comes from the raw items: normalized records don't all keep
        # an "id" field (reactions map it to author_id).
        end_cursor = resource.raw_id(response[-1]) if len(response) > 0 else None
        page_info = PageInfo(
            has_next_page=len(results) == resource.limit,
            end_cursor=end_cursor,
        )
        return ResultPage(page_info=page_info, results=results)
