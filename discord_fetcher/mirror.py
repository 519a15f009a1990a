"""
mirror.py
─────────
Walks every page of every resource of one guild.

The Fetcher answers one page per call; this module owns the loop around it:
  1. Fetch the guild
  2. Fetch the channel list
  3. Page through all members
  4. Page through the messages of every text channel
  5. Page through the reactions of every emoji on every message
  6. Print a short report
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from .fetcher import EndCursor, Fetcher, ResultPage
from .models import (
    Channel,
    ChannelType,
    Guild,
    GuildMember,
    Message,
    Reaction,
)

T = TypeVar("T")

# Cursor before the first snowflake ever issued
START_CURSOR = "0"

# Channels whose messages are fetched; the rest have no message history
MESSAGE_CHANNEL_TYPES = (ChannelType.GUILD_TEXT, ChannelType.GUILD_NEWS)

# ── ANSI colours ──────────────────────────────────────────────────────────────
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"


def _ok(msg):
    print(f"  {GREEN}✔{RESET}  {msg}")


def _warn(msg):
    print(f"  {YELLOW}⚠{RESET}  {msg}")


def _head(msg):
    print(f"\n{BOLD}{msg}{RESET}")


async def collect_pages(
    fetch_page: Callable[[EndCursor], Awaitable[ResultPage[T]]],
    start: EndCursor = START_CURSOR,
) -> list[T]:
    """
    Call ``fetch_page`` with successive end cursors until a page reports no
    next page.  An empty trailing page (a full last page misreported as having
    a successor) ends the loop through its missing end cursor.
    """
    results: list[T] = []
    after = start
    while True:
        page = await fetch_page(after)
        results.extend(page.results)
        end_cursor = page.page_info.end_cursor
        if not page.page_info.has_next_page or end_cursor is None:
            return results
        after = end_cursor


# ── Snapshot & report ─────────────────────────────────────────────────────────


@dataclass
class GuildSnapshot:
    guild: Guild
    channels: list[Channel] = field(default_factory=list)
    members: list[GuildMember] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)
    reactions: list[Reaction] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"'{self.guild.name}' — "
            f"{len(self.channels)} channels, "
            f"{len(self.members)} members, "
            f"{len(self.messages)} messages, "
            f"{len(self.reactions)} reactions"
        )


@dataclass
class MirrorReport:
    guild_id: str
    channels: int = 0
    members: int = 0
    messages: int = 0
    reactions: int = 0
    channels_skipped: list[str] = field(default_factory=list)

    def print(self):
        _head("═══════════════════ Mirror Report ═══════════════════")

        print(f"\n  Guild ID   : {self.guild_id}\n")
        for label, count in (
            ("Channels", self.channels),
            ("Members", self.members),
            ("Messages", self.messages),
            ("Reactions", self.reactions),
        ):
            print(f"  {label:<12}  {GREEN}{count} fetched{RESET}")

        if self.channels_skipped:
            print(f"\n  {CYAN}Channels without message history:{RESET}")
            for name in self.channels_skipped:
                print(f"             {DIM}↳ skipped: {name}{RESET}")
        print()


# ── Mirror ────────────────────────────────────────────────────────────────────


class GuildMirror:
    def __init__(self, fetcher: Fetcher):
        self.fetcher = fetcher

    async def run(self) -> tuple[GuildSnapshot, MirrorReport]:
        fetcher = self.fetcher
        report = MirrorReport(guild_id=fetcher.options.guild_id)

        # 1. Guild
        _head("[1/4] Fetching guild …")
        guild = await fetcher.guild()
        snapshot = GuildSnapshot(guild=guild)
        _ok(f"Guild: {guild.name}")

        # 2. Channels
        _head("[2/4] Fetching channels …")
        snapshot.channels = list(await fetcher.channels())
        report.channels = len(snapshot.channels)
        _ok(f"Channels: {report.channels}")

        # 3. Members
        _head("[3/4] Fetching members …")
        snapshot.members = await collect_pages(fetcher.members)
        report.members = len(snapshot.members)
        _ok(f"Members: {report.members}")

        # 4. Messages & reactions
        _head("[4/4] Fetching messages and reactions …")
        for ch in snapshot.channels:
            if ch.type not in MESSAGE_CHANNEL_TYPES:
                report.channels_skipped.append(ch.name)
                continue

            messages = await collect_pages(
                lambda after, ch=ch: fetcher.messages(ch.id, after)
            )
            reactions: list[Reaction] = []
            for msg in messages:
                # Discord lists each emoji once per message; skip any repeats anyway.
                for emoji in dict.fromkeys(msg.reaction_emoji):
                    reactions.extend(
                        await collect_pages(
                            lambda after, msg=msg, emoji=emoji: fetcher.reactions(
                                msg.channel_id, msg.id, emoji, after
                            )
                        )
                    )

            snapshot.messages.extend(messages)
            snapshot.reactions.extend(reactions)
            if messages:
                _ok(f"#{ch.name}: {len(messages)} messages, {len(reactions)} reactions")
            else:
                _warn(f"#{ch.name}: no messages")

        report.messages = len(snapshot.messages)
        report.reactions = len(snapshot.reactions)

        report.print()
        return snapshot, report
