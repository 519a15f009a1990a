"""
main.py
───────
CLI entry point: mirror one Discord guild through the REST API.

Credentials and page sizes come from config.json next to this module, when present:

    {"discord": {"token": "...", "guild_id": "...",
                 "members_limit": 1000, "messages_limit": 100,
                 "reactions_limit": 100}}

Anything missing is prompted for (token and guild ID) or defaulted (limits).
"""

from __future__ import annotations
import asyncio
import getpass
import json
import os
import sys

from .api import DiscordApi, DiscordApiError
from .fetcher import Fetcher, FetchOptions
from .mirror import GuildMirror

# Discord's per-request maxima
DEFAULT_MEMBERS_LIMIT = 1000
DEFAULT_MESSAGES_LIMIT = 100
DEFAULT_REACTIONS_LIMIT = 100

CONFIG_FILE = os.path.join(os.path.dirname(__file__), "config.json")

# ── ANSI ──────────────────────────────────────────────────────────────────────
BOLD = "\033[1m"
RED = "\033[91m"
RESET = "\033[0m"


def banner():
    print(f"""
{BOLD}╔══════════════════════════════════════════════════╗
║   Discord Guild Fetcher                          ║
║   Guild · Channels · Members · Messages · Reacts ║
╚══════════════════════════════════════════════════╝{RESET}
""")


def prompt(label: str, secret: bool = False) -> str:
    while True:
        val = (
            getpass.getpass(f"  {label}: ") if secret else input(f"  {label}: ")
        ).strip()
        if val:
            return val
        print("  (required)")


def load_config(path: str = CONFIG_FILE) -> dict:
    if os.path.exists(path):
        with open(path) as f:
            return json.load(f)
    return {}


def build_options(discord_cfg: dict, guild_id: str) -> FetchOptions:
    return FetchOptions(
        guild_id=guild_id,
        members_limit=int(discord_cfg.get("members_limit", DEFAULT_MEMBERS_LIMIT)),
        messages_limit=int(discord_cfg.get("messages_limit", DEFAULT_MESSAGES_LIMIT)),
        reactions_limit=int(discord_cfg.get("reactions_limit", DEFAULT_REACTIONS_LIMIT)),
    )


def run():
    banner()

    config = load_config()

    # ── Discord credentials ───────────────────────────────────────────────
    discord_cfg = config.get("discord", {})
    discord_token = discord_cfg.get("token", "")
    guild_id = discord_cfg.get("guild_id", "")

    if not discord_token or not guild_id:
        print(f"{BOLD}Discord credentials:{RESET}")
        print("  Create a bot at https://discord.com/developers/applications")
        print("  Give it 'View Channels' and 'Read Message History' and invite it.\n")
    if not discord_token:
        discord_token = prompt("Discord Bot Token", secret=True)
    if not guild_id:
        guild_id = prompt("Discord Server (Guild) ID")

    # ── Run ───────────────────────────────────────────────────────────────
    api = DiscordApi(bot_token=discord_token)
    fetcher = Fetcher(api.fetch, build_options(discord_cfg, guild_id))
    try:
        snapshot, _ = asyncio.run(GuildMirror(fetcher).run())
    except DiscordApiError as e:
        print(f"  {RED}✘{RESET}  {e}")
        sys.exit(1)
    print(f"  Done: {snapshot.summary()}\n")


def main():
    try:
        run()
    except KeyboardInterrupt:
        print("\n\n  Cancelled.")
        sys.exit(0)


if __name__ == "__main__":
    main()
