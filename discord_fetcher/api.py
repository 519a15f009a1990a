"""
api.py
──────
HTTP transport for the Discord REST API.

DiscordApi.fetch is the ``fetch(path) -> json`` capability handed to the
Fetcher.  It performs exactly one GET per call; non-2xx responses raise
DiscordApiError.  Rate limits are not handled – a 429 surfaces as an error
like any other status.

Requires a Discord bot token with at minimum:
  • View Channels
  • Read Message History
  • Server Members Intent  ← for the members route
"""

from __future__ import annotations
import asyncio
from typing import Any

import requests

DISCORD_API = "https://discord.com/api/v10"


class DiscordApiError(Exception):
    def __init__(self, status_code: int, endpoint: str, body: str = ""):
        self.status_code = status_code
        self.endpoint = endpoint
        self.body = body[:200]
        super().__init__(f"Discord {status_code} on {endpoint}: {self.body}")


class DiscordApi:
    def __init__(self, bot_token: str, base_url: str = DISCORD_API, timeout: float = 10):
        self.token = bot_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict:
        return {"Authorization": f"Bot {self.token}"}

    def url_for(self, path: str) -> str:
        # The guild route is emitted without a leading slash, the others with.
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(self, path: str) -> Any:
        r = requests.get(self.url_for(path), headers=self._headers(), timeout=self.timeout)
        if not r.ok:
            raise DiscordApiError(r.status_code, path, r.text)
        return r.json()

    async def fetch(self, path: str) -> Any:
        return await asyncio.to_thread(self.get, path)
