"""
Discord guild fetcher.

Fetches a guild, its channels, members, messages and reactions through the
Discord REST API, one page per call, as typed records.
"""

from .fetcher import Fetcher, FetchOptions, PageInfo, ResultPage

__all__ = ["Fetcher", "FetchOptions", "PageInfo", "ResultPage"]
