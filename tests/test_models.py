"""Tests for models helpers — channel type codes, emoji refs, non-user authors."""

import pytest

from discord_fetcher.models import (
    ChannelType,
    Emoji,
    channel_type_from_id,
    emoji_to_ref,
    is_authored_by_non_user,
)


@pytest.mark.parametrize(
    "code, expected",
    [
        (0, ChannelType.GUILD_TEXT),
        (1, ChannelType.DM),
        (2, ChannelType.GUILD_VOICE),
        (3, ChannelType.GROUP_DM),
        (4, ChannelType.GUILD_CATEGORY),
        (5, ChannelType.GUILD_NEWS),
        (6, ChannelType.GUILD_STORE),
        (15, ChannelType.UNKNOWN),
        (-1, ChannelType.UNKNOWN),
    ],
)
def test_channel_type_from_id(code, expected):
    assert channel_type_from_id(code) is expected


def test_custom_emoji_ref():
    assert emoji_to_ref(Emoji(id="1", name="emojiname")) == "emojiname:1"


def test_builtin_emoji_ref_is_name():
    assert emoji_to_ref(Emoji(id=None, name="🙏")) == "🙏"


def test_custom_emoji_name_with_colon_rejected():
    with pytest.raises(ValueError):
        emoji_to_ref(Emoji(id="1", name="a:b"))


def test_emoji_from_raw_ignores_extra_fields():
    raw = {"id": "7", "name": "party", "animated": True}
    assert Emoji.from_raw(raw) == Emoji(id="7", name="party")
    assert Emoji.from_raw({"id": None, "name": "🎉"}) == Emoji(id=None, name="🎉")


def test_is_authored_by_non_user():
    assert is_authored_by_non_user({"id": "1", "webhook_id": "2"}) is True
    assert is_authored_by_non_user({"id": "1"}) is False
    assert is_authored_by_non_user({"id": "1", "webhook_id": None}) is False
