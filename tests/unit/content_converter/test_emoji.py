"""Unit tests for content_converter.emoji module."""

import pytest

from confluence_export.content_converter.emoji import emoji_id_to_unicode


class TestEmojiIdToUnicode:
    """Test cases for emoji_id_to_unicode function."""

    @pytest.mark.parametrize("emoji_id, expected", [
        ("1f600", "\U0001F600"),
        ("1F600", "\U0001F600"),
        ("emoji-1f600", "\U0001F600"),
        ("emoji/1f600", "\U0001F600"),
        ("1f44d-1f3fb", "\U0001F44D\U0001F3FB"),
        ("1f469_200d_1f4bb", "\U0001F469\u200D\U0001F4BB"),
    ])
    def test_valid_ids(self, emoji_id, expected):
        """Hex ids with optional prefixes and separators are decoded."""
        assert emoji_id_to_unicode(emoji_id) == expected

    @pytest.mark.parametrize("emoji_id", [None, "", "emoji-", "smile", "d800", "110000"])
    def test_invalid_ids(self, emoji_id):
        """Empty, non-hex, surrogate and out-of-range ids yield None."""
        assert emoji_id_to_unicode(emoji_id) is None
