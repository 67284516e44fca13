"""Tests for text helpers and log formatting."""

import logging

from omninews.utils.logger import TimezoneFormatter
from omninews.utils.text import extract_excerpt, is_social_url, strip_tags, truncate_text


class TestTruncate:
    def test_short_text_untouched(self):
        assert truncate_text("Berita singkat", 150) == "Berita singkat"

    def test_long_text_fits_limit(self):
        result = truncate_text("kata " * 100, 20)
        assert len(result) <= 20
        assert result.endswith("...")
        assert result == "kata kata kata ka..."

    def test_exact_length(self):
        assert truncate_text("a" * 10, 10) == "a" * 10


class TestExcerpt:
    def test_tags_removed(self):
        assert strip_tags("<p>Halo <b>dunia</b></p>") == "Halo dunia"

    def test_excerpt_default_length(self):
        excerpt = extract_excerpt("<p>" + "x" * 400 + "</p>")
        assert len(excerpt) == 150

    def test_excerpt_keeps_paragraph_breaks(self):
        assert extract_excerpt("Satu.\n\nDua.") == "Satu.\n\nDua."


def test_is_social_url():
    assert is_social_url("https://www.TikTok.com/@a/video/1") == {"is_tiktok": True, "is_instagram": False}
    assert is_social_url("https://instagr.am/p/abc")["is_instagram"] is True
    assert is_social_url("https://example.com") == {"is_tiktok": False, "is_instagram": False}


def test_timezone_formatter_uses_zone_abbreviation():
    formatter = TimezoneFormatter("%(asctime)s %(message)s", tz_name="Asia/Jakarta")
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "halo", None, None)
    record.created = 1735689600  # 2025-01-01 00:00 UTC
    assert formatter.format(record) == "2025-01-01 07:00:00 WIB halo"
