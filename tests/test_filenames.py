"""Tests for note and attachment names."""

import pytest

from hoarder_sync.core.filenames import (
    MAX_TITLE_LENGTH,
    attachment_stem,
    sanitize_filename,
    sanitize_title,
)


class TestSanitizeFilename:
    """Tests for sanitize_filename."""

    def test_date_prefix_and_punctuation(self):
        assert sanitize_filename("My Title!!", "2024-01-05T10:00:00Z") == "2024-01-05-My-Title"

    def test_invalid_characters_replaced(self):
        result = sanitize_filename('a/b\\c:d*e?f"g<h>i|j', "2024-01-05T10:00:00Z")

        assert result == "2024-01-05-a-b-c-d-e-f-g-h-i-j"

    def test_whitespace_and_dash_runs_collapse(self):
        assert sanitize_title("  hello   --  world  ") == "hello-world"

    def test_uses_utc_date(self):
        """The date comes from the UTC creation time."""
        assert sanitize_filename("x", "2024-01-05T23:30:00-02:00") == "2024-01-06-x"

    def test_invalid_timestamp_raises(self):
        with pytest.raises(ValueError):
            sanitize_filename("x", "nope")

    def test_deterministic(self):
        first = sanitize_filename("Some Title", "2024-01-05T10:00:00Z")
        second = sanitize_filename("Some Title", "2024-01-05T10:00:00Z")

        assert first == second


class TestTruncation:
    """Long titles are cut, preferring a dash boundary."""

    def test_short_title_untouched(self):
        assert sanitize_title("Short title") == "Short-title"

    def test_cut_at_last_dash(self):
        title = "The quick brown fox jumps over the lazy dog"

        result = sanitize_title(title)

        assert len(result) <= MAX_TITLE_LENGTH
        assert result == "The-quick-brown-fox-jumps-over-the"

    def test_hard_cut_without_late_dash(self):
        title = "a" * 50

        assert sanitize_title(title) == "a" * MAX_TITLE_LENGTH

    def test_early_dash_is_not_a_boundary(self):
        """A dash in the first half does not shorten the title further."""
        title = "short-" + "b" * 60

        result = sanitize_title(title)

        assert result == ("short-" + "b" * 60)[:MAX_TITLE_LENGTH]

    @pytest.mark.parametrize(
        "title",
        [
            "My Title!!",
            "The quick brown fox jumps over the lazy dog",
            "a" * 80,
            "weird: chars? <here> | and \"quotes\"",
            "  padded  ",
        ],
    )
    def test_idempotent_and_bounded(self, title):
        once = sanitize_title(title)

        assert len(once) <= MAX_TITLE_LENGTH
        assert sanitize_title(once) == once


class TestAttachmentStem:
    def test_no_date_prefix(self):
        assert attachment_stem("My Title!!") == "My-Title"
