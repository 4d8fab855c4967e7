"""Tests for pass summaries."""

import pytest

from hoarder_sync.core.summary import SyncCounts, format_summary, pluralize


class TestPluralize:
    @pytest.mark.parametrize(
        "count,expected",
        [(0, "0 notes"), (1, "1 note"), (2, "2 notes")],
    )
    def test_regular(self, count, expected):
        assert pluralize(count, "note") == expected

    def test_irregular(self):
        assert pluralize(2, "entry", "entries") == "2 entries"


class TestFormatSummary:
    """Tests for format_summary."""

    def test_only_synced(self):
        assert format_summary(SyncCounts(synced=1)) == "Successfully synced 1 bookmark"

    def test_nothing(self):
        assert format_summary(SyncCounts()) == "Successfully synced 0 bookmarks"

    def test_all_parts(self):
        counts = SyncCounts(synced=3, skipped=1, updated_in_remote=2, excluded_by_tags=1)

        assert format_summary(counts) == (
            "Successfully synced 3 bookmarks (skipped 1 existing file) "
            "and updated 2 notes in Hoarder, excluded 1 bookmark by tags"
        )

    def test_plural_skipped_and_excluded(self):
        counts = SyncCounts(skipped=2, excluded_by_tags=3)

        assert format_summary(counts) == (
            "Successfully synced 0 bookmarks (skipped 2 existing files), "
            "excluded 3 bookmarks by tags"
        )
