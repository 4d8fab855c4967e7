"""Sync pass summary.

Counts what a pass did and formats the one-line message shown to the
user once the pass is over.
"""

from dataclasses import dataclass


@dataclass
class SyncCounts:
    """Per-pass counters.

    Attributes:
        synced: Notes created or re-rendered.
        skipped: Existing notes left untouched.
        updated_in_remote: Local note edits pushed to Hoarder.
        excluded_by_tags: Bookmarks skipped because of an excluded tag.
    """

    synced: int = 0
    skipped: int = 0
    updated_in_remote: int = 0
    excluded_by_tags: int = 0


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """``"1 note"``, ``"0 notes"``, ``"2 notes"``."""
    word = singular if count == 1 else (plural or singular + "s")
    return f"{count} {word}"


def format_summary(counts: SyncCounts) -> str:
    """Format pass counts as a human-readable message.

    Example:
        "Successfully synced 3 bookmarks (skipped 1 existing file) and
        updated 2 notes in Hoarder, excluded 1 bookmark by tags"
    """
    message = f"Successfully synced {pluralize(counts.synced, 'bookmark')}"
    if counts.skipped > 0:
        message += f" (skipped {pluralize(counts.skipped, 'existing file')})"
    if counts.updated_in_remote > 0:
        message += f" and updated {pluralize(counts.updated_in_remote, 'note')} in Hoarder"
    if counts.excluded_by_tags > 0:
        message += f", excluded {pluralize(counts.excluded_by_tags, 'bookmark')} by tags"
    return message
