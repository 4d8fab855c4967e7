"""Filesystem-safe names for notes and attachments.

Note files are named ``{YYYY-MM-DD}-{sanitized-title}.md``. The name is a
pure function of (title, creation date), which is what lets the sync
engine find an existing note again without any index.
"""

import re

from hoarder_sync.core.bookmark import parse_timestamp

# 50 (max) - 10 (date) - 1 (dash) - 3 (.md) = 36 characters for the title
MAX_TITLE_LENGTH = 36

# Invalid on common filesystems, plus "!" which breaks Obsidian embeds
_INVALID_CHARS_RE = re.compile(r'[\\/:*?"<>|!]')
_WHITESPACE_RE = re.compile(r"\s+")
_DASHES_RE = re.compile(r"-+")


def sanitize_title(title: str) -> str:
    """Make ``title`` safe for use in a file name.

    Invalid characters and whitespace runs become single dashes, edge
    dashes are trimmed, and long titles are cut to MAX_TITLE_LENGTH,
    preferring the last dash in the second half as a word boundary.
    """
    safe = _INVALID_CHARS_RE.sub("-", title)
    safe = _WHITESPACE_RE.sub("-", safe)
    safe = _DASHES_RE.sub("-", safe)
    safe = safe.strip("-")

    if len(safe) > MAX_TITLE_LENGTH:
        truncated = safe[:MAX_TITLE_LENGTH]
        last_dash = truncated.rfind("-")
        if last_dash > MAX_TITLE_LENGTH // 2:
            safe = truncated[:last_dash]
        else:
            safe = truncated

    return safe


def sanitize_filename(title: str, created_at: str) -> str:
    """Build the note stem ``{YYYY-MM-DD}-{sanitized-title}``.

    Args:
        title: Resolved bookmark title.
        created_at: ISO-8601 creation timestamp; its UTC date is used.

    Raises:
        ValueError: If ``created_at`` is not a valid timestamp.

    Example:
        >>> sanitize_filename("My Title!!", "2024-01-05T10:00:00Z")
        '2024-01-05-My-Title'
    """
    date_str = parse_timestamp(created_at).strftime("%Y-%m-%d")
    return f"{date_str}-{sanitize_title(title)}"


def attachment_stem(title: str) -> str:
    """Sanitized title used in attachment names (no date prefix)."""
    return sanitize_title(title)
