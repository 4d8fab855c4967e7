"""Human-readable titles for bookmarks.

Bookmarks often have no title of their own, so a title is derived from
whatever the content offers, first match wins:

1. the bookmark's own title
2. link: the page title, else the URL's last path segment, else its host
3. text: the first line of the text
4. asset: the file name, else the source URL's last path segment or host
5. ``Bookmark-{id}-{YYYY-MM-DD}``
"""

import re
from typing import Optional
from urllib.parse import SplitResult, urlsplit

from hoarder_sync.core.bookmark import AssetContent, Bookmark, LinkContent, TextContent

MAX_TEXT_TITLE_LENGTH = 100

_EXTENSION_RE = re.compile(r"\.[^/.]+$")


def resolve_title(bookmark: Bookmark) -> str:
    """Derive a non-empty title for ``bookmark``. Never raises."""
    if bookmark.title:
        return bookmark.title

    content = bookmark.content
    title: Optional[str] = None
    if isinstance(content, LinkContent):
        title = content.title or _title_from_link_url(content.url)
    elif isinstance(content, TextContent):
        title = _title_from_text(content.text)
    elif isinstance(content, AssetContent):
        if content.file_name:
            title = _strip_extension(content.file_name)
        else:
            title = _title_from_asset_url(content.source_url)

    return title or _fallback_title(bookmark)


def _split_url(url: str) -> Optional[SplitResult]:
    """Parse ``url``; None if it is not an absolute URL with a host."""
    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname
    except ValueError:
        return None
    if not parsed.scheme or not hostname:
        return None
    return parsed


def _last_segment(parsed: SplitResult) -> str:
    return parsed.path.rsplit("/", 1)[-1]


def _strip_extension(name: str) -> str:
    return _EXTENSION_RE.sub("", name)


def _title_from_link_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    parsed = _split_url(url)
    if parsed is None:
        return url

    path_title = re.sub(r"[-_]", " ", _strip_extension(_last_segment(parsed)))
    if path_title:
        return path_title
    return re.sub(r"^www\.", "", parsed.hostname or "") or url


def _title_from_asset_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    parsed = _split_url(url)
    if parsed is None:
        return url
    return _last_segment(parsed) or parsed.hostname or url


def _title_from_text(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    first_line = text.split("\n", 1)[0]
    if len(first_line) <= MAX_TEXT_TITLE_LENGTH:
        return first_line
    return first_line[: MAX_TEXT_TITLE_LENGTH - 3] + "..."


def _fallback_title(bookmark: Bookmark) -> str:
    try:
        date = bookmark.created_date().strftime("%Y-%m-%d")
    except ValueError:
        date = bookmark.created_at
    return f"Bookmark-{bookmark.id}-{date}"
