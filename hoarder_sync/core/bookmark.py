"""Bookmark data model for Hoarder Sync.

This module defines the records read from the Hoarder API:
- TaggingStatus, TagOrigin, ContentKind, AssetType: enums for API strings
- Tag: one tag attached to a bookmark
- LinkContent, TextContent, AssetContent, UnknownContent: the content
  variants; exactly one of them is attached to each bookmark
- Bookmark: the main record

Bookmarks are created and mutated by the server. The sync engine only
reads them, except for ``note``, which it may overwrite with a local edit
for the duration of one pass.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from hoarder_sync.core.exceptions import ParseError


class TaggingStatus(str, Enum):
    """State of the server's automatic tagging for a bookmark."""

    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"
    NONE = "none"


class TagOrigin(str, Enum):
    """Who attached a tag: the server's tagger or the user."""

    AUTOMATED = "ai"
    MANUAL = "human"


class ContentKind(str, Enum):
    LINK = "link"
    TEXT = "text"
    ASSET = "asset"
    UNKNOWN = "unknown"


class AssetType(str, Enum):
    IMAGE = "image"
    PDF = "pdf"


@dataclass
class Tag:
    id: str
    name: str
    attached_by: TagOrigin = TagOrigin.MANUAL


@dataclass
class LinkContent:
    """A crawled web page."""

    kind: ClassVar[ContentKind] = ContentKind.LINK

    url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    html_content: Optional[str] = None
    image_url: Optional[str] = None
    image_asset_id: Optional[str] = None
    screenshot_asset_id: Optional[str] = None
    full_page_archive_asset_id: Optional[str] = None
    video_asset_id: Optional[str] = None
    favicon: Optional[str] = None
    crawled_at: Optional[str] = None


@dataclass
class TextContent:
    """A plain text snippet saved by the user."""

    kind: ClassVar[ContentKind] = ContentKind.TEXT

    text: Optional[str] = None
    source_url: Optional[str] = None


@dataclass
class AssetContent:
    """An uploaded image or PDF."""

    kind: ClassVar[ContentKind] = ContentKind.ASSET

    asset_type: Optional[AssetType] = None
    asset_id: Optional[str] = None
    file_name: Optional[str] = None
    source_url: Optional[str] = None


@dataclass
class UnknownContent:
    """Content of a type this client does not know about."""

    kind: ClassVar[ContentKind] = ContentKind.UNKNOWN


Content = Union[LinkContent, TextContent, AssetContent, UnknownContent]


@dataclass
class Bookmark:
    """A bookmark as returned by ``GET /bookmarks``.

    Required fields:
        id: Opaque bookmark identifier
        created_at: ISO-8601 creation timestamp

    ``note`` is the user-editable field reconciled with the local notes
    section; ``summary`` is computed by the server and read-only here.
    """

    id: str
    created_at: str
    title: Optional[str] = None
    archived: bool = False
    favourited: bool = False
    tagging_status: TaggingStatus = TaggingStatus.NONE
    note: Optional[str] = None
    summary: Optional[str] = None
    tags: list[Tag] = field(default_factory=list)
    content: Content = field(default_factory=UnknownContent)

    def created_date(self) -> datetime:
        """Creation time as an aware UTC datetime."""
        return parse_timestamp(self.created_at)

    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Bookmark":
        """Build a Bookmark from the API's camelCase JSON.

        Raises:
            ParseError: If ``id`` or ``createdAt`` is missing.
        """
        if not isinstance(data, dict):
            raise ParseError(f"Bookmark must be an object, got {type(data).__name__}")
        bookmark_id = data.get("id")
        created_at = data.get("createdAt")
        if not bookmark_id or not created_at:
            raise ParseError("Bookmark is missing 'id' or 'createdAt'")

        return cls(
            id=str(bookmark_id),
            created_at=str(created_at),
            title=data.get("title"),
            archived=bool(data.get("archived", False)),
            favourited=bool(data.get("favourited", False)),
            tagging_status=_enum_or(TaggingStatus, data.get("taggingStatus"), TaggingStatus.NONE),
            note=data.get("note"),
            summary=data.get("summary"),
            tags=[_parse_tag(t) for t in data.get("tags") or []],
            content=_parse_content(data.get("content") or {}),
        )


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    A trailing ``Z`` is accepted and naive values are taken as UTC.

    Raises:
        ValueError: If the value is not a valid timestamp.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_iso_timestamp(value: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` (UTC, millisecond precision)."""
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def _enum_or(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _parse_tag(data: dict[str, Any]) -> Tag:
    return Tag(
        id=str(data.get("id", "")),
        name=str(data.get("name", "")),
        attached_by=_enum_or(TagOrigin, data.get("attachedBy"), TagOrigin.MANUAL),
    )


def _parse_content(data: dict[str, Any]) -> Content:
    kind = _enum_or(ContentKind, data.get("type"), ContentKind.UNKNOWN)

    if kind is ContentKind.LINK:
        return LinkContent(
            url=data.get("url"),
            title=data.get("title"),
            description=data.get("description"),
            html_content=data.get("htmlContent"),
            image_url=data.get("imageUrl"),
            image_asset_id=data.get("imageAssetId"),
            screenshot_asset_id=data.get("screenshotAssetId"),
            full_page_archive_asset_id=data.get("fullPageArchiveAssetId"),
            video_asset_id=data.get("videoAssetId"),
            favicon=data.get("favicon"),
            crawled_at=data.get("crawledAt"),
        )
    if kind is ContentKind.TEXT:
        return TextContent(text=data.get("text"), source_url=data.get("sourceUrl"))
    if kind is ContentKind.ASSET:
        asset_type = data.get("assetType")
        return AssetContent(
            asset_type=_enum_or(AssetType, asset_type, None) if asset_type else None,
            asset_id=data.get("assetId"),
            file_name=data.get("fileName"),
            source_url=data.get("sourceUrl"),
        )
    return UnknownContent()
