"""Renders bookmarks as Obsidian notes.

Each bookmark becomes a Markdown document with YAML frontmatter holding
its metadata, followed by the title, an optional image, the Summary,
Description and Content sections, the editable Notes section and a link
back to the page. Uses a Jinja2 template so the layout lives in one place.
"""

from pathlib import Path
from typing import Callable, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from hoarder_sync.core.asset_fetcher import AssetFetcher
from hoarder_sync.core.bookmark import (
    AssetContent,
    AssetType,
    Bookmark,
    LinkContent,
    TextContent,
    format_iso_timestamp,
)
from hoarder_sync.core.config import Config
from hoarder_sync.core.content_extractor import html_to_markdown
from hoarder_sync.output.yaml_format import escape_tag, escape_yaml_string

TEMPLATES_DIR = Path(__file__).parent / "templates"
NOTE_TEMPLATE = "bookmark.md.j2"

HtmlConverter = Callable[[str], Optional[str]]


def _create_jinja_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
        autoescape=False,
    )
    env.filters["yaml_escape"] = escape_yaml_string
    env.filters["yaml_tag"] = escape_tag
    return env


class NoteRenderer:
    """Serializes a bookmark into note text.

    Rendering is deterministic: the same bookmark and title produce the
    same text as long as downloaded images are already in the vault.
    """

    def __init__(
        self,
        config: Config,
        asset_fetcher: AssetFetcher,
        html_converter: HtmlConverter = html_to_markdown,
    ):
        """Initialize the renderer.

        Args:
            config: Supplies the API root for asset links and the
                content import flag.
            asset_fetcher: Downloads server-hosted images.
            html_converter: Turns crawled HTML into Markdown (or None).
        """
        self.config = config
        self.asset_fetcher = asset_fetcher
        self.html_converter = html_converter
        self._env = _create_jinja_env()

    async def render(self, bookmark: Bookmark, title: str) -> str:
        """Render ``bookmark`` as a complete note.

        May download an image into the attachments folder as a side effect.
        """
        content = bookmark.content
        url: Optional[str] = None
        description: Optional[str] = None
        full_page_archive = ""
        if isinstance(content, LinkContent):
            url = content.url
            description = content.description
            if content.full_page_archive_asset_id:
                full_page_archive = self.config.asset_url(content.full_page_archive_asset_id)
        elif isinstance(content, TextContent):
            url = content.source_url
            description = content.text
        elif isinstance(content, AssetContent):
            url = content.source_url

        include_content = (
            self.config.import_content
            and isinstance(content, LinkContent)
            and bool(content.html_content)
        )
        content_markdown = None
        if include_content:
            content_markdown = self.html_converter(content.html_content)

        context = {
            "bookmark_id": bookmark.id,
            "url": url,
            "title": title,
            "date": format_iso_timestamp(bookmark.created_date()),
            "full_page_archive": full_page_archive,
            "tags": bookmark.tag_names(),
            "note": bookmark.note,
            "summary": bookmark.summary,
            "image": await self._image_for(bookmark, title),
            "description": description,
            "include_content": include_content,
            "content_markdown": content_markdown,
            "visit_url": url if not isinstance(content, AssetContent) else None,
        }
        return self._env.get_template(NOTE_TEMPLATE).render(**context)

    async def _image_for(self, bookmark: Bookmark, title: str) -> Optional[str]:
        """Image to embed: a downloaded server asset or an external URL.

        Only server-hosted assets are downloaded; external image URLs are
        embedded as they are.
        """
        content = bookmark.content
        if isinstance(content, AssetContent):
            if content.asset_type is not AssetType.IMAGE:
                return None
            if content.asset_id:
                return await self.asset_fetcher.fetch(
                    self.config.asset_url(content.asset_id), content.asset_id, title
                )
            return content.source_url
        if isinstance(content, LinkContent):
            if content.image_asset_id:
                return await self.asset_fetcher.fetch(
                    self.config.asset_url(content.image_asset_id), content.image_asset_id, title
                )
            return content.image_url
        return None
