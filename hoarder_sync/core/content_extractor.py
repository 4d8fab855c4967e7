"""Readable Markdown from crawled HTML.

Hoarder stores the crawled HTML of link bookmarks. When content import is
enabled the main article is located, stripped of page chrome, and
converted to Markdown for the note's Content section.
"""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup
from markdownify import ATX, markdownify

logger = logging.getLogger(__name__)

# CSS selectors for finding article content, in priority order
CONTENT_SELECTORS = [
    "article",
    '[role="main"]',
    "main",
    ".post-content",
    ".article-content",
    ".entry-content",
    ".markdown-body",
    "#content",
    ".content",
    ".post",
]

NOISE_SELECTORS = (
    "nav, footer, header, aside, form, .sidebar, .comments, .advertisement, "
    "script, style, noscript, iframe, svg, button"
)

_BLANK_LINES_RE = re.compile(r"\n{3,}")
_WHITESPACE_ONLY_LINE_RE = re.compile(r"^[ \t]+$", re.MULTILINE)


def html_to_markdown(html: str) -> Optional[str]:
    """Convert the main content of an HTML page to Markdown.

    Headings are ATX style, bullets use ``-`` and code blocks are fenced.

    Args:
        html: Raw page HTML.

    Returns:
        Markdown text, or None if no readable content was found.
    """
    if not html or not html.strip():
        return None

    soup = BeautifulSoup(html, "html.parser")

    content_element = None
    for selector in CONTENT_SELECTORS:
        content_element = soup.select_one(selector)
        if content_element:
            break
    if content_element is None:
        content_element = soup.body or soup

    for unwanted in content_element.select(NOISE_SELECTORS):
        unwanted.decompose()

    markdown = markdownify(
        str(content_element),
        heading_style=ATX,
        bullets="-",
        code_language="",
    )
    markdown = _WHITESPACE_ONLY_LINE_RE.sub("", markdown)
    markdown = _BLANK_LINES_RE.sub("\n\n", markdown).strip()
    if not markdown:
        logger.debug("No readable content in HTML (%d chars)", len(html))
        return None
    return markdown
