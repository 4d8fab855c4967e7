"""Hoarder API client.

Wraps the two calls the sync needs:

    GET   {api_root}/bookmarks?page=&limit=[&archived=false][&favourited=true]
    PATCH {api_root}/bookmarks/{id}   body {"note": "..."}

Every request carries the API key as a bearer token.
"""

import logging
from dataclasses import dataclass, field

import httpx

from hoarder_sync.core.bookmark import Bookmark
from hoarder_sync.core.config import Config
from hoarder_sync.core.exceptions import ParseError, TransportError
from hoarder_sync.core.http_client import bearer_headers, create_client

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


@dataclass
class BookmarkPage:
    """One page of ``GET /bookmarks``."""

    bookmarks: list[Bookmark] = field(default_factory=list)
    total: int = 0
    has_more: bool = False


class HoarderClient:
    """Async client for the Hoarder bookmarks API.

    The underlying httpx client can be shared with the asset fetcher;
    a client passed in is not closed by aclose().
    """

    def __init__(self, config: Config, client: httpx.AsyncClient | None = None):
        self.config = config
        self._client = client or create_client()
        self._owns_client = client is None

    @property
    def http(self) -> httpx.AsyncClient:
        return self._client

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        return {**bearer_headers(self.config.api_key), "Content-Type": "application/json"}

    async def list_bookmarks(
        self,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        *,
        exclude_archived: bool = False,
        only_favorites: bool = False,
    ) -> BookmarkPage:
        """Fetch one page of bookmarks.

        Args:
            page: 1-based page number.
            limit: Page size.
            exclude_archived: Add ``archived=false``.
            only_favorites: Add ``favourited=true``.

        Raises:
            TransportError: On a non-2xx response or a network failure.
            ParseError: If the response body is not a bookmark page.
        """
        params: dict[str, str] = {"page": str(page), "limit": str(limit)}
        if exclude_archived:
            params["archived"] = "false"
        if only_favorites:
            params["favourited"] = "true"

        url = f"{self.config.api_root}/bookmarks"
        try:
            response = await self._client.get(url, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        if not response.is_success:
            raise TransportError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(f"Invalid JSON from {url}: {e}") from e
        if not isinstance(data, dict):
            raise ParseError(f"Expected an object from {url}, got {type(data).__name__}")

        bookmarks = [Bookmark.from_api(item) for item in data.get("bookmarks") or []]
        logger.debug("Fetched page %d: %d bookmarks", page, len(bookmarks))
        return BookmarkPage(
            bookmarks=bookmarks,
            total=int(data.get("total") or 0),
            has_more=bool(data.get("hasMore", False)),
        )

    async def update_note(self, bookmark_id: str, note: str) -> bool:
        """Replace the note of one bookmark.

        Never raises: failures are logged and reported as False so callers
        can carry on as if no update happened.
        """
        url = f"{self.config.api_root}/bookmarks/{bookmark_id}"
        try:
            response = await self._client.patch(url, json={"note": note}, headers=self._headers())
            if not response.is_success:
                raise TransportError(
                    f"HTTP error! status: {response.status_code}",
                    status_code=response.status_code,
                )
        except Exception as e:
            logger.warning(
                "Error updating bookmark note in Hoarder: %s", e,
                extra={"bookmark_id": bookmark_id},
            )
            return False

        logger.info("Updated note in Hoarder", extra={"bookmark_id": bookmark_id})
        return True
