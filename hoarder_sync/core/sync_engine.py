"""Sync engine for Hoarder Sync.

Runs one synchronization pass end-to-end:
hoarder_client → title_resolver → filenames → note_renderer → vault

For every bookmark the engine decides whether to create the note, update
it, or leave it alone, and pushes local edits of the Notes section back
to Hoarder before re-rendering. There is no index: the note path derived
from (title, creation date) is the only bookkeeping.

Passes never overlap. Records inside a pass are handled one at a time,
so at most one request is in flight against the server.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from hoarder_sync.core.bookmark import Bookmark
from hoarder_sync.core.config import Config
from hoarder_sync.core.filenames import sanitize_filename
from hoarder_sync.core.logger import get_bookmark_logger
from hoarder_sync.core.notes import is_local_edit, read_note_snapshot
from hoarder_sync.core.state_manager import StateManager
from hoarder_sync.core.summary import SyncCounts, format_summary
from hoarder_sync.core.title_resolver import resolve_title
from hoarder_sync.core.vault import Vault
from hoarder_sync.output.note_renderer import NoteRenderer
from hoarder_sync.sources.hoarder_client import DEFAULT_PAGE_SIZE, HoarderClient

logger = logging.getLogger(__name__)

MSG_ALREADY_RUNNING = "Sync already in progress"
MSG_NO_API_KEY = "Hoarder API key not configured"

StateListener = Callable[[bool], None]


@dataclass
class SyncResult:
    """Outcome of a sync request.

    Attributes:
        success: False when the pass was rejected or failed.
        message: Human-readable summary or error.
        counts: What the pass did before it ended.
    """

    success: bool
    message: str
    counts: SyncCounts = field(default_factory=SyncCounts)


class SyncEngine:
    """Synchronizes Hoarder bookmarks into the vault.

    State machine: Idle → Running → Idle. A request made while Running is
    rejected immediately (no queueing). The Running flag is always cleared
    when a pass ends, whatever the outcome.
    """

    def __init__(
        self,
        config: Config,
        vault: Vault,
        client: HoarderClient,
        renderer: NoteRenderer,
        state_manager: Optional[StateManager] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        """Initialize the engine.

        Args:
            config: Sync settings
            vault: Where notes are written
            client: Hoarder API client
            renderer: Turns bookmarks into note text
            state_manager: Records the last-sync time (optional)
            page_size: Bookmarks requested per page
        """
        self.config = config
        self.vault = vault
        self.client = client
        self.renderer = renderer
        self.state_manager = state_manager
        self.page_size = page_size
        self._is_syncing = False
        self._listeners: list[StateListener] = []

    @property
    def is_syncing(self) -> bool:
        return self._is_syncing

    def add_state_listener(self, listener: StateListener) -> None:
        """Call ``listener(is_syncing)`` on every Idle/Running transition."""
        self._listeners.append(listener)

    def _set_syncing(self, value: bool) -> None:
        self._is_syncing = value
        for listener in self._listeners:
            try:
                listener(value)
            except Exception:
                logger.exception("Sync state listener failed")

    def note_path(self, bookmark: Bookmark, title: str) -> str:
        """Vault path of the note for ``bookmark``."""
        return f"{self.config.sync_folder}/{sanitize_filename(title, bookmark.created_at)}.md"

    async def sync(self) -> SyncResult:
        """Run one full pass.

        Returns:
            SyncResult; failures are reported in it, never raised.
        """
        if self._is_syncing:
            logger.info("Sync requested while a pass is running, rejecting")
            return SyncResult(success=False, message=MSG_ALREADY_RUNNING)

        if not self.config.api_key:
            return SyncResult(success=False, message=MSG_NO_API_KEY)

        self._set_syncing(True)
        counts = SyncCounts()
        try:
            folder = self.config.sync_folder
            if not self.vault.exists(folder):
                self.vault.create_folder(folder)

            page = 1
            has_more = True
            while has_more:
                result = await self.client.list_bookmarks(
                    page,
                    self.page_size,
                    exclude_archived=self.config.exclude_archived,
                    only_favorites=self.config.only_favorites,
                )
                has_more = result.has_more
                for bookmark in result.bookmarks:
                    await self._sync_bookmark(bookmark, counts)
                page += 1

            if self.state_manager is not None:
                self.state_manager.record_sync(datetime.now(timezone.utc))

            message = format_summary(counts)
            logger.info(
                "Sync complete: %s",
                message,
                extra={
                    "synced": counts.synced,
                    "skipped": counts.skipped,
                    "updated_in_remote": counts.updated_in_remote,
                    "excluded_by_tags": counts.excluded_by_tags,
                },
            )
            return SyncResult(success=True, message=message, counts=counts)

        except Exception as e:
            logger.exception("Error syncing bookmarks")
            return SyncResult(success=False, message=f"Error syncing: {e}", counts=counts)

        finally:
            self._set_syncing(False)

    def is_excluded(self, bookmark: Bookmark) -> bool:
        """True if a non-favourited bookmark carries an excluded tag."""
        if bookmark.favourited or not self.config.excluded_tags:
            return False
        excluded = {tag.lower() for tag in self.config.excluded_tags}
        return any(tag.name.lower() in excluded for tag in bookmark.tags)

    async def _sync_bookmark(self, bookmark: Bookmark, counts: SyncCounts) -> None:
        log = get_bookmark_logger(__name__, bookmark.id)

        if self.is_excluded(bookmark):
            log.debug("Excluded by tags")
            counts.excluded_by_tags += 1
            return

        title = resolve_title(bookmark)
        path = self.note_path(bookmark, title)

        if not self.vault.exists(path):
            content = await self.renderer.render(bookmark, title)
            self.vault.create(path, content)
            log.info("Created note", extra={"path": path})
            counts.synced += 1
            return

        if self.config.sync_notes_to_hoarder:
            if await self._push_local_edit(bookmark, path):
                counts.updated_in_remote += 1

        if self.config.update_existing_files:
            content = await self.renderer.render(bookmark, title)
            self.vault.write(path, content)
            log.debug("Updated note", extra={"path": path})
            counts.synced += 1
        else:
            counts.skipped += 1

    async def _push_local_edit(self, bookmark: Bookmark, path: str) -> bool:
        """Push an edited Notes section to Hoarder.

        On success the bookmark's note is replaced by the local text for
        the rest of the pass, so a re-render keeps the edit and records it
        as the new original.
        """
        snapshot = read_note_snapshot(self.vault, path)
        if not is_local_edit(snapshot.current_notes, snapshot.original_notes, bookmark.note):
            return False

        if not await self.client.update_note(bookmark.id, snapshot.current_notes):
            return False

        bookmark.note = snapshot.current_notes
        return True
