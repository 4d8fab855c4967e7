"""Pushes edits of a note's Notes section back to Hoarder.

The watcher receives "note changed" notifications (from the vault event
source), waits for the user to stop typing, and pushes the Notes section
of the last changed note. Once the push has settled it rewrites the
note's ``original_note`` marker so the sync engine sees no pending edit.

Timers:
- debounce: one pending handle per watcher; each notification replaces it
- write-back: one pending handle per note path
"""

import asyncio
import logging
from typing import Callable, Optional

from hoarder_sync.core.config import Config
from hoarder_sync.core.notes import extract_notes_section, read_note_snapshot
from hoarder_sync.core.notifier import notify
from hoarder_sync.core.vault import Vault
from hoarder_sync.sources.hoarder_client import HoarderClient

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 2.0
WRITEBACK_DELAY_SECONDS = 5.0

Notifier = Callable[..., bool]


class EditWatcher:
    """Debounced, event-driven note pusher.

    Attributes:
        vault: Vault holding the notes.
        client: Hoarder API client used for pushes.
        config: Supplies the sync folder and the notes-sync switch.
    """

    def __init__(
        self,
        vault: Vault,
        client: HoarderClient,
        config: Config,
        *,
        notifier: Notifier = notify,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        writeback_delay_seconds: float = WRITEBACK_DELAY_SECONDS,
    ):
        self.vault = vault
        self.client = client
        self.config = config
        self.notifier = notifier
        self.debounce_seconds = debounce_seconds
        self.writeback_delay_seconds = writeback_delay_seconds

        self.last_pushed_notes: Optional[str] = None
        self._debounce_handle: Optional[asyncio.TimerHandle] = None
        self._writeback_handles: dict[str, asyncio.TimerHandle] = {}
        self._tasks: set[asyncio.Task] = set()

    def accepts(self, path: str) -> bool:
        """True for Markdown notes inside the sync folder when notes sync is on."""
        return (
            self.config.sync_notes_to_hoarder
            and path.startswith(self.config.sync_folder + "/")
            and path.endswith(".md")
        )

    def on_document_changed(self, path: str) -> None:
        """Handle a change notification for ``path``.

        Must be called from the event loop thread. Restarts the debounce
        timer, so only the last notification of a burst is processed.
        """
        if not self.accepts(path):
            return
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(
            self.debounce_seconds, self._debounce_fired, path
        )

    def _debounce_fired(self, path: str) -> None:
        self._debounce_handle = None
        self._spawn(self.handle_modification, path)

    def _spawn(self, func, *args) -> None:
        task = asyncio.get_running_loop().create_task(func(*args))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def handle_modification(self, path: str) -> bool:
        """Push the Notes section of ``path`` if it was edited.

        Returns:
            True if a push happened and succeeded.
        """
        try:
            snapshot = read_note_snapshot(self.vault, path)
            current = snapshot.current_notes or ""
            original = snapshot.original_notes or ""

            # Our own marker write-back also triggers a change notification.
            if current == self.last_pushed_notes:
                return False

            if not snapshot.bookmark_id:
                logger.debug("No bookmark_id in %s, ignoring change", path)
                return False

            if current == original:
                return False

            logger.info(
                "Syncing notes to Hoarder",
                extra={"path": path, "bookmark_id": snapshot.bookmark_id},
            )
            if not await self.client.update_note(snapshot.bookmark_id, current):
                return False

            self.last_pushed_notes = current
            self._schedule_writeback(path, current)
            self.notifier("Notes synced to Hoarder", "done")
            return True

        except Exception:
            logger.exception("Error handling modification of %s", path)
            self.notifier("Failed to sync notes to Hoarder", "error")
            return False

    def _schedule_writeback(self, path: str, notes: str) -> None:
        previous = self._writeback_handles.pop(path, None)
        if previous is not None:
            previous.cancel()
        loop = asyncio.get_running_loop()
        self._writeback_handles[path] = loop.call_later(
            self.writeback_delay_seconds, self._writeback_fired, path, notes
        )

    def _writeback_fired(self, path: str, notes: str) -> None:
        self._writeback_handles.pop(path, None)
        self._spawn(self.write_back_marker, path, notes)

    async def write_back_marker(self, path: str, notes: str) -> bool:
        """Record ``notes`` as the note's ``original_note`` marker.

        Skipped when the Notes section changed again since the push; the
        next edit notification takes over then.

        Returns:
            True if the marker was rewritten.
        """
        try:
            latest = extract_notes_section(self.vault.read(path))
            if (latest or "") != notes:
                logger.debug("Notes changed again in %s, keeping marker", path)
                return False
            self.vault.set_frontmatter_field(path, "original_note", notes)
        except (OSError, ValueError) as e:
            logger.warning("Error updating original_note in %s: %s", path, e)
            return False
        return True

    def shutdown(self) -> None:
        """Cancel all pending timers and in-flight handler tasks."""
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None
        for handle in self._writeback_handles.values():
            handle.cancel()
        self._writeback_handles.clear()
        for task in list(self._tasks):
            task.cancel()
