"""Change notifications for notes in the vault.

Wraps a watchdog Observer. Filesystem events arrive on the observer's
thread and are handed to the asyncio loop with call_soon_threadsafe, so
subscribers always run on the loop thread.
"""

import asyncio
import logging
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from hoarder_sync.core.vault import Vault

logger = logging.getLogger(__name__)

PathPredicate = Callable[[str], bool]
PathCallback = Callable[[str], None]


class _VaultEventHandler(FileSystemEventHandler):
    """Forwards modified files matching a predicate to a loop callback."""

    def __init__(
        self,
        vault: Vault,
        loop: asyncio.AbstractEventLoop,
        predicate: PathPredicate,
        callback: PathCallback,
    ):
        super().__init__()
        self.vault = vault
        self.loop = loop
        self.predicate = predicate
        self.callback = callback

    def _dispatch_path(self, src_path: str | bytes) -> None:
        if isinstance(src_path, bytes):
            src_path = src_path.decode()
        path = self.vault.relative(src_path)
        if path is None or not self.predicate(path):
            return
        if self.loop.is_closed():
            return
        self.loop.call_soon_threadsafe(self.callback, path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._dispatch_path(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Editors that save atomically write a temp file and rename it.
        if not event.is_directory:
            self._dispatch_path(event.dest_path)


class VaultEventSource:
    """Subscribe to modifications of notes in a vault.

    Usage:
        source = VaultEventSource(vault, loop)
        source.subscribe(watcher.accepts, watcher.on_document_changed)
        source.start()
        ...
        source.stop()
    """

    def __init__(self, vault: Vault, loop: asyncio.AbstractEventLoop):
        self.vault = vault
        self.loop = loop
        self._observer = Observer()
        self._started = False

    def subscribe(self, predicate: PathPredicate, callback: PathCallback) -> None:
        """Call ``callback(path)`` on the loop for every modified note
        whose vault path satisfies ``predicate``."""
        handler = _VaultEventHandler(self.vault, self.loop, predicate, callback)
        self._observer.schedule(handler, str(self.vault.root), recursive=True)

    def start(self) -> None:
        self._observer.start()
        self._started = True
        logger.info("Watching %s for note edits", self.vault.root)

    def stop(self) -> None:
        if not self._started:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._started = False
