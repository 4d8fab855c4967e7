"""Main Entry Point for Hoarder Sync.

Mirrors Hoarder bookmarks into a Markdown vault and pushes edits of each
note's Notes section back to Hoarder.

Usage:
    hoarder-sync                 # Run as daemon (periodic sync + edit watcher)
    hoarder-sync --no-watch      # Daemon without the edit watcher
    hoarder-sync --once          # Sync once and exit
    hoarder-sync --status        # Show when the last sync completed
    hoarder-sync --verbose       # Enable debug logging
"""

import argparse
import asyncio
import signal
import sys
from dataclasses import dataclass

import httpx

from hoarder_sync.core.asset_fetcher import AssetFetcher
from hoarder_sync.core.config import Config, get_config
from hoarder_sync.core.edit_watcher import EditWatcher
from hoarder_sync.core.http_client import create_client
from hoarder_sync.core.logger import get_logger, setup_logging
from hoarder_sync.core.notifier import notify_sync_result
from hoarder_sync.core.state_manager import StateManager
from hoarder_sync.core.sync_engine import SyncEngine, SyncResult
from hoarder_sync.core.vault import Vault
from hoarder_sync.output.note_renderer import NoteRenderer
from hoarder_sync.sources.hoarder_client import HoarderClient
from hoarder_sync.sources.vault_events import VaultEventSource
from hoarder_sync.version import __version__

logger = get_logger(__name__)

# Seconds to let an in-flight pass finish on shutdown
SHUTDOWN_GRACE_SECONDS = 30


@dataclass
class Components:
    """Everything a sync run needs, wired together."""

    http: httpx.AsyncClient
    client: HoarderClient
    vault: Vault
    engine: SyncEngine
    state_manager: StateManager

    async def aclose(self) -> None:
        await self.http.aclose()


def build_components(
    config: Config,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Components:
    """Create the shared HTTP client and the objects built on it.

    Args:
        config: Application configuration.
        transport: Optional httpx transport (tests use MockTransport).
    """
    http = create_client(transport=transport)
    vault = Vault(config.vault_dir)
    client = HoarderClient(config, http)
    fetcher = AssetFetcher(vault, config, http)
    renderer = NoteRenderer(config, fetcher)
    state_manager = StateManager(config.state_file)
    engine = SyncEngine(config, vault, client, renderer, state_manager)
    return Components(
        http=http,
        client=client,
        vault=vault,
        engine=engine,
        state_manager=state_manager,
    )


async def run_once(config: Config) -> SyncResult:
    """Run a single sync pass and notify its outcome.

    Args:
        config: Application configuration.

    Returns:
        SyncResult of the pass.
    """
    components = build_components(config)
    try:
        result = await components.engine.sync()
    finally:
        await components.aclose()

    notify_sync_result(result.success, result.message)
    return result


async def _sync_and_report(engine: SyncEngine) -> SyncResult:
    result = await engine.sync()
    if result.success:
        logger.info(result.message)
    else:
        logger.error("Sync failed: %s", result.message)
    notify_sync_result(result.success, result.message)
    return result


async def run_daemon(
    config: Config,
    *,
    watch: bool = True,
    shutdown_event: asyncio.Event | None = None,
) -> None:
    """Run as a daemon until SIGINT/SIGTERM.

    Syncs at startup and then every ``sync_interval_minutes``. With
    ``watch`` enabled, edits of notes in the sync folder are pushed to
    Hoarder as they happen.

    Args:
        config: Application configuration.
        watch: Start the vault edit watcher.
        shutdown_event: Event that stops the daemon (created if omitted).
    """
    shutdown_event = shutdown_event or asyncio.Event()
    loop = asyncio.get_running_loop()

    def signal_handler(sig: int) -> None:
        logger.info("Received signal %s, initiating graceful shutdown...", sig)
        shutdown_event.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))
        except (NotImplementedError, RuntimeError):
            # No signal support on this loop (Windows, or not the main thread)
            pass

    components = build_components(config)
    watcher: EditWatcher | None = None
    events: VaultEventSource | None = None

    if watch and config.sync_notes_to_hoarder:
        components.vault.create_folder(config.sync_folder)
        watcher = EditWatcher(components.vault, components.client, config)
        events = VaultEventSource(components.vault, loop)
        events.subscribe(watcher.accepts, watcher.on_document_changed)
        events.start()

    interval = config.sync_interval_minutes * 60
    logger.info("Starting daemon mode (sync interval: %d min)", config.sync_interval_minutes)

    current_task: asyncio.Task | None = None
    try:
        while not shutdown_event.is_set():
            current_task = asyncio.create_task(_sync_and_report(components.engine))
            try:
                await current_task
                current_task = None
            except asyncio.CancelledError:
                logger.info("Sync pass cancelled")
                break

            # Wait for next interval or shutdown signal
            try:
                await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
                break
            except asyncio.TimeoutError:
                pass

    finally:
        if current_task and not current_task.done():
            logger.info("Waiting for in-progress sync to complete...")
            try:
                await asyncio.wait_for(current_task, timeout=SHUTDOWN_GRACE_SECONDS)
            except asyncio.TimeoutError:
                logger.warning("In-progress sync timed out, cancelling...")
                current_task.cancel()
                try:
                    await current_task
                except asyncio.CancelledError:
                    pass

        if events is not None:
            events.stop()
        if watcher is not None:
            watcher.shutdown()
        await components.aclose()
        logger.info("Daemon shutdown complete")


def print_status(config: Config) -> None:
    """Print the last-sync time and the main settings."""
    last_sync = StateManager(config.state_file).get_last_sync()
    print("=== Hoarder Sync ===")
    print(f"Server:      {config.api_root}")
    print(f"Vault:       {config.vault_dir}")
    print(f"Folder:      {config.sync_folder}")
    print(f"Interval:    {config.sync_interval_minutes} min")
    print(f"Last sync:   {last_sync.isoformat() if last_sync else 'never'}")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="hoarder-sync",
        description="Sync Hoarder bookmarks into Markdown notes.",
        epilog="By default, runs as a daemon syncing every HOARDER_SYNC_INTERVAL_MINUTES.",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Sync once and exit (instead of daemon mode)",
    )

    parser.add_argument(
        "--status",
        action="store_true",
        help="Show when the last sync completed and exit",
    )

    parser.add_argument(
        "--no-watch",
        action="store_true",
        help="In daemon mode, do not watch the vault for note edits",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def main(args: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    parser = create_argument_parser()
    parsed_args = parser.parse_args(args)

    # A missing API key is reported by the sync pass itself
    try:
        config = get_config(require_api_key=False)
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    log_level = "DEBUG" if parsed_args.verbose else config.log_level
    setup_logging(log_level)

    if parsed_args.status:
        print_status(config)
        return 0

    if parsed_args.once:
        logger.info("Running in once mode")
        result = asyncio.run(run_once(config))
        print(result.message)
        return 0 if result.success else 1

    logger.info("Running in daemon mode")
    try:
        asyncio.run(run_daemon(config, watch=not parsed_args.no_watch))
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted during startup")
        return 0


if __name__ == "__main__":
    sys.exit(main())
