"""Persistent sync state.

The notes themselves are the sync's durable state; this file only keeps
what is shown to the user, i.e. when the last pass completed.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class StateManager:
    """Stores the last-sync timestamp in a JSON file.

    The file is created on first save. A corrupt file is treated as empty
    rather than blocking the sync.

    Attributes:
        state_file: Path to the JSON state file.
    """

    def __init__(self, state_file: str | Path):
        self.state_file = Path(state_file)
        self._state: dict[str, Any] = {}
        self._loaded = False

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def load(self) -> dict[str, Any]:
        """Load state from the JSON file (empty state if it is missing)."""
        self._state = {"last_sync": None}
        if self.state_file.exists():
            try:
                with open(self.state_file, encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    self._state.update(data)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Ignoring unreadable state file %s: %s", self.state_file, e)
        self._loaded = True
        return self._state

    def save(self) -> None:
        """Write state to the JSON file, creating parent directories."""
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.state_file, "w", encoding="utf-8") as f:
            json.dump(self._state, f, indent=2, ensure_ascii=False)

    def record_sync(self, when: datetime | None = None) -> None:
        """Remember that a pass completed at ``when`` (default: now)."""
        self._ensure_loaded()
        when = when or datetime.now(timezone.utc)
        self._state["last_sync"] = when.isoformat()
        self.save()

    def get_last_sync(self) -> datetime | None:
        """Completion time of the last successful pass, if any."""
        self._ensure_loaded()
        value = self._state.get("last_sync")
        if not value:
            return None
        try:
            return datetime.fromisoformat(value)
        except (TypeError, ValueError):
            return None
