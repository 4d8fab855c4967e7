"""Configuration for Hoarder Sync.

Centralized configuration loading from environment variables with sensible
defaults. Values are validated at load time to fail fast on bad input.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlsplit

from hoarder_sync.core.exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class Config:
    """Sync settings loaded from environment variables.

    Connection:
        api_key: Hoarder API key, sent as a bearer token. An empty key is
            allowed here; the sync engine reports it as a failed pass.
        api_base_url: Server origin, e.g. https://hoarder.example.com.
        api_path: API prefix appended to the base URL.

    Vault layout:
        vault_dir: Root directory of the notes vault.
        sync_folder: Vault-relative folder for bookmark notes.
        attachments_folder: Vault-relative folder for downloaded images.

    Behaviour:
        sync_interval_minutes: Minutes between periodic passes.
        update_existing_files: Re-render notes that already exist.
        exclude_archived: Only fetch non-archived bookmarks.
        only_favorites: Only fetch favourited bookmarks.
        sync_notes_to_hoarder: Push edits of the Notes section back.
        excluded_tags: Tag names (case-insensitive) whose bookmarks are skipped.
        import_content: Add a Content section converted from the crawled HTML.

    Misc:
        state_file: JSON file holding the last-sync timestamp.
        log_level: Logging verbosity.
    """

    api_key: str = ""
    api_base_url: str = "https://api.hoarder.app"
    api_path: str = "/api/v1"

    vault_dir: Path = field(default_factory=lambda: Path("."))
    sync_folder: str = "Hoarder"
    attachments_folder: str = "Hoarder/attachments"

    sync_interval_minutes: int = 60
    update_existing_files: bool = False
    exclude_archived: bool = True
    only_favorites: bool = False
    sync_notes_to_hoarder: bool = True
    excluded_tags: list[str] = field(default_factory=list)
    import_content: bool = False

    state_file: Path = field(default_factory=lambda: Path("data/state.json"))
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if isinstance(self.vault_dir, str):
            self.vault_dir = Path(self.vault_dir)
        if isinstance(self.state_file, str):
            self.state_file = Path(self.state_file)

        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.log_level.upper() not in valid_log_levels:
            raise ConfigurationError(
                f"Invalid LOG_LEVEL '{self.log_level}'. "
                f"Must be one of: {', '.join(sorted(valid_log_levels))}"
            )
        self.log_level = self.log_level.upper()

        parsed = urlsplit(self.api_base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(
                f"HOARDER_API_BASE_URL must be an http(s) URL, got '{self.api_base_url}'"
            )
        self.api_base_url = self.api_base_url.rstrip("/")

        if self.api_path and not self.api_path.startswith("/"):
            self.api_path = "/" + self.api_path
        self.api_path = self.api_path.rstrip("/")

        if self.sync_interval_minutes < 1:
            raise ConfigurationError("HOARDER_SYNC_INTERVAL_MINUTES must be at least 1")

        self.sync_folder = self.sync_folder.strip("/")
        self.attachments_folder = self.attachments_folder.strip("/")
        if not self.sync_folder:
            raise ConfigurationError("HOARDER_SYNC_FOLDER must not be empty")

        self.excluded_tags = [t.strip() for t in self.excluded_tags if t.strip()]

    @property
    def api_root(self) -> str:
        """Base URL for API calls, e.g. https://host/api/v1."""
        return f"{self.api_base_url}{self.api_path}"

    def asset_url(self, asset_id: str) -> str:
        """URL of a server-hosted asset."""
        return f"{self.api_root}/assets/{asset_id}"


def load_config(*, require_api_key: bool = True) -> Config:
    """Load configuration from environment variables.

    Args:
        require_api_key: If True (default), raises ConfigurationError when
            HOARDER_API_KEY is missing. The CLI passes False so that a
            missing key surfaces as a failed sync pass instead.

    Returns:
        Config object with all settings loaded.

    Raises:
        ConfigurationError: If required config is missing or values are invalid.
    """
    api_key = os.environ.get("HOARDER_API_KEY", "")

    if require_api_key and not api_key:
        raise ConfigurationError(
            "HOARDER_API_KEY environment variable is required but not set"
        )

    def get_int(key: str, default: int) -> int:
        value = os.environ.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            raise ConfigurationError(f"{key} must be a valid integer, got '{value}'")

    def get_bool(key: str, default: bool) -> bool:
        value = os.environ.get(key)
        if value is None:
            return default
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        raise ConfigurationError(f"{key} must be a boolean (true/false), got '{value}'")

    def get_list(key: str) -> list[str]:
        value = os.environ.get(key, "")
        return [item.strip() for item in value.split(",") if item.strip()]

    return Config(
        api_key=api_key,
        api_base_url=os.environ.get("HOARDER_API_BASE_URL", "https://api.hoarder.app"),
        api_path=os.environ.get("HOARDER_API_PATH", "/api/v1"),
        vault_dir=Path(os.environ.get("HOARDER_VAULT_DIR", ".")),
        sync_folder=os.environ.get("HOARDER_SYNC_FOLDER", "Hoarder"),
        attachments_folder=os.environ.get(
            "HOARDER_ATTACHMENTS_FOLDER", "Hoarder/attachments"
        ),
        sync_interval_minutes=get_int("HOARDER_SYNC_INTERVAL_MINUTES", 60),
        update_existing_files=get_bool("HOARDER_UPDATE_EXISTING", False),
        exclude_archived=get_bool("HOARDER_EXCLUDE_ARCHIVED", True),
        only_favorites=get_bool("HOARDER_ONLY_FAVORITES", False),
        sync_notes_to_hoarder=get_bool("HOARDER_SYNC_NOTES", True),
        excluded_tags=get_list("HOARDER_EXCLUDED_TAGS"),
        import_content=get_bool("HOARDER_IMPORT_CONTENT", False),
        state_file=Path(os.environ.get("HOARDER_STATE_FILE", "data/state.json")),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
    )


# Singleton instance for convenience
_config: Config | None = None


def get_config(*, require_api_key: bool = True) -> Config:
    """Get the global configuration instance.

    Loads configuration on first call and caches it. Use reset_config()
    to force a reload.
    """
    global _config
    if _config is None:
        _config = load_config(require_api_key=require_api_key)
    return _config


def reset_config() -> None:
    """Reset the global configuration instance (used by tests)."""
    global _config
    _config = None
