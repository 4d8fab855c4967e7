"""Downloads images into the vault's attachments folder.

Attachments are content-addressed by asset id and title, so a second
fetch of the same asset is answered from disk and concurrent fetches of
the same asset write the same file.
"""

import logging
from typing import Optional

import httpx

from hoarder_sync.core.config import Config
from hoarder_sync.core.filenames import attachment_stem
from hoarder_sync.core.http_client import bearer_headers, same_origin
from hoarder_sync.core.vault import Vault

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp"})
DEFAULT_EXTENSION = "jpg"


def image_extension(url: str) -> str:
    """Extension of the URL's last path segment, limited to known image types."""
    try:
        path = httpx.URL(url).path
    except (httpx.InvalidURL, TypeError):
        path = url
    segment = path.rsplit("/", 1)[-1]
    if "." not in segment:
        return DEFAULT_EXTENSION
    extension = segment.rsplit(".", 1)[-1].lower()
    return extension if extension in ALLOWED_EXTENSIONS else DEFAULT_EXTENSION


class AssetFetcher:
    """Ensures a local copy of a remote image exists.

    Attributes:
        vault: Vault that receives the files.
        config: Supplies the attachments folder and API credentials.
    """

    def __init__(self, vault: Vault, config: Config, client: httpx.AsyncClient):
        self.vault = vault
        self.config = config
        self._client = client

    def target_path(self, url: str, asset_id: str, title: str) -> str:
        """Vault path an asset is stored at."""
        name = f"{asset_id}-{attachment_stem(title)}.{image_extension(url)}"
        folder = self.config.attachments_folder
        return f"{folder}/{name}" if folder else name

    async def fetch(self, url: str, asset_id: str, title: str) -> Optional[str]:
        """Download ``url`` unless it is already stored.

        The API key is only sent when ``url`` is on the Hoarder server's
        origin.

        Returns:
            The vault path of the stored file, or None if it could not be
            fetched or written. Never raises.
        """
        try:
            folder = self.config.attachments_folder
            if folder and not self.vault.exists(folder):
                self.vault.create_folder(folder)

            path = self.target_path(url, asset_id, title)
            if self.vault.exists(path):
                return path

            headers = {"Accept": "image/*,*/*;q=0.8"}
            if same_origin(url, self.config.api_base_url):
                headers.update(bearer_headers(self.config.api_key))

            response = await self._client.get(url, headers=headers)
            response.raise_for_status()
            self.vault.write_binary(path, response.content)
        except Exception as e:
            logger.warning("Error downloading image %s: %s", url, e, extra={"asset_id": asset_id})
            return None

        logger.debug("Downloaded %s to %s", url, path)
        return path
