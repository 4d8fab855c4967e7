"""Shared test fixtures for Hoarder Sync.

Provides a temporary vault, a matching Config, API payload builders and
an httpx MockTransport-backed fake Hoarder server, so no test touches the
network or a real vault.
"""

import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from hoarder_sync.core.config import Config, reset_config
from hoarder_sync.core.vault import Vault

API_BASE = "https://hoarder.test"
API_ROOT = f"{API_BASE}/api/v1"


@pytest.fixture(autouse=True)
def _reset_config_singleton():
    """Keep the cached config from leaking between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def vault_dir(tmp_path: Path) -> Path:
    """Create a temporary vault directory.

    Args:
        tmp_path: pytest's built-in temp directory fixture.

    Returns:
        Path to the vault root (created but empty).
    """
    root = tmp_path / "vault"
    root.mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture
def vault(vault_dir: Path) -> Vault:
    return Vault(vault_dir)


@pytest.fixture
def config(vault_dir: Path, tmp_path: Path) -> Config:
    """Config pointing at the temporary vault and a fake server."""
    return Config(
        api_key="test-key",
        api_base_url=API_BASE,
        vault_dir=vault_dir,
        state_file=tmp_path / "state.json",
    )


def make_bookmark_data(
    bookmark_id: str = "bm1",
    *,
    created_at: str = "2024-01-05T10:00:00.000Z",
    title: str | None = "My Title",
    note: str | None = None,
    summary: str | None = None,
    tags: list[str] | None = None,
    favourited: bool = False,
    archived: bool = False,
    content: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a bookmark in the API's camelCase JSON shape."""
    return {
        "id": bookmark_id,
        "createdAt": created_at,
        "title": title,
        "archived": archived,
        "favourited": favourited,
        "taggingStatus": "success",
        "note": note,
        "summary": summary,
        "tags": [
            {"id": f"t{i}", "name": name, "attachedBy": "human"}
            for i, name in enumerate(tags or [])
        ],
        "content": content
        if content is not None
        else {"type": "link", "url": "https://example.com/posts/my-post"},
    }


@pytest.fixture
def bookmark_data():
    """Factory fixture for API bookmark payloads."""
    return make_bookmark_data


class FakeHoarderServer:
    """In-memory stand-in for the Hoarder API.

    Serves ``GET /bookmarks`` from ``self.bookmarks`` in pages, applies
    ``PATCH /bookmarks/{id}`` note updates, and records every request.
    """

    def __init__(self, bookmarks: list[dict[str, Any]] | None = None):
        self.bookmarks = bookmarks or []
        self.requests: list[httpx.Request] = []
        self.patches: list[tuple[str, str]] = []
        self.fail_list_status: int | None = None
        self.fail_list_on_page: int | None = None
        self.fail_patch_status: int | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "GET" and path == "/api/v1/bookmarks":
            page = int(request.url.params.get("page", "1"))
            limit = int(request.url.params.get("limit", "100"))
            if self.fail_list_status and (
                self.fail_list_on_page is None or self.fail_list_on_page == page
            ):
                return httpx.Response(self.fail_list_status, json={"error": "boom"})
            start = (page - 1) * limit
            chunk = self.bookmarks[start:start + limit]
            return httpx.Response(
                200,
                json={
                    "bookmarks": chunk,
                    "total": len(self.bookmarks),
                    "hasMore": start + limit < len(self.bookmarks),
                },
            )

        if request.method == "PATCH" and path.startswith("/api/v1/bookmarks/"):
            if self.fail_patch_status:
                return httpx.Response(self.fail_patch_status, json={"error": "nope"})
            bookmark_id = path.rsplit("/", 1)[-1]
            note = json.loads(request.content)["note"]
            self.patches.append((bookmark_id, note))
            for item in self.bookmarks:
                if item["id"] == bookmark_id:
                    item["note"] = note
            return httpx.Response(200, json={"id": bookmark_id, "note": note})

        if request.method == "GET" and "/assets/" in path:
            return httpx.Response(200, content=b"\x89PNG fake image")

        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport())


@pytest.fixture
def fake_server() -> FakeHoarderServer:
    return FakeHoarderServer()
