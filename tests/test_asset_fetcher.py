"""Tests for image downloads into the vault."""

import httpx
import pytest

from hoarder_sync.core.asset_fetcher import AssetFetcher, image_extension


class RecordingHandler:
    """MockTransport handler that records requests and serves fixed bytes."""

    def __init__(self, status: int = 200, body: bytes = b"image-bytes"):
        self.status = status
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, content=self.body)


@pytest.fixture
def handler():
    return RecordingHandler()


@pytest.fixture
def fetcher(vault, config, handler):
    return AssetFetcher(vault, config, httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestImageExtension:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://x.y/a/photo.PNG", "png"),
            ("https://x.y/a/photo.webp?size=large", "webp"),
            ("https://x.y/a/photo.jpeg", "jpeg"),
            ("https://x.y/a/doc.pdf", "jpg"),
            ("https://x.y/api/v1/assets/abc123", "jpg"),
            ("https://x.y/v1.2/asset", "jpg"),
        ],
    )
    def test_extension(self, url, expected):
        assert image_extension(url) == expected


class TestFetch:
    """Tests for AssetFetcher.fetch."""

    @pytest.mark.asyncio
    async def test_downloads_to_attachments(self, fetcher, vault, handler):
        url = "https://hoarder.test/api/v1/assets/img1"

        path = await fetcher.fetch(url, "img1", "My Title!!")

        assert path == "Hoarder/attachments/img1-My-Title.jpg"
        assert vault.resolve(path).read_bytes() == b"image-bytes"
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_second_fetch_uses_disk(self, fetcher, handler):
        url = "https://hoarder.test/api/v1/assets/img1"

        first = await fetcher.fetch(url, "img1", "T")
        second = await fetcher.fetch(url, "img1", "T")

        assert first == second
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_bearer_only_for_api_origin(self, fetcher, handler):
        await fetcher.fetch("https://hoarder.test/api/v1/assets/a", "a", "T")
        await fetcher.fetch("https://cdn.other.com/b.png", "b", "T")

        own, foreign = handler.requests
        assert own.headers["Authorization"] == "Bearer test-key"
        assert "Authorization" not in foreign.headers

    @pytest.mark.asyncio
    async def test_lookalike_host_gets_no_token(self, fetcher, handler):
        """A host that merely starts with the API origin is foreign."""
        await fetcher.fetch("https://hoarder.test.evil.com/x.png", "x", "T")

        assert "Authorization" not in handler.requests[0].headers

    @pytest.mark.asyncio
    async def test_http_error_returns_none(self, vault, config):
        failing = RecordingHandler(status=404)
        fetcher = AssetFetcher(
            vault, config, httpx.AsyncClient(transport=httpx.MockTransport(failing))
        )

        path = await fetcher.fetch("https://hoarder.test/api/v1/assets/a", "a", "T")

        assert path is None
        assert not vault.exists("Hoarder/attachments/a-T.jpg")

    @pytest.mark.asyncio
    async def test_network_error_returns_none(self, vault, config):
        def boom(request):
            raise httpx.ConnectError("down", request=request)

        fetcher = AssetFetcher(vault, config, httpx.AsyncClient(transport=httpx.MockTransport(boom)))

        assert await fetcher.fetch("https://hoarder.test/a.png", "a", "T") is None

    @pytest.mark.asyncio
    async def test_creates_attachments_folder(self, fetcher, vault):
        assert not vault.exists("Hoarder/attachments")

        await fetcher.fetch("https://hoarder.test/api/v1/assets/a", "a", "T")

        assert vault.exists("Hoarder/attachments")
