"""HTTP client for talking to the Hoarder server.

Configures an httpx.AsyncClient with timeouts and identifying headers.
One client is shared by the API client and the asset fetcher so that
connections to the server are pooled.
"""

import httpx

from hoarder_sync.version import __version__

DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_READ_TIMEOUT = 30.0
DEFAULT_WRITE_TIMEOUT = 10.0
DEFAULT_POOL_TIMEOUT = 10.0

USER_AGENT = f"HoarderSync/{__version__}"


def get_timeout() -> httpx.Timeout:
    """Default connect/read/write/pool timeouts."""
    return httpx.Timeout(
        connect=DEFAULT_CONNECT_TIMEOUT,
        read=DEFAULT_READ_TIMEOUT,
        write=DEFAULT_WRITE_TIMEOUT,
        pool=DEFAULT_POOL_TIMEOUT,
    )


def get_headers() -> dict[str, str]:
    """Default headers sent with every request.

    No credentials here: the bearer token is added per request so it is
    never sent to third-party hosts.
    """
    return {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }


def create_client(
    *,
    timeout: httpx.Timeout | None = None,
    follow_redirects: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an async HTTP client with configured defaults.

    Args:
        timeout: Custom timeout configuration. Uses defaults if not provided.
        follow_redirects: Whether to follow redirects (default: True).
        transport: Optional transport, e.g. httpx.MockTransport in tests.

    Example:
        async with create_client() as client:
            response = await client.get("https://hoarder.example.com/api/v1/bookmarks")
    """
    return httpx.AsyncClient(
        timeout=timeout or get_timeout(),
        headers=get_headers(),
        follow_redirects=follow_redirects,
        transport=transport,
    )


def bearer_headers(api_key: str) -> dict[str, str]:
    """Authorization header for the Hoarder API."""
    return {"Authorization": f"Bearer {api_key}"}


def same_origin(url: str, other: str) -> bool:
    """True if both URLs share scheme, host and port.

    Unparseable URLs never match.
    """
    try:
        a, b = httpx.URL(url), httpx.URL(other)
    except (httpx.InvalidURL, TypeError):
        return False
    if not a.host or not b.host:
        return False
    return (a.scheme, a.host, _effective_port(a)) == (b.scheme, b.host, _effective_port(b))


def _effective_port(url: httpx.URL) -> int | None:
    if url.port is not None:
        return url.port
    return {"http": 80, "https": 443}.get(url.scheme)
