"""httpx-based remote fetcher.

Downloads public files from the remote origin with a single GET request.
There are no retries: a failed download is reported as a miss and the
caller falls back to redirecting the client to the origin.
"""

import logging

import httpx

from stage_file_proxy.config import get_settings
from stage_file_proxy.entities import FetchResult, Found, NotFound
from stage_file_proxy.exceptions import FetchError

logger = logging.getLogger(__name__)


class HttpRemoteFetcher:
    """httpx implementation of the RemoteFetcher protocol.

    This class satisfies the RemoteFetcher protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        fetcher = HttpRemoteFetcher.create(timeout=5.0)

        result = await fetcher.fetch("https://prod.example.com/files/a.png")
        if isinstance(result, Found):
            print(len(result.content))
        ```
    """

    def __init__(
        self,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds. Defaults to settings.fetch_timeout.
            client: Preconfigured async client. If None, one is created lazily.
        """
        self._timeout = timeout or get_settings().fetch_timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(cls, timeout: float | None = None) -> "HttpRemoteFetcher":
        """Factory method to create HttpRemoteFetcher with defaults.

        Args:
            timeout: Request timeout in seconds. If None, uses settings.

        Returns:
            Configured HttpRemoteFetcher
        """
        return cls(timeout=timeout)

    @property
    def timeout(self) -> float:
        """Get the request timeout in seconds."""
        return self._timeout

    async def fetch(self, remote_url: str) -> FetchResult:
        """Download a file from the remote origin.

        Args:
            remote_url: Absolute URL of the file

        Returns:
            Found with the response body, or NotFound describing the failure
        """
        try:
            content = await self._get(remote_url)
        except FetchError as e:
            logger.warning("Remote fetch missed: %s", e)
            return NotFound(url=remote_url, reason=e.reason)
        return Found(url=remote_url, content=content)

    async def _get(self, remote_url: str) -> bytes:
        try:
            response = await self.client.get(remote_url)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise FetchError(remote_url, f"timed out after {self._timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise FetchError(remote_url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(remote_url, str(e) or type(e).__name__) from e
        return response.content

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
