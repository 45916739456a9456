"""Remote fetcher protocol.

Defines the interface for anything that can download a file from the
remote origin.

Implementations can include:
- httpx over HTTP(S) (default)
- An in-memory fake for tests
"""

from typing import Protocol, runtime_checkable

from stage_file_proxy.entities import FetchResult


@runtime_checkable
class RemoteFetcher(Protocol):
    """Protocol for remote origin fetchers.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.
    """

    async def fetch(self, remote_url: str) -> FetchResult:
        """Download a file from the remote origin.

        Must not raise on network or HTTP errors: a failed download is
        reported as NotFound.

        Args:
            remote_url: Absolute URL of the file on the remote origin

        Returns:
            Found with the file bytes, or NotFound with the reason
        """
        ...

    async def close(self) -> None:
        """Release any underlying connections."""
        ...
