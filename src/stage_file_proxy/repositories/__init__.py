"""Repository layer for data access.

This layer abstracts external dependencies (the remote origin over HTTP,
the local public file tree) behind protocol-based interfaces. This enables:
- Easy swapping of implementations
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from stage_file_proxy.protocols import LocalStore, RemoteFetcher

from .http_remote_fetcher import HttpRemoteFetcher
from .local_file_store import LocalFileStore

__all__ = [
    "LocalStore",
    "RemoteFetcher",
    "HttpRemoteFetcher",
    "LocalFileStore",
]
