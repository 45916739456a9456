"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (httpx → another client, local disk → object store)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from stage_file_proxy.protocols import LocalStore, RemoteFetcher

    store: LocalStore = LocalFileStore(root)       # works
    fetcher: RemoteFetcher = HttpRemoteFetcher()  # works
    ```
"""

from .local_store import LocalStore
from .remote_fetcher import RemoteFetcher

__all__ = [
    "LocalStore",
    "RemoteFetcher",
]
