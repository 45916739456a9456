"""Stage File Proxy - serve public files locally, backed by a remote origin.

This package provides a layered architecture for read-through public files:

Layers:
    - protocols: Interface contracts (LocalStore, RemoteFetcher)
    - repositories: Data access implementations (local disk, httpx)
    - services: Business logic (path resolution, decision policy, offloading)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from stage_file_proxy.services import StageFileProxyService

    proxy = StageFileProxyService.create()
    external = await proxy.resolve_external_url("public://logo.png")
    ```

For HTTP API:
    ```python
    from stage_file_proxy.api.app import app, create_app
    ```
"""

from stage_file_proxy.config import Settings, get_settings
from stage_file_proxy.entities import (
    ExternalUrl,
    FetchAndOffload,
    Found,
    NotFound,
    RedirectRemote,
    ResolvedPath,
    ServeLocal,
)
from stage_file_proxy.exceptions import (
    FetchError,
    InvalidPathError,
    StageFileProxyError,
    WriteError,
)
from stage_file_proxy.handlers import FileHandler
from stage_file_proxy.protocols import LocalStore, RemoteFetcher
from stage_file_proxy.repositories import HttpRemoteFetcher, LocalFileStore
from stage_file_proxy.services import DecisionPolicy, PathResolver, StageFileProxyService

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Protocols (interfaces)
    "LocalStore",
    "RemoteFetcher",
    # Services (business logic)
    "StageFileProxyService",
    "PathResolver",
    "DecisionPolicy",
    # Handlers (HTTP)
    "FileHandler",
    # Repositories (data access)
    "HttpRemoteFetcher",
    "LocalFileStore",
    # Entities (domain models)
    "ResolvedPath",
    "ServeLocal",
    "RedirectRemote",
    "FetchAndOffload",
    "Found",
    "NotFound",
    "ExternalUrl",
    # Errors
    "StageFileProxyError",
    "InvalidPathError",
    "FetchError",
    "WriteError",
]
