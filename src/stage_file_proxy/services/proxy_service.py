"""Stage file proxy service for core business logic.

This service orchestrates public file requests by coordinating the path
resolver, the local store, the remote fetcher and the decision policy.
"""

import asyncio
import errno
import io
import logging
from functools import partial
from pathlib import Path
from typing import IO

from anyio import to_thread

from stage_file_proxy.config import Settings, get_settings
from stage_file_proxy.entities import (
    Action,
    ExternalUrl,
    FetchAndOffload,
    NotFound,
    RedirectRemote,
    ResolvedPath,
    ServeLocal,
)
from stage_file_proxy.exceptions import WriteError
from stage_file_proxy.protocols import LocalStore, RemoteFetcher
from stage_file_proxy.repositories import HttpRemoteFetcher, LocalFileStore
from stage_file_proxy.services.decision_policy import DecisionPolicy
from stage_file_proxy.services.path_resolver import PathResolver, encode_path

logger = logging.getLogger(__name__)


class StageFileProxyService:
    """Read-through access to public files backed by a remote origin.

    This service depends on PROTOCOLS, not concrete implementations:
    - LocalStore: the local public file tree
    - RemoteFetcher: downloads from the remote origin

    Concurrent requests for the same missing file share one fetch-and-write
    through an in-flight registry keyed by local path.

    Example:
        ```python
        from stage_file_proxy.services import StageFileProxyService

        proxy = StageFileProxyService.create()

        external = await proxy.resolve_external_url("public://logo.png")
        with await proxy.open_for_read("public://logo.png") as handle:
            data = handle.read()
        ```
    """

    NAME = "Public files from a production origin"
    DESCRIPTION = "Public local files served by the production webserver."
    READ_MODES = frozenset({"r", "rb"})

    def __init__(
        self,
        resolver: PathResolver,
        store: LocalStore,
        fetcher: RemoteFetcher,
        policy: DecisionPolicy,
        public_base_url: str = "/files",
    ) -> None:
        """Initialize the proxy service.

        Args:
            resolver: Maps logical paths to local paths and remote URLs.
            store: Local file storage.
            fetcher: Remote origin fetcher.
            policy: Decides between local, redirect and offload.
            public_base_url: Base URL under which local files are served.
        """
        self._resolver = resolver
        self._store = store
        self._fetcher = fetcher
        self._policy = policy
        self._public_base_url = public_base_url.rstrip("/")
        self._in_flight: dict[Path, asyncio.Future[bool]] = {}
        self._lock = asyncio.Lock()

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        fetcher: RemoteFetcher | None = None,
        store: LocalStore | None = None,
    ) -> "StageFileProxyService":
        """Factory method to create the service from settings.

        Args:
            settings: Configuration. If None, uses the cached environment settings.
            fetcher: Remote fetcher. If None, an HttpRemoteFetcher is created.
            store: Local store. If None, a LocalFileStore on the storage root.

        Returns:
            Configured StageFileProxyService
        """
        settings = settings or get_settings()
        store = store or LocalFileStore(settings.storage_root)
        return cls(
            resolver=PathResolver(settings.storage_root, settings.remote_origin),
            store=store,
            fetcher=fetcher or HttpRemoteFetcher(timeout=settings.fetch_timeout),
            policy=DecisionPolicy(store, offload=settings.offload),
            public_base_url=settings.public_base_url,
        )

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def description(self) -> str:
        return self.DESCRIPTION

    @property
    def offload(self) -> bool:
        return self._policy.offload

    @property
    def store(self) -> LocalStore:
        """Get the underlying store (for testing)."""
        return self._store

    @property
    def fetcher(self) -> RemoteFetcher:
        """Get the underlying fetcher (for testing)."""
        return self._fetcher

    def resolve(self, logical_path: str) -> ResolvedPath:
        """Resolve a logical path. Raises InvalidPathError for unsafe paths."""
        return self._resolver.resolve(logical_path)

    def decide(self, resolved: ResolvedPath) -> Action:
        """Choose how the resolved file should be served."""
        return self._policy.decide(resolved.local_path, resolved.remote_url)

    def local_url(self, resolved: ResolvedPath) -> str:
        """URL under which the local copy of a file is served."""
        return f"{self._public_base_url}/{encode_path(resolved.relative_path)}"

    async def ensure_local(self, logical_path: str) -> ServeLocal | RedirectRemote:
        """Make a file available locally if the policy allows it.

        Business logic:
        1. Resolve and decide
        2. On FetchAndOffload, fetch and persist (coalesced per path)
        3. Fall back to RedirectRemote when the offload did not succeed

        Args:
            logical_path: The requested file

        Returns:
            ServeLocal if the file is in local storage, RedirectRemote otherwise

        Raises:
            InvalidPathError: If the path is unsafe
        """
        return await self._ensure_local(self.resolve(logical_path))

    async def _ensure_local(self, resolved: ResolvedPath) -> ServeLocal | RedirectRemote:
        action = self.decide(resolved)
        if not isinstance(action, FetchAndOffload):
            return action

        if await self.offload_remote_asset(action):
            return ServeLocal(local_path=action.local_path)
        return RedirectRemote(remote_url=action.remote_url)

    async def resolve_external_url(self, logical_path: str) -> ExternalUrl:
        """Get the URL a client should download a public file from.

        Args:
            logical_path: The requested file

        Returns:
            ExternalUrl pointing at the local copy or the remote origin

        Raises:
            InvalidPathError: If the path is unsafe
        """
        resolved = self.resolve(logical_path)
        action = await self._ensure_local(resolved)
        if isinstance(action, ServeLocal):
            return ExternalUrl(url=self.local_url(resolved), source="local")
        return ExternalUrl(url=action.remote_url, source="remote")

    async def open_for_read(self, logical_path: str, mode: str = "rb") -> IO:
        """Open a public file, fetching it first when required.

        Only read modes consult the remote origin; any other mode opens the
        local path directly. With offloading disabled a missing file is read
        straight from the origin into memory and nothing is written locally.

        Args:
            logical_path: The requested file
            mode: File mode, "rb" by default

        Returns:
            An open file handle; the caller closes it

        Raises:
            InvalidPathError: If the path is unsafe
            FileNotFoundError: If neither local storage nor the origin has the file
        """
        resolved = self.resolve(logical_path)
        if mode not in self.READ_MODES:
            return self._store.open(resolved.local_path, mode)

        action = self.decide(resolved)
        if isinstance(action, RedirectRemote):
            return await self._open_remote(resolved, mode)

        if isinstance(action, FetchAndOffload) and not await self.offload_remote_asset(action):
            raise FileNotFoundError(
                errno.ENOENT, "Could not offload from the remote instance", str(resolved.local_path)
            )
        return self._store.open(resolved.local_path, mode)

    async def _open_remote(self, resolved: ResolvedPath, mode: str) -> IO:
        result = await self._fetcher.fetch(resolved.remote_url)
        if isinstance(result, NotFound):
            raise FileNotFoundError(errno.ENOENT, result.reason, resolved.remote_url)

        handle = io.BytesIO(result.content)
        if "b" in mode:
            return handle
        return io.TextIOWrapper(handle)

    async def offload_remote_asset(self, action: FetchAndOffload) -> bool:
        """Fetch a remote file and save it locally at the requested path.

        Callers asking for a path that is already being offloaded wait for
        the pending offload instead of starting another one.

        Args:
            action: The fetch-and-offload decision

        Returns:
            True if the file is now in local storage, False otherwise
        """
        key = action.local_path
        async with self._lock:
            pending = self._in_flight.get(key)
            if pending is None:
                pending = asyncio.ensure_future(self._fetch_and_write(action))
                self._in_flight[key] = pending
                pending.add_done_callback(partial(self._forget, key))
        return await asyncio.shield(pending)

    def _forget(self, key: Path, future: "asyncio.Future[bool]") -> None:
        if self._in_flight.get(key) is future:
            del self._in_flight[key]
        if not future.cancelled() and future.exception() is not None:
            logger.warning("Offload of %s failed: %s", key, future.exception())

    async def _fetch_and_write(self, action: FetchAndOffload) -> bool:
        result = await self._fetcher.fetch(action.remote_url)
        if isinstance(result, NotFound):
            logger.warning(
                "Could not offload %s: %s, redirecting to origin", action.remote_url, result.reason
            )
            return False

        try:
            await to_thread.run_sync(self._store.write, action.local_path, result.content)
        except WriteError as e:
            logger.warning("%s, redirecting to origin", e)
            return False

        logger.info("Offloaded %s (%d bytes)", action.local_path, len(result.content))
        return True

    def in_flight(self) -> int:
        """Number of offloads currently running."""
        return len(self._in_flight)

    def get_stats(self) -> dict:
        """Get proxy configuration and runtime statistics.

        Returns:
            Dictionary with proxy statistics
        """
        return {
            "storage_root": str(self._resolver.storage_root),
            "remote_instance": self._resolver.remote_origin,
            "offload": self.offload,
            "public_base_url": self._public_base_url,
            "in_flight": self.in_flight(),
        }

    async def is_healthy(self) -> bool:
        """Check if the local storage root is usable."""
        return self._store.health_check()

    async def close(self) -> None:
        """Release the remote fetcher's connections."""
        await self._fetcher.close()
