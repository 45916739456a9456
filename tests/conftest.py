"""Shared fixtures for the stage file proxy tests."""

import asyncio
from pathlib import Path

import pytest

from stage_file_proxy.config import Settings
from stage_file_proxy.entities import FetchResult, Found, NotFound
from stage_file_proxy.repositories import LocalFileStore
from stage_file_proxy.services import StageFileProxyService

REMOTE = "https://prod.example.com"


class FakeFetcher:
    """In-memory RemoteFetcher that records every requested URL."""

    def __init__(self, default: bytes | None = None, delay: float = 0.0) -> None:
        self.default = default
        self.delay = delay
        self.responses: dict[str, bytes] = {}
        self.calls: list[str] = []
        self.closed = False

    async def fetch(self, remote_url: str) -> FetchResult:
        self.calls.append(remote_url)
        if self.delay:
            await asyncio.sleep(self.delay)
        content = self.responses.get(remote_url, self.default)
        if content is None:
            return NotFound(url=remote_url, reason="HTTP 404")
        return Found(url=remote_url, content=content)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    root = tmp_path / "public"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher(default=b"remote-bytes")


@pytest.fixture
def make_settings(storage_root: Path):
    """Build Settings pointing at the temporary storage root."""

    def _make(**overrides) -> Settings:
        values = {
            "remote_instance": REMOTE,
            "offload": True,
            "storage_root": str(storage_root),
            "public_base_url": "/files",
            "fetch_timeout": 5.0,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def make_service(make_settings, fetcher: FakeFetcher):
    """Build a StageFileProxyService backed by the fake fetcher."""

    def _make(**overrides) -> StageFileProxyService:
        return StageFileProxyService.create(settings=make_settings(**overrides), fetcher=fetcher)

    return _make


@pytest.fixture
def store(storage_root: Path) -> LocalFileStore:
    return LocalFileStore(storage_root)
