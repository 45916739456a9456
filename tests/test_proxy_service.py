"""
Tests for the stage file proxy service.
"""

import asyncio
import gc

import pytest

from stage_file_proxy.entities import (
    ExternalUrl,
    FetchAndOffload,
    RedirectRemote,
    ServeLocal,
)
from stage_file_proxy.exceptions import InvalidPathError, WriteError
from stage_file_proxy.repositories import LocalFileStore
from stage_file_proxy.services import StageFileProxyService

pytestmark = pytest.mark.anyio

REMOTE = "https://prod.example.com"
IMG = "sites/default/files/img.png"


def remote_url(storage_root, relative=IMG):
    return f"{REMOTE}{storage_root.as_posix()}/{relative}"


class FailingStore(LocalFileStore):
    def write(self, local_path, content):
        raise WriteError(str(local_path), "Permission denied")


async def test_offload_fetches_once_and_serves_locally(make_service, fetcher, storage_root):
    proxy = make_service(offload=True)
    resolved = proxy.resolve(IMG)

    assert proxy.decide(resolved) == FetchAndOffload(
        remote_url=remote_url(storage_root), local_path=storage_root / IMG
    )

    action = await proxy.ensure_local(IMG)

    assert action == ServeLocal(local_path=storage_root / IMG)
    assert fetcher.calls == [remote_url(storage_root)]
    assert (storage_root / IMG).read_bytes() == b"remote-bytes"
    assert proxy.decide(resolved) == ServeLocal(local_path=storage_root / IMG)

    await proxy.ensure_local(IMG)
    assert len(fetcher.calls) == 1


async def test_redirect_without_offload(make_service, fetcher, storage_root):
    proxy = make_service(offload=False)

    action = await proxy.ensure_local(IMG)

    assert action == RedirectRemote(remote_url=remote_url(storage_root))
    assert fetcher.calls == []
    assert not (storage_root / IMG).exists()


@pytest.mark.parametrize("offload", [True, False])
async def test_existing_file_never_touches_origin(make_service, fetcher, storage_root, offload):
    (storage_root / "logo.png").write_bytes(b"local")
    proxy = make_service(offload=offload)

    external = await proxy.resolve_external_url("public://logo.png")

    assert external == ExternalUrl(url="/files/logo.png", source="local")
    assert fetcher.calls == []


async def test_external_url_after_offload_is_local(make_service, storage_root):
    proxy = make_service(offload=True, public_base_url="https://stage.example.com/files/")

    external = await proxy.resolve_external_url("my docs/report 1.pdf")

    assert external == ExternalUrl(
        url="https://stage.example.com/files/my%20docs/report%201.pdf", source="local"
    )


async def test_external_url_falls_back_to_remote_on_fetch_miss(make_service, fetcher, storage_root):
    fetcher.default = None
    proxy = make_service(offload=True)

    external = await proxy.resolve_external_url(IMG)

    assert external == ExternalUrl(url=remote_url(storage_root), source="remote")
    assert not (storage_root / IMG).exists()


async def test_write_failure_falls_back_to_remote(make_settings, fetcher, storage_root, caplog):
    proxy = StageFileProxyService.create(
        settings=make_settings(offload=True),
        fetcher=fetcher,
        store=FailingStore(storage_root),
    )

    external = await proxy.resolve_external_url(IMG)

    assert external.source == "remote"
    assert "Permission denied" in caplog.text


async def test_open_for_read_offloads_first(make_service, storage_root):
    proxy = make_service(offload=True)

    with await proxy.open_for_read(IMG) as handle:
        assert handle.read() == b"remote-bytes"

    assert (storage_root / IMG).is_file()


async def test_open_for_read_text_mode(make_service, storage_root):
    (storage_root / "robots.txt").write_text("User-agent: *\n")
    proxy = make_service(offload=False)

    with await proxy.open_for_read("robots.txt", mode="r") as handle:
        assert handle.read() == "User-agent: *\n"


async def test_open_for_read_reads_origin_without_offload(make_service, fetcher, storage_root):
    proxy = make_service(offload=False)

    with await proxy.open_for_read(IMG) as handle:
        assert handle.read() == b"remote-bytes"

    assert fetcher.calls == [remote_url(storage_root)]
    assert not (storage_root / IMG).exists()


async def test_open_for_read_origin_text_mode(make_service, fetcher, storage_root):
    fetcher.default = b"User-agent: *\n"
    proxy = make_service(offload=False)

    with await proxy.open_for_read("robots.txt", mode="r") as handle:
        assert handle.read() == "User-agent: *\n"

    assert not (storage_root / "robots.txt").exists()


async def test_open_for_read_missing_everywhere_without_offload(make_service, fetcher):
    fetcher.default = None
    proxy = make_service(offload=False)

    with pytest.raises(FileNotFoundError):
        await proxy.open_for_read(IMG)
    assert len(fetcher.calls) == 1


async def test_open_for_read_missing_on_origin(make_service, fetcher):
    fetcher.default = None
    proxy = make_service(offload=True)

    with pytest.raises(FileNotFoundError):
        await proxy.open_for_read(IMG)
    assert len(fetcher.calls) == 1


async def test_write_mode_skips_origin(make_service, fetcher, storage_root):
    proxy = make_service(offload=True)

    with await proxy.open_for_read("new.txt", mode="wb") as handle:
        handle.write(b"written locally")

    assert (storage_root / "new.txt").read_bytes() == b"written locally"
    assert fetcher.calls == []


async def test_invalid_path_is_rejected_before_io(make_service, fetcher, storage_root):
    proxy = make_service(offload=True)

    with pytest.raises(InvalidPathError):
        await proxy.resolve_external_url("../../etc/passwd")
    with pytest.raises(InvalidPathError):
        await proxy.open_for_read("../../etc/passwd")

    assert fetcher.calls == []
    assert list(storage_root.iterdir()) == []


async def test_concurrent_requests_share_one_fetch(make_service, fetcher, storage_root):
    fetcher.delay = 0.05
    proxy = make_service(offload=True)

    actions = await asyncio.gather(*(proxy.ensure_local(IMG) for _ in range(5)))

    assert all(action == ServeLocal(local_path=storage_root / IMG) for action in actions)
    assert len(fetcher.calls) == 1
    assert proxy.in_flight() == 0


async def test_concurrent_requests_for_different_files(make_service, fetcher):
    fetcher.delay = 0.01
    proxy = make_service(offload=True)

    await asyncio.gather(proxy.ensure_local("a.png"), proxy.ensure_local("b.png"))

    assert len(fetcher.calls) == 2


async def test_stats_and_health(make_service, storage_root):
    proxy = make_service(offload=True)

    stats = proxy.get_stats()

    assert stats["storage_root"] == str(storage_root)
    assert stats["remote_instance"] == REMOTE
    assert stats["offload"] is True
    assert stats["in_flight"] == 0
    assert await proxy.is_healthy() is True
    assert proxy.name == "Public files from a production origin"


async def test_close_releases_fetcher(make_service, fetcher):
    proxy = make_service()

    await proxy.close()

    assert fetcher.closed is True


async def test_relative_storage_root_fetches_public_path(make_service, fetcher, storage_root, monkeypatch):
    monkeypatch.chdir(storage_root.parent)
    proxy = make_service(offload=True, storage_root="public")

    action = await proxy.ensure_local("img.png")

    assert fetcher.calls == [f"{REMOTE}/public/img.png"]
    assert isinstance(action, ServeLocal)
    assert (storage_root / "img.png").read_bytes() == b"remote-bytes"


async def test_failed_offload_without_waiters_is_retrieved(make_service, fetcher, caplog):
    loop = asyncio.get_running_loop()
    reports = []
    previous_handler = loop.get_exception_handler()
    loop.set_exception_handler(lambda loop, context: reports.append(context))

    release = asyncio.Event()

    async def failing_fetch(remote_url):
        await release.wait()
        raise RuntimeError("origin exploded")

    fetcher.fetch = failing_fetch
    proxy = make_service(offload=True)

    try:
        waiter = asyncio.ensure_future(proxy.ensure_local(IMG))
        while proxy.in_flight() == 0:
            await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        release.set()
        while proxy.in_flight():
            await asyncio.sleep(0)
        await asyncio.sleep(0)
        gc.collect()
    finally:
        loop.set_exception_handler(previous_handler)

    assert not [c for c in reports if "never retrieved" in c.get("message", "")]
    assert "origin exploded" in caplog.text
