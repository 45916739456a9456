#!/usr/bin/env python3
"""
Demo script for the stage file proxy.

This script runs the proxy against a temporary storage root and an
in-memory "production" origin, showing redirect and offload behaviour.
"""

import asyncio
import tempfile
from pathlib import Path

import httpx

from stage_file_proxy.config import Settings
from stage_file_proxy.exceptions import InvalidPathError
from stage_file_proxy.repositories import HttpRemoteFetcher
from stage_file_proxy.services import StageFileProxyService

ORIGIN = "https://prod.example.com"


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def origin_handler(request: httpx.Request) -> httpx.Response:
    """Pretend production origin: serves every .png, nothing else."""
    if request.url.path.endswith(".png"):
        return httpx.Response(200, content=b"\x89PNG from production")
    return httpx.Response(404)


def build_proxy(storage_root: Path, offload: bool) -> StageFileProxyService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(origin_handler))
    settings = Settings(
        remote_instance=ORIGIN,
        offload=offload,
        storage_root=str(storage_root),
    )
    return StageFileProxyService.create(
        settings=settings,
        fetcher=HttpRemoteFetcher(timeout=settings.fetch_timeout, client=client),
    )


async def demo_redirect(storage_root: Path) -> None:
    """Without offloading, missing files point at the origin."""
    print_section("Redirect to origin (offload disabled)")

    proxy = build_proxy(storage_root, offload=False)
    external = await proxy.resolve_external_url("sites/default/files/img.png")
    print(f"\n  URL:    {external.url}")
    print(f"  Source: {external.source}")
    await proxy.close()


async def demo_offload(storage_root: Path) -> None:
    """With offloading, the first request copies the file locally."""
    print_section("Fetch and offload (offload enabled)")

    proxy = build_proxy(storage_root, offload=True)
    for attempt in (1, 2):
        external = await proxy.resolve_external_url("sites/default/files/img.png")
        print(f"\n  Request {attempt}: {external.url} ({external.source})")

    with await proxy.open_for_read("sites/default/files/img.png") as handle:
        print(f"  Local copy: {handle.read()!r}")

    missing = await proxy.resolve_external_url("sites/default/files/report.pdf")
    print(f"\n  Not on origin: {missing.url} ({missing.source})")
    await proxy.close()


async def demo_invalid_path(storage_root: Path) -> None:
    """Unsafe paths never reach the filesystem or the network."""
    print_section("Unsafe paths")

    proxy = build_proxy(storage_root, offload=True)
    try:
        await proxy.resolve_external_url("../../etc/passwd")
    except InvalidPathError as e:
        print(f"\n  ✗ {e}")
    await proxy.close()


async def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        storage_root = Path(tmp) / "public"
        await demo_redirect(storage_root)
        await demo_offload(storage_root)
        await demo_invalid_path(storage_root)


if __name__ == "__main__":
    asyncio.run(main())
