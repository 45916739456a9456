"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from stage_file_proxy.config import Settings
from stage_file_proxy.handlers import FileHandler
from stage_file_proxy.protocols import RemoteFetcher
from stage_file_proxy.services import StageFileProxyService

logger = logging.getLogger(__name__)


def get_proxy_service(request: Request) -> StageFileProxyService:
    """Dependency injection for StageFileProxyService from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The StageFileProxyService instance from app.state

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "proxy_service", None)
    if service is None:
        raise RuntimeError("StageFileProxyService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> FileHandler:
    """Dependency injection for FileHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The FileHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "file_handler", None)
    if handler is None:
        raise RuntimeError("FileHandler not initialized. Check lifespan setup.")
    return handler


def build_lifespan(
    settings: Settings,
    fetcher: RemoteFetcher | None = None,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Create the lifespan context manager for a given configuration.

    Args:
        settings: Configuration the service is built from
        fetcher: Optional remote fetcher override (tests pass a mocked one)

    Returns:
        A lifespan callable for FastAPI
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initializes all layers and stores them in app.state.

        1. Service (business logic) - stored in app.state.proxy_service
        2. Handler (HTTP endpoints) - stored in app.state.file_handler

        Cleanup:
            Closes the remote fetcher and removes services from app.state
        """
        logging.basicConfig(
            level=settings.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        proxy_service = StageFileProxyService.create(settings=settings, fetcher=fetcher)
        app.state.proxy_service = proxy_service
        app.state.file_handler = FileHandler(proxy_service=proxy_service)

        logger.info("Stage file proxy initialized")
        logger.info("Storage root: %s", proxy_service.store.root)
        logger.info("Remote instance: %s", settings.remote_origin or "(not configured)")
        logger.info("Offload: %s", "enabled" if settings.offload else "disabled")

        yield

        await proxy_service.close()
        del app.state.file_handler
        del app.state.proxy_service
        logger.info("Stage file proxy shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[FileHandler, Depends(get_handler)]
ServiceDep = Annotated[StageFileProxyService, Depends(get_proxy_service)]
