"""HTTP handlers for public file requests.

Handlers convert between service results and HTTP responses.
They handle HTTP concerns like status codes, redirects and error handling.
"""

import logging

from fastapi import HTTPException, status
from fastapi.responses import FileResponse, RedirectResponse, Response

from stage_file_proxy.dto import HealthCheckResponse, ProxyStatsResponse, ResolveResponse
from stage_file_proxy.entities import ServeLocal
from stage_file_proxy.exceptions import InvalidPathError
from stage_file_proxy.services import StageFileProxyService

logger = logging.getLogger(__name__)


class FileHandler:
    """HTTP handlers for public file requests.

    This handler delegates business logic to StageFileProxyService
    and handles HTTP-specific concerns like:
    - Serving local files or redirecting to the remote origin
    - Mapping unsafe paths to 404
    - Error handling and responses

    Example:
        ```python
        proxy = StageFileProxyService.create()
        handler = FileHandler(proxy_service=proxy)

        @app.get("/files/{path:path}")
        async def serve_file(path: str):
            return await handler.serve_file(path)
        ```
    """

    def __init__(self, proxy_service: StageFileProxyService) -> None:
        """Initialize the file handler.

        Args:
            proxy_service: The proxy service for business logic (required).
        """
        self._proxy = proxy_service

    async def serve_file(self, path: str) -> Response:
        """Handle GET /files/{path} requests.

        Args:
            path: Logical path of the public file

        Returns:
            FileResponse for local files, 307 redirect to the remote origin otherwise

        Raises:
            HTTPException: 404 for unsafe paths, 500 on unexpected errors
        """
        try:
            action = await self._proxy.ensure_local(path)
        except InvalidPathError as e:
            logger.info("Rejected %s", e)
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found") from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to serve file: {e}",
            ) from e

        if isinstance(action, ServeLocal):
            return FileResponse(action.local_path)

        return RedirectResponse(
            url=action.remote_url,
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        )

    async def resolve_url(self, path: str) -> ResolveResponse:
        """Handle GET /resolve/{path} requests.

        Args:
            path: Logical path of the public file

        Returns:
            ResolveResponse with the external URL and its source

        Raises:
            HTTPException: 404 for unsafe paths, 500 on unexpected errors
        """
        try:
            external = await self._proxy.resolve_external_url(path)
        except InvalidPathError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found") from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to resolve URL: {e}",
            ) from e

        return ResolveResponse(path=path, url=external.url, source=external.source)

    async def get_stats(self) -> ProxyStatsResponse:
        """Handle GET /stats requests."""
        return ProxyStatsResponse(**self._proxy.get_stats())

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests.

        Returns:
            HealthCheckResponse with health status
        """
        is_healthy = await self._proxy.is_healthy()

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            storage_healthy=is_healthy,
        )
