from typing import Any

from fastapi import FastAPI
from fastapi.responses import Response

from stage_file_proxy.api.dependencies import HandlerDep, ServiceDep, build_lifespan
from stage_file_proxy.config import Settings, get_settings
from stage_file_proxy.dto import HealthCheckResponse, ProxyStatsResponse, ResolveResponse
from stage_file_proxy.protocols import RemoteFetcher


def create_app(
    settings: Settings | None = None,
    fetcher: RemoteFetcher | None = None,
) -> FastAPI:
    """Build the stage file proxy API.

    Args:
        settings: Configuration. If None, uses the cached environment settings.
        fetcher: Optional remote fetcher override.

    Returns:
        The FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Stage File Proxy API",
        description="Serves public files locally, falling back to a remote origin",
        version="0.1.0",
        lifespan=build_lifespan(settings, fetcher),
    )

    @app.get("/")
    async def root(proxy: ServiceDep) -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": proxy.name,
            "description": proxy.description,
            "version": "0.1.0",
            "endpoints": {
                "files": "/files/{path}",
                "resolve": "/resolve/{path}",
                "stats": "/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.get("/stats", response_model=ProxyStatsResponse)
    async def stats(handler: HandlerDep) -> ProxyStatsResponse:
        """Proxy configuration and runtime statistics."""
        return await handler.get_stats()

    @app.get("/files/{path:path}")
    async def serve_file(path: str, handler: HandlerDep) -> Response:
        """
        Serve a public file.

        Local files are returned directly. Missing files are fetched and
        stored first when offloading is enabled, otherwise the client is
        redirected to the remote origin.
        """
        return await handler.serve_file(path)

    @app.get("/resolve/{path:path}", response_model=ResolveResponse)
    async def resolve(path: str, handler: HandlerDep) -> ResolveResponse:
        """Get the URL a public file should be downloaded from."""
        return await handler.resolve_url(path)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "stage_file_proxy.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
