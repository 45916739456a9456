"""Response DTOs for API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field


class ResolveResponse(BaseModel):
    """Response DTO for external URL resolution."""

    path: str = Field(..., description="The requested logical path")
    url: str = Field(..., description="URL the file should be downloaded from")
    source: Literal["local", "remote"] = Field(
        ...,
        description="'local' if served from local storage, 'remote' for the origin",
    )


class ProxyStatsResponse(BaseModel):
    """Response DTO for proxy statistics."""

    storage_root: str = Field(..., description="Canonical local storage root")
    remote_instance: str = Field(..., description="Remote origin base URL")
    offload: bool = Field(..., description="Whether remote files are persisted locally")
    public_base_url: str = Field(..., description="Base URL for locally served files")
    in_flight: int = Field(..., description="Offloads currently running", ge=0)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    storage_healthy: bool = Field(..., description="Whether the storage root is usable")
