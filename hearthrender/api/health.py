"""
Health check endpoints.

Provides liveness and readiness probes. Readiness requires registered fonts
and a catalog directory.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from hearthrender.api.render import get_pipeline
from hearthrender.services.orchestrator import RenderPipeline

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    fonts: str | None = None
    catalogs: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    pipeline: Annotated[RenderPipeline, Depends(get_pipeline)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns ready if fonts are registered and the catalog directory exists.
    Returns 503 otherwise.
    """
    fonts = "registered" if pipeline.fonts.registered else "missing"
    catalogs = "available" if pipeline.repository.catalog_dir.is_dir() else "missing"

    if fonts == "registered" and catalogs == "available":
        return HealthResponse(status="ready", fonts=fonts, catalogs=catalogs)

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(status="not ready", fonts=fonts, catalogs=catalogs)
