"""
Render API endpoint.

Serves rendered card images as PNG.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from hearthrender.config import settings
from hearthrender.models.failure import FailureBody, RenderError
from hearthrender.models.render import RenderRequest
from hearthrender.services.orchestrator import RenderPipeline

router = APIRouter(tags=["render"])


def get_pipeline(request: Request) -> RenderPipeline:
    """Pipeline created by the application lifespan."""
    pipeline: RenderPipeline = request.app.state.pipeline
    return pipeline


@router.get(
    "/render",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}},
        404: {"model": FailureBody},
        500: {"model": FailureBody},
        502: {"model": FailureBody},
    },
)
async def render_card(
    request: Request,
    pipeline: Annotated[RenderPipeline, Depends(get_pipeline)],
) -> Response:
    """
    Render a card image.

    Query parameters: template (card id, random when omitted), resolution
    (default 512), premium ("true" for golden), locale (default enUS).
    """
    render_request = RenderRequest.from_params(
        dict(request.query_params), settings.default_resolution, settings.max_resolution
    )

    try:
        result = await pipeline.run(render_request)
    except RenderError as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_body().model_dump(mode="json"),
        )

    headers = {"X-Cache-Key": result.cache_key} if result.cache_key else None
    return Response(content=result.body, media_type=result.content_type, headers=headers)
