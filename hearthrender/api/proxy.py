"""
Serverless proxy adapter.

Translates API-gateway style events into render requests and pipeline
outcomes into proxy results:

    {"statusCode": 200, "headers": {...}, "body": <base64>, "isBase64Encoded": True}

Request-level failures become a JSON body {"error": ..., "detail": ...} with
the error's status code. Configuration errors are not translated; they are
raised to the runtime.
"""

import asyncio
import base64
import logging
from typing import Any

from hearthrender.config import settings
from hearthrender.models.failure import RenderError
from hearthrender.models.render import RenderRequest, RenderResult
from hearthrender.services.orchestrator import RenderPipeline, build_pipeline

logger = logging.getLogger(__name__)

_pipeline: RenderPipeline | None = None


def success_response(result: RenderResult) -> dict[str, Any]:
    """Proxy result carrying the image as base64."""
    return {
        "statusCode": 200,
        "headers": {"Content-Type": result.content_type},
        "body": base64.b64encode(result.body).decode("ascii"),
        "isBase64Encoded": True,
    }


def failure_response(error: RenderError) -> dict[str, Any]:
    """Proxy result carrying the failure body as JSON."""
    return {
        "statusCode": error.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": error.to_body().model_dump_json(),
        "isBase64Encoded": False,
    }


async def handle_event(event: dict[str, Any], pipeline: RenderPipeline) -> dict[str, Any]:
    """
    Run one proxy event through the pipeline.

    Raises:
        ConfigurationError: If the service cannot render at all
    """
    params = event.get("queryStringParameters") or {}
    request = RenderRequest.from_params(
        params, settings.default_resolution, settings.max_resolution
    )

    try:
        result = await pipeline.run(request)
    except RenderError as exc:
        return failure_response(exc)

    return success_response(result)


def get_pipeline() -> RenderPipeline:
    """
    Get the process pipeline, building it on first use.

    Fonts are registered during the first build only.
    """
    global _pipeline
    if _pipeline is None:
        # Each invocation runs its own event loop, so no shared HTTP client
        _pipeline = build_pipeline(settings)
    return _pipeline


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Serverless entry point."""
    return asyncio.run(handle_event(event, get_pipeline()))
