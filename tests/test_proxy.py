"""Tests for the serverless proxy adapter."""

import base64
import json
from unittest.mock import patch

import httpx
import pytest
import respx

from hearthrender.api import proxy
from hearthrender.api.proxy import handle_event, handler
from hearthrender.config import settings
from hearthrender.models.render import RenderRequest
from hearthrender.services.orchestrator import RenderPipeline

ART_BASE = "https://art.example.com/v1/orig"


class TestHandleEvent:
    @respx.mock
    async def test_success_response(self, pipeline: RenderPipeline, png_bytes: bytes) -> None:
        """A successful render is returned base64-encoded."""
        respx.get(f"{ART_BASE}/EX1_001.png").mock(
            return_value=httpx.Response(200, content=png_bytes)
        )
        event = {"queryStringParameters": {"template": "EX1_001", "resolution": "128"}}

        response = await handle_event(event, pipeline)

        assert response["statusCode"] == 200
        assert response["isBase64Encoded"] is True
        assert response["headers"] == {"Content-Type": "image/png"}
        body = base64.b64decode(response["body"])
        assert body.startswith(b"\x89PNG")

    @respx.mock
    async def test_body_is_base64_of_rendered_bytes(
        self, pipeline: RenderPipeline, png_bytes: bytes
    ) -> None:
        respx.get(f"{ART_BASE}/EX1_001.png").mock(
            return_value=httpx.Response(200, content=png_bytes)
        )
        direct = await pipeline.run(RenderRequest.from_params({"template": "EX1_001"}))

        response = await handle_event({"queryStringParameters": {"template": "EX1_001"}}, pipeline)

        assert response["body"] == base64.b64encode(direct.body).decode("ascii")

    @respx.mock
    async def test_artwork_404_response(self, pipeline: RenderPipeline) -> None:
        """Artwork 404 is reported as 502 texture_not_found with the URL and status."""
        url = f"{ART_BASE}/EX1_001.png"
        respx.get(url).mock(return_value=httpx.Response(404))

        response = await handle_event({"queryStringParameters": {"template": "EX1_001"}}, pipeline)

        assert response["statusCode"] == 502
        assert response["isBase64Encoded"] is False
        body = json.loads(response["body"])
        assert set(body) == {"error", "detail"}
        assert body["error"] == "texture_not_found"
        assert "404" in body["detail"]
        assert url in body["detail"]

    async def test_unknown_card_response(self, pipeline: RenderPipeline) -> None:
        response = await handle_event(
            {"queryStringParameters": {"template": "NOPE_001"}}, pipeline
        )

        assert response["statusCode"] == 404
        assert json.loads(response["body"])["error"] == "card_not_found"

    @respx.mock
    async def test_missing_query_parameters(
        self, pipeline: RenderPipeline, png_bytes: bytes
    ) -> None:
        """An event without parameters renders a random enUS card."""
        respx.get(url__startswith=ART_BASE).mock(
            return_value=httpx.Response(200, content=png_bytes)
        )

        response = await handle_event({"queryStringParameters": None}, pipeline)

        assert response["statusCode"] == 200

    @respx.mock
    async def test_unknown_locale_matches_default(
        self, pipeline: RenderPipeline, png_bytes: bytes, cache_dir
    ) -> None:
        respx.get(f"{ART_BASE}/EX1_001.png").mock(
            return_value=httpx.Response(200, content=png_bytes)
        )

        await handle_event(
            {"queryStringParameters": {"template": "EX1_001", "locale": "klingon"}}, pipeline
        )

        assert (cache_dir / "v1/render/latest/enUS/512x/EX1_001.png").exists()


    @respx.mock
    async def test_oversized_resolution_is_clamped(
        self,
        pipeline: RenderPipeline,
        engine,
        png_bytes: bytes,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(settings, "max_resolution", 128)
        respx.get(f"{ART_BASE}/EX1_001.png").mock(
            return_value=httpx.Response(200, content=png_bytes)
        )
        event = {"queryStringParameters": {"template": "EX1_001", "resolution": "100000000"}}

        response = await handle_event(event, pipeline)

        assert response["statusCode"] == 200
        assert engine.jobs[0].resolution == 128


class TestHandler:
    def test_handler_builds_pipeline_once(self, pipeline: RenderPipeline) -> None:
        with (
            patch.object(proxy, "_pipeline", None),
            patch.object(proxy, "build_pipeline", return_value=pipeline) as build,
        ):
            first = handler({"queryStringParameters": {"template": "NOPE_001"}}, None)
            second = handler({"queryStringParameters": {"template": "NOPE_001"}}, None)

        assert build.call_count == 1
        assert first["statusCode"] == 404
        assert second["statusCode"] == 404
