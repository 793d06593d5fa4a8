"""Tests for catalog download and pre-render jobs."""

import json
from pathlib import Path

import httpx
import pytest
import respx

from hearthrender.config import settings
from hearthrender.jobs.download_catalogs import run_download
from hearthrender.jobs.prerender import prerender_cards
from hearthrender.models.locale import LocaleCode
from hearthrender.services.card_database import download_catalog, load_catalog
from hearthrender.services.orchestrator import RenderPipeline

ART_BASE = "https://art.example.com/v1/orig"
CATALOG_SOURCE = "https://api.example.com/v1/latest"


class TestDownloadCatalog:
    @respx.mock
    async def test_writes_locale_file(self, tmp_path: Path) -> None:
        cards = [{"id": "EX1_001", "type": "MINION", "name": "Lichtwächterin"}]
        respx.get(f"{CATALOG_SOURCE}/deDE/cards.collectible.json").mock(
            return_value=httpx.Response(200, content=json.dumps(cards).encode())
        )

        path = await download_catalog(LocaleCode.DE_DE, tmp_path, CATALOG_SOURCE)

        assert path == tmp_path / "deDE.json"
        assert load_catalog(path) == cards

    @respx.mock
    async def test_http_error_raises(self, tmp_path: Path) -> None:
        respx.get(f"{CATALOG_SOURCE}/deDE/cards.collectible.json").mock(
            return_value=httpx.Response(500)
        )

        with pytest.raises(httpx.HTTPStatusError):
            await download_catalog(LocaleCode.DE_DE, tmp_path, CATALOG_SOURCE)


class TestRunDownload:
    @respx.mock
    async def test_reports_per_locale_result(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "catalog_dir", tmp_path)
        monkeypatch.setattr(settings, "catalog_source_url", CATALOG_SOURCE)
        respx.get(f"{CATALOG_SOURCE}/enUS/cards.collectible.json").mock(
            return_value=httpx.Response(200, content=b"[]")
        )
        respx.get(f"{CATALOG_SOURCE}/frFR/cards.collectible.json").mock(
            return_value=httpx.Response(404)
        )

        results = await run_download([LocaleCode.EN_US, LocaleCode.FR_FR])

        assert results == {"enUS": True, "frFR": False}
        assert (tmp_path / "enUS.json").exists()


class TestPrerenderCards:
    @respx.mock
    async def test_renders_and_stores(
        self, pipeline: RenderPipeline, png_bytes: bytes, cache_dir: Path
    ) -> None:
        respx.get(url__startswith=ART_BASE).mock(
            return_value=httpx.Response(200, content=png_bytes)
        )

        results = await prerender_cards(pipeline, ["EX1_001", "CS2_029"], "enUS", 128)

        assert results == {
            "EX1_001": "v1/render/latest/enUS/128x/EX1_001.png",
            "CS2_029": "v1/render/latest/enUS/128x/CS2_029.png",
        }
        assert (cache_dir / results["CS2_029"]).exists()

    @respx.mock
    async def test_failures_are_recorded_and_skipped(
        self, pipeline: RenderPipeline, png_bytes: bytes
    ) -> None:
        respx.get(f"{ART_BASE}/EX1_001.png").mock(return_value=httpx.Response(404))
        respx.get(f"{ART_BASE}/CS2_029.png").mock(
            return_value=httpx.Response(200, content=png_bytes)
        )

        results = await prerender_cards(pipeline, ["NOPE_001", "EX1_001", "CS2_029"], "enUS", 64)

        assert results["NOPE_001"] is None
        assert results["EX1_001"] is None
        assert results["CS2_029"] == "v1/render/latest/enUS/64x/CS2_029.png"
