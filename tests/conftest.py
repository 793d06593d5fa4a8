import io
import json
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from hearthrender.models.render import RenderJob
from hearthrender.services.artwork import ArtworkFetcher
from hearthrender.services.card_database import CardRepository
from hearthrender.services.font_registry import FONT_ASSETS, FontRegistry
from hearthrender.services.orchestrator import RenderPipeline
from hearthrender.services.publisher import LocalObjectStore, Publisher

ART_BASE = "https://art.example.com/v1/orig"


class FakeEngine:
    """Rendering engine that records jobs and returns a flat bitmap."""

    def __init__(self) -> None:
        self.jobs: list[RenderJob] = []

    def render(self, job: RenderJob) -> Image.Image:
        self.jobs.append(job)
        return Image.new("RGBA", (job.resolution, job.resolution), (10, 20, 30, 255))


class IndexRandom:
    """Stand-in for random.Random whose choice() returns a fixed index."""

    def __init__(self, index: int = 0) -> None:
        self.index = index

    def choice(self, seq: list[str]) -> str:
        return seq[self.index % len(seq)]


@pytest.fixture
def sample_cards() -> list[dict[str, Any]]:
    """Sample locale catalog."""
    return [
        {
            "id": "EX1_001",
            "type": "MINION",
            "name": "Lightwarden",
            "text": "Whenever a character is healed, gain +2 Attack.",
            "cardClass": "NEUTRAL",
            "cost": 1,
            "attack": 1,
            "health": 2,
            "rarity": "RARE",
        },
        {
            "id": "CS2_029",
            "type": "SPELL",
            "name": "Fireball",
            "text": "Deal $6 damage.",
            "collectionText": "Deal 6 damage.",
            "cardClass": "MAGE",
            "cost": 4,
        },
        {
            "id": "EX1_130a",
            "type": "ENCHANTMENT",
            "name": "Noble Sacrifice",
            "text": "Secret: When an enemy attacks, summon a 2/1 defender.",
            "cardClass": "PALADIN",
        },
        {
            "id": "EX1_001",
            "type": "MINION",
            "name": "Lightwarden (duplicate)",
            "text": "Should never be returned.",
        },
    ]


@pytest.fixture
def catalog_dir(sample_cards: list[dict[str, Any]], tmp_path: Path) -> Path:
    """Catalog directory with enUS and zhTW catalogs."""
    directory = tmp_path / "catalogs"
    directory.mkdir()
    for locale in ("enUS", "zhTW"):
        with open(directory / f"{locale}.json", "w", encoding="utf-8") as f:
            json.dump(sample_cards, f)
    return directory


@pytest.fixture
def font_dir(tmp_path: Path) -> Path:
    """Font directory containing a placeholder file for every font asset."""
    directory = tmp_path / "hs-fonts"
    for asset in FONT_ASSETS:
        path = directory / asset.path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"not a real font")
    return directory


@pytest.fixture
def fonts(font_dir: Path) -> FontRegistry:
    """Registered font registry (isolated from the process-wide one)."""
    registry = FontRegistry()
    registry.register(font_dir)
    return registry


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), (200, 100, 50)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "render-cache"


@pytest.fixture
def pipeline(
    catalog_dir: Path,
    fonts: FontRegistry,
    engine: FakeEngine,
    cache_dir: Path,
) -> RenderPipeline:
    """Pipeline with a fake engine, local cache and mockable artwork host."""
    return RenderPipeline(
        repository=CardRepository(catalog_dir, rng=IndexRandom(0)),
        fetcher=ArtworkFetcher(base_url=ART_BASE, sentinel_id="XXX_001", timeout=5.0),
        engine=engine,
        publisher=Publisher(LocalObjectStore(cache_dir)),
        fonts=fonts,
        render_version="latest",
        render_timeout=5.0,
    )


@pytest.fixture
def index_rng() -> type[IndexRandom]:
    """Factory for index-controlled random choices."""
    return IndexRandom
