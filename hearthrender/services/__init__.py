"""
HearthRender services.

Catalog lookup, artwork retrieval, compositing and publishing for card renders.
"""

from hearthrender.services.artwork import ArtworkFetcher, decode_artwork
from hearthrender.services.card_database import (
    CardLookup,
    CardRepository,
    download_catalog,
    load_catalog,
)
from hearthrender.services.font_profiles import (
    BASE_FONT_PROFILE,
    FONT_PROFILE_OVERRIDES,
    resolve_font_profile,
)
from hearthrender.services.font_registry import (
    FONT_ASSETS,
    FontAsset,
    FontRegistry,
    font_registry,
    register_fonts,
)
from hearthrender.services.orchestrator import (
    RenderPipeline,
    RenderRun,
    RenderStage,
    build_pipeline,
)
from hearthrender.services.publisher import (
    HttpObjectStore,
    LocalObjectStore,
    ObjectStore,
    Publisher,
    StoreError,
    build_cache_key,
    create_object_store,
)
from hearthrender.services.renderer import PillowCardRenderer, RenderingEngine

__all__ = [
    "ArtworkFetcher",
    "BASE_FONT_PROFILE",
    "CardLookup",
    "CardRepository",
    "FONT_ASSETS",
    "FONT_PROFILE_OVERRIDES",
    "FontAsset",
    "FontRegistry",
    "HttpObjectStore",
    "LocalObjectStore",
    "ObjectStore",
    "PillowCardRenderer",
    "Publisher",
    "RenderPipeline",
    "RenderRun",
    "RenderStage",
    "RenderingEngine",
    "StoreError",
    "build_cache_key",
    "build_pipeline",
    "create_object_store",
    "decode_artwork",
    "download_catalog",
    "font_registry",
    "load_catalog",
    "register_fonts",
    "resolve_font_profile",
]
