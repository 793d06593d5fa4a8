from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="HEARTHRENDER_")

    app_name: str = "HearthRender"
    debug: bool = False

    catalog_dir: Path = BASE_DIR / "data" / "catalogs"
    font_dir: Path = BASE_DIR / "hs-fonts"

    artwork_base_url: str = "https://art.hearthstonejson.com/v1/orig"
    catalog_source_url: str = "https://api.hearthstonejson.com/v1/latest"

    # Artwork target used when no card could be resolved at all
    sentinel_card_id: str = "XXX_001"

    render_version: str = "latest"
    default_resolution: int = 512
    # Larger requests are clamped; bounds the bitmap allocated per render
    max_resolution: int = 2048

    fetch_timeout: float = 30.0
    # None disables the bound; a stalled render then blocks its request
    render_timeout: float | None = 60.0

    cache_backend: Literal["none", "local", "http"] = "none"
    cache_dir: Path = BASE_DIR / "data" / "render-cache"
    cache_bucket_url: str = ""


settings = Settings()


# =============================================================================
# LOCALES
# =============================================================================

DEFAULT_LOCALE = "enUS"

SUPPORTED_LOCALES = (
    "enUS",
    "frFR",
    "deDE",
    "koKR",
    "esES",
    "esMX",
    "ruRU",
    "zhTW",
    "zhCN",
    "itIT",
    "plPL",
    "ptBR",
    "jaJP",
    "thTH",
)


# =============================================================================
# OUTPUT FORMAT
# =============================================================================

OUTPUT_FORMAT = "png"
OUTPUT_CONTENT_TYPE = "image/png"
