from hearthrender.models.card import CardRecord
from hearthrender.models.failure import (
    ArtworkNotFoundError,
    CacheWriteError,
    CardNotFoundError,
    CatalogError,
    ConfigurationError,
    FailureBody,
    FailureKind,
    FontAssetError,
    RenderError,
    RenderFailedError,
)
from hearthrender.models.font_profile import FontOffset, FontProfile
from hearthrender.models.locale import LocaleCode, resolve_locale
from hearthrender.models.render import (
    DEFAULT_RESOLUTION,
    MAX_RESOLUTION,
    RenderJob,
    RenderRequest,
    RenderResult,
    parse_resolution,
)

__all__ = [
    "ArtworkNotFoundError",
    "CacheWriteError",
    "CardNotFoundError",
    "CardRecord",
    "CatalogError",
    "ConfigurationError",
    "DEFAULT_RESOLUTION",
    "FailureBody",
    "FailureKind",
    "FontAssetError",
    "FontOffset",
    "FontProfile",
    "LocaleCode",
    "MAX_RESOLUTION",
    "RenderError",
    "RenderFailedError",
    "RenderJob",
    "RenderRequest",
    "RenderResult",
    "parse_resolution",
    "resolve_locale",
]
