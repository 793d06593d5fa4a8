import re
from collections.abc import Mapping
from dataclasses import dataclass

from PIL import Image

from hearthrender.models.card import CardRecord
from hearthrender.models.font_profile import FontProfile
from hearthrender.models.locale import LocaleCode, resolve_locale

DEFAULT_RESOLUTION = 512
MAX_RESOLUTION = 2048

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_resolution(
    value: str | None,
    default: int = DEFAULT_RESOLUTION,
    maximum: int = MAX_RESOLUTION,
) -> int:
    """
    Parse the resolution query parameter.

    Reads a leading integer the way browsers' parseInt does ("300px" -> 300).
    Absent, unparsable or non-positive values fall back to the default;
    values above maximum are clamped to it.
    """
    if not value:
        return default
    match = _LEADING_INT.match(value)
    if match is None:
        return default
    resolution = int(match.group(1))
    if resolution <= 0:
        return default
    return min(resolution, maximum)


@dataclass(frozen=True, slots=True)
class RenderRequest:
    """
    Validated render parameters.

    Attributes:
        template: Requested card id, or None to pick one at random
        resolution: Output card width in pixels
        premium: Render the golden variant
        locale: Catalog and typography locale
    """

    template: str | None
    resolution: int = DEFAULT_RESOLUTION
    premium: bool = False
    locale: LocaleCode = LocaleCode.EN_US

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, str] | None,
        default_resolution: int = DEFAULT_RESOLUTION,
        max_resolution: int = MAX_RESOLUTION,
    ) -> "RenderRequest":
        """Build a request from raw query parameters. Never raises."""
        params = params or {}
        return cls(
            template=params.get("template") or None,
            resolution=parse_resolution(
                params.get("resolution"), default_resolution, max_resolution
            ),
            premium=params.get("premium") == "true",
            locale=resolve_locale(params.get("locale")),
        )


@dataclass(frozen=True, slots=True)
class RenderJob:
    """Everything the rendering engine needs for one card image."""

    card: CardRecord
    texture: Image.Image
    resolution: int
    premium: bool
    font_profile: FontProfile
    locale: LocaleCode


@dataclass(frozen=True, slots=True)
class RenderResult:
    """
    Encoded render output.

    Attributes:
        body: Encoded image bytes
        content_type: MIME type of body
        cache_key: Storage key the image was written under, if any
    """

    body: bytes
    content_type: str
    cache_key: str | None = None
