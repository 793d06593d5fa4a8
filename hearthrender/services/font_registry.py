"""
Process-wide font registration.

Fonts are registered once, at startup, before any render is attempted.
Registration validates that every asset in FONT_ASSETS exists under the
font directory; a missing file is a configuration error and nothing is
registered. Repeated registration is a no-op.
"""

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from hearthrender.models.failure import FontAssetError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FontAsset:
    """A font file and the family name it is registered under."""

    path: str
    family: str
    weight: str = "normal"
    style: str = "normal"


FONT_ASSETS: tuple[FontAsset, ...] = (
    FontAsset("belwe/belwe-extrabold.ttf", "Belwe"),
    FontAsset(
        "franklin-gothic-bold/franklingothic-demicd.ttf", "Franklin Gothic Bold", weight="bold"
    ),
    FontAsset(
        "franklin-gothic-italic/franklingothic-medcdit.ttf",
        "Franklin Gothic Italic",
        style="italic",
    ),
    FontAsset("franklin-gothic/franklingothic-medcd.ttf", "Franklin Gothic"),
    FontAsset("blizzard-global/BlizzardGlobal-zhTW.ttf", "BlizzardGlobal"),
    FontAsset("leisu-demi-b5ar/Leisu-Demi-B5RegularAR.ttf", "AR Leisu Demi B5"),
)


class FontRegistry:
    """
    Family name -> font file mapping shared by all renders.

    Safe to call register() from several threads; only the first
    successful call has an effect.
    """

    def __init__(self) -> None:
        self._paths: dict[str, Path] = {}
        self._registered = False
        self._lock = threading.Lock()

    @property
    def registered(self) -> bool:
        return self._registered

    def register(self, font_dir: Path, assets: Iterable[FontAsset] = FONT_ASSETS) -> None:
        """
        Validate and register font assets.

        Args:
            font_dir: Directory the asset paths are relative to
            assets: Assets to register. Defaults to FONT_ASSETS

        Raises:
            FontAssetError: If any asset file does not exist
        """
        with self._lock:
            if self._registered:
                logger.debug("Fonts already registered, skipping")
                return

            assets = list(assets)
            resolved: list[tuple[FontAsset, Path]] = []
            for asset in assets:
                font_path = font_dir / asset.path
                if not font_path.exists():
                    raise FontAssetError(f"Font not found: {font_path}")
                resolved.append((asset, font_path))

            for asset, font_path in resolved:
                if asset.family in self._paths:
                    # First registration of a family wins
                    continue
                self._paths[asset.family] = font_path

            self._registered = True
            logger.info("Registered %d font families from %s", len(self._paths), font_dir)

    def font_path(self, family: str) -> Path:
        """
        Get the file registered for a family.

        Raises:
            FontAssetError: If the family is not registered
        """
        try:
            return self._paths[family]
        except KeyError:
            raise FontAssetError(f"Font family not registered: {family}") from None

    def families(self) -> frozenset[str]:
        return frozenset(self._paths)

    def require(self, families: Iterable[str]) -> None:
        """
        Check that fonts are registered and cover the given families.

        Raises:
            FontAssetError: If registration never happened or a family is missing
        """
        if not self._registered:
            raise FontAssetError("Fonts must be registered before rendering")
        missing = sorted(set(families) - set(self._paths))
        if missing:
            raise FontAssetError(f"Font families not registered: {missing}")


# Process-wide registry
font_registry = FontRegistry()


def register_fonts(font_dir: Path, registry: FontRegistry | None = None) -> FontRegistry:
    """Register FONT_ASSETS from font_dir into the process-wide registry."""
    registry = registry or font_registry
    registry.register(font_dir)
    return registry
