"""
Card catalog service.

Loads per-locale card catalogs and resolves a single card for rendering,
either by id or by uniform random choice.
"""

import asyncio
import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from hearthrender.config import settings
from hearthrender.models.card import CardRecord
from hearthrender.models.failure import CardNotFoundError, CatalogError
from hearthrender.models.locale import LocaleCode

logger = logging.getLogger(__name__)

CATALOG_FILENAME = "cards.collectible.json"


async def download_catalog(
    locale: LocaleCode,
    output_dir: Path | None = None,
    source_url: str | None = None,
) -> Path:
    """
    Download the collectible card catalog for a locale.

    Args:
        locale: Catalog locale
        output_dir: Where to save the file. Defaults to settings.catalog_dir
        source_url: Catalog API base. Defaults to settings.catalog_source_url

    Returns:
        Path to downloaded file (<output_dir>/<locale>.json).

    Raises:
        httpx.HTTPError: If download fails
    """
    output_dir = output_dir or settings.catalog_dir
    source_url = source_url or settings.catalog_source_url
    output_path = output_dir / f"{locale.value}.json"

    output_path.parent.mkdir(parents=True, exist_ok=True)

    url = f"{source_url}/{locale.value}/{CATALOG_FILENAME}"
    async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as client:
        async with client.stream("GET", url, timeout=300.0) as response:
            response.raise_for_status()
            with open(output_path, "wb") as f:
                async for chunk in response.aiter_bytes(8192):
                    f.write(chunk)

    return output_path


def load_catalog(path: Path) -> list[dict[str, Any]]:
    """
    Load a catalog file.

    Args:
        path: Path to a JSON array of card objects

    Returns:
        Card objects in file order.

    Raises:
        CatalogError: If the file is missing, unparsable, or not a JSON array of objects
    """
    if not path.exists():
        raise CatalogError(
            f"Card catalog not found at {path}. "
            "Run `python -m hearthrender.jobs.download_catalogs` first."
        )

    try:
        with open(path, encoding="utf-8") as f:
            cards = json.load(f)
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Card catalog at {path} is corrupted: {exc}") from exc

    if not isinstance(cards, list):
        raise CatalogError(f"Card catalog at {path} must be a JSON array")

    if not all(isinstance(card, dict) for card in cards):
        raise CatalogError(f"Card catalog at {path} must contain only card objects")

    return cards


def catalog_ids(cards: list[dict[str, Any]]) -> list[str]:
    """Distinct card ids in catalog order."""
    ids: dict[str, None] = {}
    for card in cards:
        card_id = card.get("id")
        if card_id is not None:
            ids.setdefault(str(card_id), None)
    return list(ids)


def find_card(cards: list[dict[str, Any]], card_id: str) -> dict[str, Any] | None:
    """
    Find the first catalog entry with a matching id.

    Ids are compared as strings so numeric catalog ids match string requests.
    Entries without an id never match.
    """
    for card in cards:
        entry_id = card.get("id")
        if entry_id is not None and str(entry_id) == card_id:
            return card
    return None


@dataclass(frozen=True, slots=True)
class CardLookup:
    """
    Outcome of resolving a card.

    Attributes:
        record: Normalized card, or None when the catalog has no cards at all
        card_id: Id that was looked up (requested or randomly chosen)
        randomly_selected: True when no id was requested
    """

    record: CardRecord | None
    card_id: str | None
    randomly_selected: bool


class CardRepository:
    """
    Locale catalogs, loaded on first use and kept for the process lifetime.

    A catalog that fails to load raises CatalogError on every lookup for
    that locale; it is never cached.
    """

    def __init__(self, catalog_dir: Path | None = None, rng: random.Random | None = None) -> None:
        self.catalog_dir = catalog_dir or settings.catalog_dir
        self.rng = rng or random.Random()
        self._catalogs: dict[LocaleCode, list[dict[str, Any]]] = {}

    def catalog_path(self, locale: LocaleCode) -> Path:
        return self.catalog_dir / f"{locale.value}.json"

    async def get_catalog(self, locale: LocaleCode) -> list[dict[str, Any]]:
        """
        Get the catalog for a locale, reading it off the event loop on first use.

        Raises:
            CatalogError: If the catalog cannot be loaded
        """
        cards = self._catalogs.get(locale)
        if cards is None:
            cards = await asyncio.to_thread(load_catalog, self.catalog_path(locale))
            self._catalogs[locale] = cards
            logger.info("Loaded %d cards for %s", len(cards), locale.value)
        return cards

    async def lookup(self, locale: LocaleCode, card_id: str | None) -> CardLookup:
        """
        Resolve a card for rendering.

        Args:
            locale: Catalog locale
            card_id: Requested id, or None to choose uniformly at random

        Returns:
            CardLookup with the normalized record. The record is None only
            when no id was requested and the catalog is empty.

        Raises:
            CatalogError: If the catalog cannot be loaded
            CardNotFoundError: If an explicitly requested id does not exist
        """
        cards = await self.get_catalog(locale)

        randomly_selected = card_id is None
        if card_id is None:
            ids = catalog_ids(cards)
            if not ids:
                logger.warning("Catalog for %s has no card ids", locale.value)
                return CardLookup(record=None, card_id=None, randomly_selected=True)
            card_id = self.rng.choice(ids)
            logger.info("Randomly selected card %s from %d (%s)", card_id, len(ids), locale.value)

        entry = find_card(cards, card_id)
        if entry is None:
            raise CardNotFoundError(card_id, locale.value)

        return CardLookup(
            record=CardRecord.from_catalog_entry(entry),
            card_id=card_id,
            randomly_selected=randomly_selected,
        )
