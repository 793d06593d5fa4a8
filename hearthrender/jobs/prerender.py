"""
Pre-render cards into the render cache.

Renders a list of card ids for one locale and resolution so later requests
can be served from the object store.

Usage:
    HEARTHRENDER_CACHE_BACKEND=local python -m hearthrender.jobs.prerender \\
        --locale enUS --resolution 256 EX1_001 CS2_029
"""

import argparse
import asyncio
import logging

import httpx

from hearthrender.config import Settings, settings
from hearthrender.models.failure import RenderError
from hearthrender.models.locale import resolve_locale
from hearthrender.models.render import RenderRequest
from hearthrender.services.orchestrator import RenderPipeline, build_pipeline

logger = logging.getLogger(__name__)


async def prerender_cards(
    pipeline: RenderPipeline,
    card_ids: list[str],
    locale: str,
    resolution: int,
    premium: bool = False,
) -> dict[str, str | None]:
    """
    Render each card id once.

    Args:
        pipeline: Pipeline to render with
        card_ids: Ids to render, in order
        locale: Locale tag (unsupported tags fall back to the default)
        resolution: Output width
        premium: Render golden variants

    Returns:
        Dict mapping card id to its cache key, or None if the render failed
        or was not stored.
    """
    results: dict[str, str | None] = {}

    for card_id in card_ids:
        request = RenderRequest(
            template=card_id,
            resolution=resolution,
            premium=premium,
            locale=resolve_locale(locale),
        )
        try:
            result = await pipeline.run(request)
        except RenderError as e:
            logger.error("Failed to render %s: %s", card_id, e.detail)
            results[card_id] = None
            continue

        logger.info("Rendered %s -> %s", card_id, result.cache_key)
        results[card_id] = result.cache_key

    return results


async def run_prerender(
    config: Settings,
    card_ids: list[str],
    locale: str,
    resolution: int,
    premium: bool = False,
) -> dict[str, str | None]:
    """Build a pipeline from config and pre-render card_ids."""
    if config.cache_backend == "none":
        logger.warning("Cache backend is 'none'; renders will not be stored")

    async with httpx.AsyncClient(timeout=config.fetch_timeout) as client:
        pipeline = build_pipeline(config, client)
        return await prerender_cards(pipeline, card_ids, locale, resolution, premium)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Pre-render cards into the cache")
    parser.add_argument("card_ids", nargs="+", help="Card ids to render")
    parser.add_argument("--locale", default="enUS", help="Locale tag")
    parser.add_argument(
        "--resolution",
        type=int,
        default=settings.default_resolution,
        help="Output width in pixels",
    )
    parser.add_argument("--premium", action="store_true", help="Render golden cards")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    results = asyncio.run(
        run_prerender(settings, args.card_ids, args.locale, args.resolution, args.premium)
    )
    failed = [card_id for card_id, key in results.items() if key is None]
    if failed:
        logger.warning("%d of %d cards not stored: %s", len(failed), len(results), failed)


if __name__ == "__main__":
    main()
