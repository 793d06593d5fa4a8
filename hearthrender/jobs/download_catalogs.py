"""
Download locale card catalogs.

Run this job to fetch the collectible card catalog for every supported locale
(or the ones named on the command line) into the catalog directory.
"""

import argparse
import asyncio
import logging

import httpx

from hearthrender.models.locale import LocaleCode
from hearthrender.services.card_database import download_catalog

logger = logging.getLogger(__name__)


async def run_download(locales: list[LocaleCode] | None = None) -> dict[str, bool]:
    """
    Download catalogs.

    Args:
        locales: Locales to fetch. Defaults to all supported locales.

    Returns:
        Dict mapping locale tag to whether its download succeeded.
    """
    results: dict[str, bool] = {}

    for locale in locales or list(LocaleCode):
        logger.info("Downloading %s catalog...", locale.value)
        try:
            path = await download_catalog(locale)
            logger.info("Downloaded %s catalog to %s", locale.value, path)
            results[locale.value] = True
        except httpx.HTTPError as e:
            logger.error("Failed to download %s catalog: %s", locale.value, e)
            results[locale.value] = False

    return results


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Download card catalogs")
    parser.add_argument(
        "locales",
        nargs="*",
        choices=[locale.value for locale in LocaleCode],
        help="Locales to download (default: all)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    locales = [LocaleCode(value) for value in args.locales] or None
    results = asyncio.run(run_download(locales))
    if not all(results.values()):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
