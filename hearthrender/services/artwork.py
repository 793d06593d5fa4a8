"""
Card artwork client.

Fetches the original artwork for a card id from the art CDN. One attempt
per request; any failure is reported as ArtworkNotFoundError.
"""

import io
import logging

import httpx
from PIL import Image, UnidentifiedImageError

from hearthrender.config import settings
from hearthrender.models.failure import ArtworkNotFoundError

logger = logging.getLogger(__name__)


class ArtworkFetcher:
    """
    Client for the artwork CDN.

    Reuses a shared httpx.AsyncClient when one is given, otherwise opens a
    short-lived client per fetch.
    """

    def __init__(
        self,
        base_url: str | None = None,
        sentinel_id: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            base_url: Artwork base URL. Defaults to settings.artwork_base_url.
            sentinel_id: Id fetched when no card was resolved.
                Defaults to settings.sentinel_card_id.
            client: Shared HTTP client.
            timeout: Request timeout in seconds. Defaults to settings.fetch_timeout.
        """
        self.base_url = (base_url or settings.artwork_base_url).rstrip("/")
        self.sentinel_id = sentinel_id or settings.sentinel_card_id
        self.client = client
        self.timeout = timeout if timeout is not None else settings.fetch_timeout

    def artwork_url(self, card_id: str | None) -> str:
        """URL of the artwork for a card id, or of the sentinel artwork."""
        return f"{self.base_url}/{card_id or self.sentinel_id}.png"

    async def fetch(self, card_id: str | None) -> bytes:
        """
        Download artwork bytes.

        Args:
            card_id: Card id, or None to fetch the sentinel artwork

        Returns:
            The complete response body.

        Raises:
            ArtworkNotFoundError: On a non-2xx status or a transport error
        """
        url = self.artwork_url(card_id)

        try:
            if self.client is not None:
                response = await self.client.get(url, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url)
        except httpx.RequestError as exc:
            logger.warning("Artwork request to %s failed: %s", url, exc)
            raise ArtworkNotFoundError(url, None, reason=f"request failed ({exc})") from exc

        if not response.is_success:
            logger.warning("Artwork request to %s returned %d", url, response.status_code)
            raise ArtworkNotFoundError(url, response.status_code)

        return response.content


def decode_artwork(data: bytes, url: str) -> Image.Image:
    """
    Decode downloaded artwork into an image.

    Args:
        data: Complete artwork body
        url: Where the body came from, for error reporting

    Raises:
        ArtworkNotFoundError: If the body is not a readable image
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise ArtworkNotFoundError(url, 200, reason=f"undecodable image ({exc})") from exc
    return image
