"""
Render output publishing.

Encodes the finished bitmap once and, when the render has a cache key and a
store is configured, writes it to the store before handing back the result.
A failed write fails the request.
"""

import asyncio
import io
import logging
from pathlib import Path
from typing import Protocol

import httpx
from PIL import Image

from hearthrender.config import OUTPUT_CONTENT_TYPE, OUTPUT_FORMAT, Settings
from hearthrender.models.failure import CacheWriteError
from hearthrender.models.locale import LocaleCode
from hearthrender.models.render import RenderResult

logger = logging.getLogger(__name__)


def build_cache_key(
    card_id: str,
    locale: LocaleCode,
    resolution: int,
    version: str = "latest",
) -> str:
    """Storage key for a rendered card: v1/render/<version>/<locale>/<res>x/<id>.png"""
    return f"v1/render/{version}/{locale.value}/{resolution}x/{card_id}.{OUTPUT_FORMAT}"


class ObjectStore(Protocol):
    """Durable key/value blob storage."""

    async def put(self, key: str, body: bytes, content_type: str) -> None: ...


class StoreError(Exception):
    """Raised when an object store rejects or fails a write."""


class LocalObjectStore:
    """Stores objects as files under a root directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, key: str) -> Path:
        return self.root / key

    def _write(self, key: str, body: bytes) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(body)

    async def put(self, key: str, body: bytes, content_type: str) -> None:
        try:
            await asyncio.to_thread(self._write, key, body)
        except OSError as exc:
            raise StoreError(f"Failed to write {self.path_for(key)}: {exc}") from exc


class HttpObjectStore:
    """
    Stores objects with HTTP PUT against a bucket endpoint.

    Works with S3-compatible endpoints that accept unsigned or pre-authorized
    PUTs at <bucket_url>/<key>.
    """

    def __init__(
        self,
        bucket_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.bucket_url = bucket_url.rstrip("/")
        self.client = client
        self.timeout = timeout

    async def put(self, key: str, body: bytes, content_type: str) -> None:
        url = f"{self.bucket_url}/{key}"
        headers = {"Content-Type": content_type}

        try:
            if self.client is not None:
                response = await self.client.put(
                    url, content=body, headers=headers, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.put(url, content=body, headers=headers)
        except httpx.RequestError as exc:
            raise StoreError(f"Network error storing {url}: {exc}") from exc

        if not response.is_success:
            raise StoreError(f"Failed to store {url}: HTTP {response.status_code}")


def create_object_store(
    config: Settings,
    client: httpx.AsyncClient | None = None,
) -> ObjectStore | None:
    """
    Build the store selected by config.cache_backend.

    Returns:
        The configured store, or None when caching is disabled.

    Raises:
        ValueError: If the http backend is selected without a bucket URL
    """
    if config.cache_backend == "local":
        return LocalObjectStore(config.cache_dir)
    if config.cache_backend == "http":
        if not config.cache_bucket_url:
            raise ValueError("cache_bucket_url is required when cache_backend is 'http'")
        return HttpObjectStore(config.cache_bucket_url, client=client)
    return None


def encode_image(bitmap: Image.Image) -> bytes:
    """Encode a bitmap in the output format."""
    buffer = io.BytesIO()
    bitmap.save(buffer, format=OUTPUT_FORMAT.upper())
    return buffer.getvalue()


class Publisher:
    """Turns finished bitmaps into RenderResults, caching when possible."""

    def __init__(self, store: ObjectStore | None = None) -> None:
        self.store = store

    async def publish(self, bitmap: Image.Image, cache_key: str | None) -> RenderResult:
        """
        Encode and optionally persist a render.

        Args:
            bitmap: Finished card image
            cache_key: Storage key, or None when no card id was resolved

        Returns:
            RenderResult; cache_key is set only if the image was stored.

        Raises:
            CacheWriteError: If the store write fails
        """
        body = await asyncio.to_thread(encode_image, bitmap)

        if cache_key is None or self.store is None:
            return RenderResult(body=body, content_type=OUTPUT_CONTENT_TYPE)

        try:
            await self.store.put(cache_key, body, OUTPUT_CONTENT_TYPE)
        except StoreError as exc:
            logger.error("Cache write failed for %s: %s", cache_key, exc)
            raise CacheWriteError(cache_key, str(exc)) from exc

        logger.info("Stored render at %s (%d bytes)", cache_key, len(body))
        return RenderResult(body=body, content_type=OUTPUT_CONTENT_TYPE, cache_key=cache_key)
