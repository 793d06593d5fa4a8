"""
Render failure classification.

Two families of errors exist and they are never mixed:

- RenderError: request-level, explainable failures. Each carries a
  FailureKind, a human-readable detail and the HTTP status the caller
  receives. The response body is always {"error": kind, "detail": detail}.
- ConfigurationError: the process is not fit to serve (missing font asset,
  unreadable catalog). These are never turned into a response body; they
  propagate to whatever is hosting the pipeline.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of request-level failures."""

    CARD_NOT_FOUND = "card_not_found"
    TEXTURE_NOT_FOUND = "texture_not_found"
    RENDER_FAILED = "render_failed"
    CACHE_WRITE_FAILED = "cache_write_failed"


class FailureBody(BaseModel):
    """JSON body returned for a failed render request."""

    error: FailureKind = Field(..., description="Classification of the failure")
    detail: str = Field(..., description="What went wrong, with enough context to diagnose")


class RenderError(Exception):
    """
    Base class for request-level render failures.

    Subclass this for errors the pipeline knows how to report.
    """

    def __init__(self, kind: FailureKind, detail: str, status_code: int = 500):
        self.kind = kind
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)

    def to_body(self) -> FailureBody:
        """Convert to the response body model."""
        return FailureBody(error=self.kind, detail=self.detail)


class CardNotFoundError(RenderError):
    """An explicitly requested card id has no catalog entry."""

    def __init__(self, card_id: str, locale: str):
        self.card_id = card_id
        self.locale = locale
        super().__init__(
            kind=FailureKind.CARD_NOT_FOUND,
            detail=f"Card '{card_id}' not found in {locale} catalog",
            status_code=404,
        )


class ArtworkNotFoundError(RenderError):
    """
    The artwork source did not deliver a usable image.

    Covers non-2xx responses, transport errors (upstream_status is None)
    and bodies that cannot be decoded as an image.
    """

    def __init__(self, url: str, upstream_status: int | None, reason: str | None = None):
        self.url = url
        self.upstream_status = upstream_status
        if reason is None:
            reason = f"unexpected status code {upstream_status}"
        super().__init__(
            kind=FailureKind.TEXTURE_NOT_FOUND,
            detail=f"Failed to fetch texture from {url}: {reason}",
            status_code=502,
        )


class RenderFailedError(RenderError):
    """The rendering engine raised or did not finish in time."""

    def __init__(self, detail: str):
        super().__init__(kind=FailureKind.RENDER_FAILED, detail=detail, status_code=500)


class CacheWriteError(RenderError):
    """The rendered image could not be persisted under its cache key."""

    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(
            kind=FailureKind.CACHE_WRITE_FAILED,
            detail=f"Failed to store render at '{key}': {reason}",
            status_code=500,
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigurationError(Exception):
    """The service is misconfigured and must not serve requests."""


class FontAssetError(ConfigurationError):
    """A required font file is missing, or fonts were never registered."""


class CatalogError(ConfigurationError):
    """A locale catalog is missing or cannot be parsed."""
