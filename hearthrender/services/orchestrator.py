"""
Render request pipeline.

A request moves through the stages

    RESOLVING_LOCALE -> RESOLVING_CARD -> FETCHING_ARTWORK -> RENDERING -> DONE

strictly in order, awaiting each stage's I/O before starting the next. Any
stage may end the run in FAILED by raising a RenderError; the error is
re-raised to the caller unchanged. ConfigurationErrors propagate without
touching the run state, since they describe the process rather than the
request.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

import httpx
from PIL import Image

from hearthrender.config import Settings
from hearthrender.models.card import CardRecord
from hearthrender.models.failure import ConfigurationError, RenderError, RenderFailedError
from hearthrender.models.font_profile import FontProfile
from hearthrender.models.locale import LocaleCode
from hearthrender.models.render import RenderJob, RenderRequest, RenderResult
from hearthrender.services.artwork import ArtworkFetcher, decode_artwork
from hearthrender.services.card_database import CardRepository
from hearthrender.services.font_profiles import resolve_font_profile
from hearthrender.services.font_registry import FontRegistry, register_fonts
from hearthrender.services.publisher import Publisher, build_cache_key, create_object_store
from hearthrender.services.renderer import PillowCardRenderer, RenderingEngine

logger = logging.getLogger(__name__)


class RenderStage(str, Enum):
    """Pipeline states."""

    RESOLVING_LOCALE = "resolving_locale"
    RESOLVING_CARD = "resolving_card"
    FETCHING_ARTWORK = "fetching_artwork"
    RENDERING = "rendering"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RenderRun:
    """
    Mutable state of one request's trip through the pipeline.

    Owned by a single pipeline invocation; never shared between requests.
    """

    request: RenderRequest
    stage: RenderStage = RenderStage.RESOLVING_LOCALE
    history: list[RenderStage] = field(default_factory=lambda: [RenderStage.RESOLVING_LOCALE])
    locale: LocaleCode | None = None
    font_profile: FontProfile | None = None
    card: CardRecord | None = None
    card_id: str | None = None
    randomly_selected: bool = False
    artwork_url: str | None = None
    cache_key: str | None = None
    error: RenderError | None = None

    def advance(self, stage: RenderStage) -> None:
        logger.debug("RENDER_STAGE %s -> %s", self.stage.value, stage.value)
        self.stage = stage
        self.history.append(stage)


class RenderPipeline:
    """Runs render requests against shared collaborators."""

    def __init__(
        self,
        repository: CardRepository,
        fetcher: ArtworkFetcher,
        engine: RenderingEngine,
        publisher: Publisher,
        fonts: FontRegistry,
        *,
        render_version: str = "latest",
        render_timeout: float | None = None,
    ) -> None:
        self.repository = repository
        self.fetcher = fetcher
        self.engine = engine
        self.publisher = publisher
        self.fonts = fonts
        self.render_version = render_version
        self.render_timeout = render_timeout

    async def run(self, request: RenderRequest) -> RenderResult:
        """
        Render a card.

        Args:
            request: Validated request parameters

        Returns:
            The encoded (and possibly cached) image.

        Raises:
            RenderError: Request-level failure (card, artwork, render, cache)
            ConfigurationError: Fonts not registered or catalog unusable
        """
        return await self.execute(RenderRun(request=request))

    async def execute(self, run: RenderRun) -> RenderResult:
        """Drive an existing run to completion, recording each stage on it."""
        try:
            locale, font_profile = self._resolve_locale(run)

            run.advance(RenderStage.RESOLVING_CARD)
            card = await self._resolve_card(run, locale)

            run.advance(RenderStage.FETCHING_ARTWORK)
            texture = await self._fetch_artwork(run)

            run.advance(RenderStage.RENDERING)
            job = RenderJob(
                card=card,
                texture=texture,
                resolution=run.request.resolution,
                premium=run.request.premium,
                font_profile=font_profile,
                locale=locale,
            )
            bitmap = await self._render(run, job)

            result = await self.publisher.publish(bitmap, run.cache_key)
        except RenderError as exc:
            run.error = exc
            run.advance(RenderStage.FAILED)
            logger.warning(
                "RENDER_FAILED template=%s locale=%s kind=%s: %s",
                run.request.template,
                run.request.locale.value,
                exc.kind.value,
                exc.detail,
            )
            raise

        run.advance(RenderStage.DONE)
        logger.info(
            "RENDER_DONE card=%s locale=%s resolution=%d premium=%s bytes=%d cached=%s",
            run.card_id,
            run.locale.value if run.locale else None,
            run.request.resolution,
            run.request.premium,
            len(result.body),
            result.cache_key is not None,
        )
        return result

    def _resolve_locale(self, run: RenderRun) -> tuple[LocaleCode, FontProfile]:
        locale = run.request.locale
        font_profile = resolve_font_profile(locale)
        run.locale = locale
        run.font_profile = font_profile
        return locale, font_profile

    async def _resolve_card(self, run: RenderRun, locale: LocaleCode) -> CardRecord:
        lookup = await self.repository.lookup(locale, run.request.template)

        card = lookup.record or CardRecord.placeholder()
        run.card = card
        run.card_id = lookup.card_id
        run.randomly_selected = lookup.randomly_selected
        if lookup.card_id is not None:
            run.cache_key = build_cache_key(
                lookup.card_id, locale, run.request.resolution, self.render_version
            )
        return card

    async def _fetch_artwork(self, run: RenderRun) -> Image.Image:
        run.artwork_url = self.fetcher.artwork_url(run.card_id)
        data = await self.fetcher.fetch(run.card_id)
        return await asyncio.to_thread(decode_artwork, data, run.artwork_url)

    async def _render(self, run: RenderRun, job: RenderJob) -> Image.Image:
        self.fonts.require(job.font_profile.families())

        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.engine.render, job), timeout=self.render_timeout
            )
        except TimeoutError as exc:
            raise RenderFailedError(
                f"Render of {run.card_id} did not finish within {self.render_timeout}s"
            ) from exc
        except ConfigurationError:
            raise
        except Exception as exc:
            raise RenderFailedError(
                f"Render of {run.card_id} failed: {type(exc).__name__}: {exc}"
            ) from exc


def build_pipeline(
    config: Settings,
    client: httpx.AsyncClient | None = None,
    fonts: FontRegistry | None = None,
) -> RenderPipeline:
    """
    Assemble a pipeline from settings.

    Registers fonts first, so a missing font asset fails here rather than
    on the first request.

    Raises:
        FontAssetError: If a font asset is missing
    """
    fonts = register_fonts(config.font_dir, fonts)
    return RenderPipeline(
        repository=CardRepository(config.catalog_dir),
        fetcher=ArtworkFetcher(
            base_url=config.artwork_base_url,
            sentinel_id=config.sentinel_card_id,
            client=client,
            timeout=config.fetch_timeout,
        ),
        engine=PillowCardRenderer(fonts),
        publisher=Publisher(create_object_store(config, client)),
        fonts=fonts,
        render_version=config.render_version,
        render_timeout=config.render_timeout,
    )
