from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hearthrender.api import health_router, render_router
from hearthrender.config import settings
from hearthrender.services.orchestrator import build_pipeline


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Register fonts and open the shared HTTP client for the app's lifetime."""
    async with httpx.AsyncClient(timeout=settings.fetch_timeout) as client:
        app.state.pipeline = build_pipeline(settings, client)
        yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("hearthrender"),
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(render_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)
