from hearthrender.api.health import router as health_router
from hearthrender.api.render import router as render_router

__all__ = [
    "health_router",
    "render_router",
]
