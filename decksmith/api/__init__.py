from decksmith.api.health import router as health_router
from decksmith.api.resolve import router as resolve_router

__all__ = [
    "health_router",
    "resolve_router",
]
