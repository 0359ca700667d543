"""FastAPI routers and dependencies."""

from slashfill.api.deps import get_component_factory
from slashfill.api.fill import router as fill_router

__all__ = [
    "get_component_factory",
    "fill_router",
]
