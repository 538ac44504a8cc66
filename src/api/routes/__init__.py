"""API route exports."""

from api.routes.analyses import router as analyses_router
from api.routes.health import router as health_router

__all__ = ["analyses_router", "health_router"]
