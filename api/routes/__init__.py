"""API Routes."""

from api.routes.dashboard import router as dashboard_router
from api.routes.extract import router as extract_router
from api.routes.health import router as health_router

__all__ = ["dashboard_router", "extract_router", "health_router"]
