from routes.reports import router as reports_router
from routes.zones import router as zones_router
from routes.analytics import router as analytics_router

__all__ = ["reports_router", "zones_router", "analytics_router"]
