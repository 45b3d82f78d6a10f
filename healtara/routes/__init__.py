"""Routes."""
from healtara.routes.api import router as api_router
from healtara.routes.sites import router as sites_router

__all__ = ["api_router", "sites_router"]
