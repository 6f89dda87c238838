"""API route modules."""

from src.api.routes.auth import router as auth_router
from src.api.routes.clients import router as clients_router
from src.api.routes.dashboard import router as dashboard_router
from src.api.routes.health import router as health_router
from src.api.routes.invoices import router as invoices_router
from src.api.routes.profile import router as profile_router
from src.api.routes.quotations import router as quotations_router

__all__ = [
    "health_router",
    "auth_router",
    "profile_router",
    "clients_router",
    "quotations_router",
    "invoices_router",
    "dashboard_router",
]
