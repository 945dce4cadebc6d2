"""Identity service routers package."""

from services.identity_service.routers.admin import router as admin_users_router
from services.identity_service.routers.auth import router as auth_router
from services.identity_service.routers.users import router as users_router

__all__ = [
    "admin_users_router",
    "auth_router",
    "users_router",
]
