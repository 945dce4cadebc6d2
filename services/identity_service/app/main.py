"""FastAPI application for the Identity Service."""

from fastapi import FastAPI
from libs.common.error_handler import add_exception_handlers
from services.identity_service.routers import (
    admin_users_router,
    auth_router,
    users_router,
)


def include_identity_routers(app: FastAPI, prefix: str = "") -> None:
    """Mount identity routes. Profile routes go before the /users/{id} admin routes."""
    app.include_router(auth_router, prefix=prefix)
    app.include_router(users_router, prefix=prefix)
    app.include_router(admin_users_router, prefix=prefix)


def create_app() -> FastAPI:
    """Create and configure the Identity Service FastAPI app."""
    app = FastAPI(
        title="Storefront Identity Service",
        version="0.1.0",
        description="Accounts, email verification, login and address books.",
    )
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "identity"}

    include_identity_routers(app)
    return app


app = create_app()
