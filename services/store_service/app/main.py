"""FastAPI application for the Store Service."""

from fastapi import FastAPI
from libs.common.error_handler import add_exception_handlers
from services.store_service.routers import (
    admin_catalog_router,
    cart_router,
    catalog_router,
    orders_router,
    wishlist_router,
)


def include_store_routers(app: FastAPI, prefix: str = "") -> None:
    """Mount store routes (catalog, cart, wishlist, orders, admin catalog)."""
    app.include_router(catalog_router, prefix=prefix)
    app.include_router(admin_catalog_router, prefix=prefix)
    app.include_router(cart_router, prefix=prefix)
    app.include_router(wishlist_router, prefix=prefix)
    app.include_router(orders_router, prefix=prefix)


def create_app() -> FastAPI:
    """Create and configure the Store Service FastAPI app."""
    app = FastAPI(
        title="Storefront Store Service",
        version="0.1.0",
        description="Jewelry catalog, reviews, cart, wishlist and orders.",
    )
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "store"}

    include_store_routers(app)
    return app


app = create_app()
