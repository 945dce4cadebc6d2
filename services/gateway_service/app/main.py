"""FastAPI application entrypoint for the storefront gateway.

Mounts the identity and store services in one process under ``/api``; both
share the same database and ``libs`` package.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from services.identity_service.app.main import include_identity_routers
from services.store_service.app.main import include_store_routers

API_PREFIX = "/api"


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()
    app = FastAPI(
        title="Storefront Gateway",
        version="0.1.0",
        description="Jewelry storefront API: accounts, catalog, cart, wishlist, orders.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    @app.get(f"{API_PREFIX}/health", tags=["system"], include_in_schema=False)
    async def health_check() -> dict[str, str]:
        """Simple readiness endpoint."""
        return {"status": "ok"}

    include_identity_routers(app, prefix=API_PREFIX)
    include_store_routers(app, prefix=API_PREFIX)
    return app


app = create_app()
