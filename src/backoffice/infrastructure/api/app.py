"""FastAPI application factory.

Usage:
    uvicorn backoffice.infrastructure.api.app:create_app --factory
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backoffice.infrastructure.api.errors import install_error_handlers
from backoffice.infrastructure.api.routes import categories, dashboard, orders, products
from backoffice.infrastructure.bootstrap import Repositories, build_repositories
from backoffice.infrastructure.config import Settings
from backoffice.infrastructure.logging import configure_logging


def create_app(
    settings: Settings | None = None,
    repositories: Repositories | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings)

    app = FastAPI(
        title="Store Back-Office API",
        description="Orders, catalog and reporting for the store back office",
    )
    app.state.settings = settings
    app.state.repositories = repositories or build_repositories(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    app.include_router(orders.router)
    app.include_router(products.router)
    app.include_router(categories.router)
    app.include_router(dashboard.router)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "environment": settings.environment}

    return app
