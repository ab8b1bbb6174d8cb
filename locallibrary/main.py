"""
Main application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from locallibrary.config import Settings
from locallibrary.api.v1.catalog_endpoints import router as catalog_router
from locallibrary.api.v1.checkout_endpoints import router as checkout_router
from locallibrary.api.v1.dependencies import ServiceContainer, build_container


def create_app(
    container: Optional[ServiceContainer] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Pre-wired services (tests pass fakes here). When None,
                   the production container is built from settings at startup.
        settings: Configuration, read from the environment when None
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        app.state.container = container or build_container(settings)
        yield

    app = FastAPI(
        title="Local Library API",
        description="Catalog browsing and mock checkout for a local library bookshop.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Include API routers
    app.include_router(catalog_router, prefix="/api/v1", tags=["catalog"])
    app.include_router(checkout_router, prefix="/api/v1", tags=["checkout"])

    @app.get("/")
    def read_root():
        """Root endpoint."""
        return {
            "message": "Welcome to the Local Library API",
            "docs": "/docs",
            "health": "/api/v1/health",
        }

    return app


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("locallibrary.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)
